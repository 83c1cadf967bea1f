"""
=============================================================================
APPLICATION WIRING
=============================================================================

Everything the endpoints share is built once, at startup, into an
AppContext and handed to the handler constructors. There are no
module-level singletons: two apps in one process (say, two tests) never
see each other's users.

    ServerConfig
         │
         ▼
    build_context(config) ──► AppContext
                                 ├── user_store          InMemoryUserStore
                                 ├── user_service        UserService(user_store)
                                 ├── password_encoder    Sha256PasswordEncoder
                                 ├── credential_verifier StaticCredentialVerifier
                                 └── error_handler       ErrorHandler
         │
         ▼
    create_app(config, context) ──► HTTPServer
                                      ├── LoggingMiddleware
                                      ├── BasicAuthMiddleware   (GET /api/hello)
                                      ├── /api/hello            HelloHandler
                                      └── /api/users/register   RegistrationHandler

=============================================================================
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .config import ServerConfig
from .data import InMemoryUserStore
from .domain import PasswordEncoder, Sha256PasswordEncoder, UserService
from .errors import ErrorHandler
from .handlers import HelloHandler, RegistrationHandler
from .middleware import (
    BasicAuthMiddleware,
    CredentialVerifier,
    LoggingMiddleware,
    StaticCredentialVerifier,
)
from .server import HTTPServer


HELLO_PATH = "/api/hello"
REGISTER_PATH = "/api/users/register"


@dataclass
class AppContext:
    """Collaborators shared by the handlers of one application."""

    config: ServerConfig
    user_store: InMemoryUserStore
    user_service: UserService
    password_encoder: PasswordEncoder
    credential_verifier: CredentialVerifier
    error_handler: ErrorHandler


def build_context(config: ServerConfig) -> AppContext:
    """Create the default collaborators for ``config``."""
    user_store = InMemoryUserStore(reject_duplicates=config.reject_duplicate_logins)
    return AppContext(
        config=config,
        user_store=user_store,
        user_service=UserService(user_store),
        password_encoder=Sha256PasswordEncoder(),
        credential_verifier=StaticCredentialVerifier(
            config.auth_username, config.auth_password
        ),
        error_handler=ErrorHandler(),
    )


def create_app(
    config: Optional[ServerConfig] = None,
    context: Optional[AppContext] = None,
) -> HTTPServer:
    """
    Build the service: server, middleware and both endpoints.

    Args:
        config: Settings; defaults to ``ServerConfig()``. Ignored when
                ``context`` is given, which carries its own.
        context: Pre-built collaborators, e.g. with a stub verifier.

    Returns:
        An HTTPServer ready for ``run()``.
    """
    if context is None:
        context = build_context(config or ServerConfig())
    config = context.config

    server = HTTPServer(config, error_handler=context.error_handler)

    server.use(LoggingMiddleware(
        log_format=config.log_format,
        log_level=logging.INFO,
    ))
    if config.auth_enabled:
        server.use(BasicAuthMiddleware(
            verifier=context.credential_verifier,
            realm=config.auth_realm,
            paths=[HELLO_PATH],
        ))

    server.add_route(HELLO_PATH, HelloHandler(), name="hello")
    server.add_route(
        REGISTER_PATH,
        RegistrationHandler(context.user_service, context.password_encoder),
        name="register",
    )

    return server
