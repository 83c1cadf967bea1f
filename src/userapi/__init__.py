"""
=============================================================================
USERAPI - Greeting and User Registration over a Hand-Built HTTP/1.1 Server
=============================================================================

A small HTTP service with two endpoints, served by a raw-socket,
thread-pooled HTTP/1.1 server:

    GET  /api/hello?name=Ann        Basic auth (realm "myrealm")
                                    200 "Hello Ann!"  /  "Hello Anonymous!"

    POST /api/users/register        {"login": "...", "password": "..."}
                                    201 {"id": "<uuid>"}
                                    400 {"code": 400, "message": "..."}

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    userapi/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m userapi)
    ├── app.py               # AppContext, create_app()
    ├── server.py            # HTTPServer: transport + middleware + router
    ├── config.py            # ServerConfig dataclass
    ├── core/                # Sockets, connections, thread pool
    ├── http/                # Request parsing, responses, routing, query
    ├── middleware/          # Pipeline, access log, Basic auth
    ├── errors/              # ErrorKind, ApplicationError, ErrorHandler
    ├── api/                 # Pydantic request/response schemas
    ├── domain/              # User, NewUser, UserService, password encoding
    ├── data/                # UserStore protocol, InMemoryUserStore
    └── handlers/            # HelloHandler, RegistrationHandler

=============================================================================
QUICK START
=============================================================================

    from userapi import create_app, ServerConfig

    app = create_app(ServerConfig(port=8000))
    app.run()

    $ curl -u admin:admin "http://127.0.0.1:8000/api/hello?name=Ann"
    Hello Ann!

=============================================================================
"""

__version__ = "1.0.0"
__author__ = "Your Name"

from .server import HTTPServer
from .config import ServerConfig
from .app import AppContext, build_context, create_app

__all__ = [
    "HTTPServer",
    "ServerConfig",
    "AppContext",
    "build_context",
    "create_app",
    "__version__",
]
