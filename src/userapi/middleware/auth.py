"""
=============================================================================
HTTP BASIC AUTHENTICATION
=============================================================================

    GET /api/hello HTTP/1.1
    Authorization: Basic YWRtaW46YWRtaW4=
                         └──────┬───────┘
                   base64("admin:admin")

    ┌──────────────────────────────────────┬─────────────────────────────────┐
    │ Request                              │ Result                          │
    ├──────────────────────────────────────┼─────────────────────────────────┤
    │ path not protected                   │ passed through untouched        │
    │ "/api/hello/" for "/api/hello"       │ protected, same as the router   │
    │ no Authorization header              │ 401 + WWW-Authenticate          │
    │ other scheme ("Bearer ...")          │ 401 + WWW-Authenticate          │
    │ not base64 / no ":" in decoded text  │ 401 + WWW-Authenticate          │
    │ verifier says no                     │ 401 + WWW-Authenticate          │
    │ verifier says yes                    │ handler runs                    │
    └──────────────────────────────────────┴─────────────────────────────────┘

The check for WHO may pass is a CredentialVerifier, a one-method object.
StaticCredentialVerifier (a single user name and password) is the one the
service ships with; anything else with ``verify(username, password)`` can
replace it.

=============================================================================
INTERVIEW QUESTIONS
=============================================================================

Q: "Why hmac.compare_digest instead of ==?"
A: "== stops at the first differing character, so response time leaks
   how much of a guess was right. compare_digest takes the same time
   for every input of a given length."

Q: "Is Basic auth secure?"
A: "Only over TLS. Base64 is an encoding, not encryption."

=============================================================================
"""

import base64
import binascii
import hmac
import logging
from typing import Iterable, Optional, Protocol

from .base import Middleware, NextHandler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, unauthorized
from ..http.router import normalize_path


logger = logging.getLogger(__name__)


class CredentialVerifier(Protocol):
    def verify(self, username: str, password: str) -> bool:
        ...


class StaticCredentialVerifier:
    """Accepts exactly one user name and password pair."""

    def __init__(self, username: str, password: str):
        self._username = username.encode("utf-8")
        self._password = password.encode("utf-8")

    def verify(self, username: str, password: str) -> bool:
        user_ok = hmac.compare_digest(username.encode("utf-8"), self._username)
        password_ok = hmac.compare_digest(password.encode("utf-8"), self._password)
        return user_ok and password_ok


def parse_basic_credentials(header: str) -> Optional[tuple[str, str]]:
    """
    Decode an ``Authorization: Basic`` value.

    Args:
        header: The full header value, e.g. "Basic YWRtaW46YWRtaW4=".

    Returns:
        (username, password), or None if the value is not valid Basic
        credentials. The password may contain ":"; only the first one
        separates it from the user name.
    """
    scheme, _, token = header.strip().partition(" ")
    if scheme.lower() != "basic" or not token:
        return None

    try:
        decoded = base64.b64decode(token.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None

    username, separator, password = decoded.partition(":")
    if not separator:
        return None
    return username, password


class BasicAuthMiddleware(Middleware):
    """
    Rejects requests to protected paths that lack valid Basic credentials.

    Args:
        verifier: Decides whether a user name and password are accepted.
        realm: Sent in the WWW-Authenticate challenge.
        paths: Paths to protect, compared after normalize_path so that
               "/api/hello/" is protected like "/api/hello". None
               protects every path.
    """

    def __init__(
        self,
        verifier: CredentialVerifier,
        realm: str = "myrealm",
        paths: Optional[Iterable[str]] = None,
    ):
        self.verifier = verifier
        self.realm = realm
        self.paths = {normalize_path(p) for p in paths} if paths is not None else None

    def is_protected(self, path: str) -> bool:
        return self.paths is None or normalize_path(path) in self.paths

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        if not self.is_protected(request.path):
            return next(request)

        header = request.get_header("Authorization")
        if not header:
            logger.debug(f"No credentials for {request.method} {request.path}")
            return unauthorized(self.realm)

        credentials = parse_basic_credentials(header)
        if credentials is None:
            logger.info(f"Malformed Basic credentials for {request.path}")
            return unauthorized(self.realm)

        username, password = credentials
        if not self.verifier.verify(username, password):
            logger.info(f"Rejected credentials for user '{username}' on {request.path}")
            return unauthorized(self.realm)

        return next(request)
