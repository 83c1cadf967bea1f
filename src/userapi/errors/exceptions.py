"""
=============================================================================
ERROR TAXONOMY
=============================================================================

Every failure a handler wants to report carries an ErrorKind. The kind
alone decides the HTTP status; nobody has to inspect messages or
exception class hierarchies to choose one.

    ┌──────────────────────┬────────┬──────────────────────────────────────┐
    │ ErrorKind            │ Status │ Raised when                          │
    ├──────────────────────┼────────┼──────────────────────────────────────┤
    │ INVALID_REQUEST      │  400   │ body fails schema validation,        │
    │                      │        │ duplicate login (when rejected)      │
    │ RESOURCE_NOT_FOUND   │  404   │ no route matches the path            │
    │ METHOD_NOT_ALLOWED   │  405   │ endpoint does not accept the method  │
    │ UNCLASSIFIED         │  500   │ anything else (bugs, surprises)      │
    └──────────────────────┴────────┴──────────────────────────────────────┘

UNCLASSIFIED is never raised on purpose. It is what ErrorHandler assumes
for any exception that does not carry a kind.

=============================================================================
USAGE
=============================================================================

    from userapi.errors import invalid_request_from, method_not_allowed

    if request.method != "POST":
        raise method_not_allowed(f"Method {request.method} is not allowed")

    try:
        payload = RegistrationRequest.model_validate_json(request.body)
    except ValidationError as e:
        raise invalid_request_from(e) from e

=============================================================================
"""

from enum import Enum
from typing import Dict, List, Optional


class ErrorKind(Enum):
    """Failure categories, valued by the HTTP status they map to."""

    INVALID_REQUEST = 400
    RESOURCE_NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    UNCLASSIFIED = 500

    @property
    def status_code(self) -> int:
        return self.value


class ApplicationError(Exception):
    """
    An expected, classified failure.

    Attributes:
        kind:    Category used to pick the HTTP status.
        message: Text sent to the client in the error body.
        code:    Application code sent as ``code``; defaults to the
                 kind's status code.
        headers: Extra response headers, e.g. ``Allow`` on a 405.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        code: Optional[int] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.code = code if code is not None else kind.status_code
        self.headers = headers or {}

    def __repr__(self) -> str:
        return f"ApplicationError({self.kind.name}, {self.message!r})"


# =============================================================================
# FACTORY FUNCTIONS
# =============================================================================

def invalid_request(message: str) -> ApplicationError:
    return ApplicationError(ErrorKind.INVALID_REQUEST, message)


def invalid_request_from(error: Exception) -> ApplicationError:
    """
    Wrap a lower-level failure (parse or validation error) as
    INVALID_REQUEST, keeping its message.
    """
    return ApplicationError(ErrorKind.INVALID_REQUEST, str(error))


def method_not_allowed(message: str, allowed: Optional[List[str]] = None) -> ApplicationError:
    """
    Args:
        message: Error text for the client.
        allowed: Methods the target does accept; sent as the Allow header.
    """
    headers = {"Allow": ", ".join(allowed)} if allowed else None
    return ApplicationError(ErrorKind.METHOD_NOT_ALLOWED, message, headers=headers)


def not_found(message: str) -> ApplicationError:
    return ApplicationError(ErrorKind.RESOURCE_NOT_FOUND, message)
