"""
Error taxonomy and the translator that turns errors into responses.
"""

from .exceptions import (
    ErrorKind,
    ApplicationError,
    invalid_request,
    invalid_request_from,
    method_not_allowed,
    not_found,
)
from .handler import ErrorHandler, kind_of, status_for

__all__ = [
    "ErrorKind",
    "ApplicationError",
    "invalid_request",
    "invalid_request_from",
    "method_not_allowed",
    "not_found",
    "ErrorHandler",
    "kind_of",
    "status_for",
]
