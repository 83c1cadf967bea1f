"""
=============================================================================
ERROR TRANSLATOR
=============================================================================

The single place where a failure becomes an HTTP response.

    handler raises ──► ErrorHandler.handle(error)
                            │
                            ├── kind_of(error)      ApplicationError → its kind
                            │                       anything else    → UNCLASSIFIED
                            ├── status_for(kind)    dict lookup, 500 by default
                            ├── log                 4xx WARNING, 5xx ERROR + traceback
                            └── render              {"code": ..., "message": ...}
                                                    Content-Type: application/json

Rendering can fail too (a message json cannot encode, a broken __str__).
That failure is logged and the client gets the chosen status with an
empty body. ``handle`` never raises, so a bad error can not take a worker
thread down with it.

=============================================================================
INSTALLATION
=============================================================================

    handler = error_handler.wrap(router.handle)   # router errors included
    handler = middleware.wrap(handler)            # access log sees final status

=============================================================================
"""

import logging
from typing import Callable, Optional

from ..api.schemas import ErrorResponse
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, ResponseBuilder
from ..http.status_codes import HTTPStatus
from .exceptions import ApplicationError, ErrorKind


logger = logging.getLogger(__name__)

Handler = Callable[[HTTPRequest], HTTPResponse]


_STATUS_BY_KIND = {
    ErrorKind.INVALID_REQUEST: HTTPStatus.BAD_REQUEST,
    ErrorKind.RESOURCE_NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorKind.METHOD_NOT_ALLOWED: HTTPStatus.METHOD_NOT_ALLOWED,
    ErrorKind.UNCLASSIFIED: HTTPStatus.INTERNAL_SERVER_ERROR,
}


def kind_of(error: BaseException) -> ErrorKind:
    """Kind carried by the error, UNCLASSIFIED when it carries none."""
    if isinstance(error, ApplicationError):
        return error.kind
    return ErrorKind.UNCLASSIFIED


def status_for(kind: ErrorKind) -> HTTPStatus:
    """HTTP status for a kind; 500 for anything not in the table."""
    return _STATUS_BY_KIND.get(kind, HTTPStatus.INTERNAL_SERVER_ERROR)


class ErrorHandler:
    """
    Translates exceptions into JSON error responses.

    Usage:
        errors = ErrorHandler()
        safe_handler = errors.wrap(router.handle)
        response = safe_handler(request)    # never raises
    """

    def handle(
        self,
        error: Exception,
        request: Optional[HTTPRequest] = None
    ) -> HTTPResponse:
        """
        Build the response for a failed request.

        Args:
            error: The exception that escaped a handler.
            request: The request being served, used only for the log line.

        Returns:
            The error response. Never raises.
        """
        kind = kind_of(error)
        status = status_for(kind)

        try:
            self._log(error, kind, status, request)
            return self._render(error, status)
        except Exception as e:
            logger.exception(f"Could not write {int(status)} error response: {e}")
            return HTTPResponse(status=status)

    def wrap(self, handler: Handler) -> Handler:
        """Return a handler that routes any exception through ``handle``."""
        def guarded(request: HTTPRequest) -> HTTPResponse:
            try:
                return handler(request)
            except Exception as e:
                return self.handle(e, request)

        return guarded

    def _log(
        self,
        error: Exception,
        kind: ErrorKind,
        status: HTTPStatus,
        request: Optional[HTTPRequest]
    ) -> None:
        target = f"{request.method} {request.path}" if request else "-"
        if status.is_server_error:
            logger.error(
                f"{target} failed with {type(error).__name__}: {error}",
                exc_info=error,
            )
        else:
            logger.warning(f"{target} rejected ({kind.name}): {error}")

    def _render(self, error: Exception, status: HTTPStatus) -> HTTPResponse:
        if isinstance(error, ApplicationError):
            code, message, headers = error.code, error.message, error.headers
        else:
            # Raw message goes to the client; acceptable for this demo service.
            code, message, headers = int(status), str(error), {}

        builder = (ResponseBuilder()
            .status(status)
            .json(ErrorResponse(
                code=code,
                message=message or type(error).__name__,
            ).model_dump()))
        for name, value in headers.items():
            builder.header(name, value)
        return builder.build()
