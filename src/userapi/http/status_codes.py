"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The subset of RFC 7231 status codes this service can answer with.

    ┌────────┬───────────────────────────────────────────────────────────┐
    │  Code  │ Where it comes from                                       │
    ├────────┼───────────────────────────────────────────────────────────┤
    │  200   │ GET /api/hello                                            │
    │  201   │ POST /api/users/register                                  │
    │  400   │ invalid registration body, malformed request line         │
    │  401   │ Basic authentication missing or rejected                  │
    │  404   │ no route for the path                                     │
    │  405   │ wrong method for an endpoint                              │
    │  408   │ client too slow to send its request                       │
    │  413   │ request larger than max_request_size                      │
    │  500   │ anything unclassified                                     │
    │  503   │ worker queue full                                         │
    │  505   │ not HTTP/1.0 or HTTP/1.1                                  │
    └────────┴───────────────────────────────────────────────────────────┘

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status code as an integer enum.

    IntEnum members compare equal to plain ints, so
    ``response.status == 201`` works in handlers and tests alike.
    """

    # 2xx Success
    OK = 200
    CREATED = 201

    # 4xx Client Errors
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    REQUEST_TIMEOUT = 408
    PAYLOAD_TOO_LARGE = 413

    # 5xx Server Errors
    INTERNAL_SERVER_ERROR = 500
    SERVICE_UNAVAILABLE = 503
    HTTP_VERSION_NOT_SUPPORTED = 505

    @property
    def phrase(self) -> str:
        """
        Reason phrase for the status line.

            HTTP/1.1 405 Method Not Allowed
                     ─── ──────────────────
                      │          │
                      │          └── phrase
                      └───────────── value
        """
        return _STATUS_PHRASES.get(self, "Unknown")

    @property
    def is_client_error(self) -> bool:
        """True for 4xx codes."""
        return 400 <= self < 500

    @property
    def is_server_error(self) -> bool:
        """True for 5xx codes."""
        return 500 <= self < 600

    @property
    def is_error(self) -> bool:
        return self >= 400


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.UNAUTHORIZED: "Unauthorized",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTPStatus.REQUEST_TIMEOUT: "Request Timeout",
    HTTPStatus.PAYLOAD_TOO_LARGE: "Payload Too Large",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
    HTTPStatus.SERVICE_UNAVAILABLE: "Service Unavailable",
    HTTPStatus.HTTP_VERSION_NOT_SUPPORTED: "HTTP Version Not Supported",
}
