"""
=============================================================================
HTTP RESPONSE BUILDER
=============================================================================

Builds HTTP/1.1 responses and serializes them for the socket.

=============================================================================
THE THREE RESPONSE SHAPES OF THIS SERVICE
=============================================================================

    ┌────────────────────────┬──────────────────────────────────────────────┐
    │ Shape                  │ Example                                      │
    ├────────────────────────┼──────────────────────────────────────────────┤
    │ plain text             │ 200  text/plain; charset=utf-8               │
    │                        │      Hello Marcin!                           │
    │ JSON document          │ 201  application/json                        │
    │                        │      {"id": "1f0e...-..."}                   │
    │ JSON error             │ 400  application/json                        │
    │                        │      {"code": 400, "message": "..."}         │
    │ empty                  │ 405 / 401, Content-Length: 0                 │
    └────────────────────────┴──────────────────────────────────────────────┘

Every serialized response gets Content-Length, Date and Server headers
unless the handler already set them.

=============================================================================
INTERVIEW QUESTIONS
=============================================================================

Q: "How does the client know where the body ends?"
A: "Content-Length. This server never streams, so the length is always
   known before the first byte is written."

Q: "What is WWW-Authenticate for?"
A: "A 401 must tell the client HOW to authenticate. 'Basic realm=...'
   makes browsers and curl prompt for a user name and password."

=============================================================================
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Dict, Any, Union
import json

from .status_codes import HTTPStatus


JSON_CONTENT_TYPE = "application/json"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"


@dataclass
class HTTPResponse:
    """
    A response waiting to be written to the socket.

        handler ──► HTTPResponse ──► to_bytes() ──► socket.sendall()
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """First line of the response, e.g. "HTTP/1.1 201 Created"."""
        return f"{self.version} {int(self.status)} {self.status.phrase}"

    @property
    def text(self) -> str:
        """Body decoded as UTF-8."""
        return self.body.decode("utf-8")

    def json(self) -> Any:
        """Body parsed as JSON."""
        return json.loads(self.body.decode("utf-8"))

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        self.headers[name] = value
        return self

    def set_content_type(self, content_type: str) -> "HTTPResponse":
        return self.set_header("Content-Type", content_type)

    def set_body(self, body: Union[str, bytes]) -> "HTTPResponse":
        """Set the body; strings are encoded as UTF-8."""
        self.body = body.encode("utf-8") if isinstance(body, str) else body
        return self

    def to_bytes(self, server_name: str = "userapi/1.0") -> bytes:
        """
        Serialize status line, headers and body.

            HTTP/1.1 201 Created\\r\\n
            Content-Type: application/json\\r\\n
            Content-Length: 45\\r\\n          ← added if missing
            Date: Mon, 19 Oct 2026 ...\\r\\n  ← added if missing
            Server: userapi/1.0\\r\\n         ← added if missing
            \\r\\n
            {"id": "..."}

        Args:
            server_name: Value for the Server header.

        Returns:
            Bytes ready for ``socket.sendall``.
        """
        headers = dict(self.headers)
        headers.setdefault("Content-Length", str(len(self.body)))
        headers.setdefault("Date", format_http_date(datetime.now(timezone.utc)))
        headers.setdefault("Server", server_name)

        lines = [self.status_line]
        lines.extend(f"{name}: {value}" for name, value in headers.items())
        lines.append("")

        return "\r\n".join(lines).encode("utf-8") + b"\r\n" + self.body


class ResponseBuilder:
    """
    Fluent builder for HTTPResponse.

        response = (ResponseBuilder()
            .status(HTTPStatus.CREATED)
            .json({"id": user_id})
            .build())

    Every setter returns the builder, so calls chain; ``build()`` ends
    the chain.
    """

    def __init__(self):
        self._status = HTTPStatus.OK
        self._headers: Dict[str, str] = {}
        self._body: bytes = b""

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        self._status = HTTPStatus(status)
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        self._headers[name] = value
        return self

    def content_type(self, content_type: str) -> "ResponseBuilder":
        return self.header("Content-Type", content_type)

    def body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        """Raw body; strings are encoded as UTF-8."""
        self._body = body.encode("utf-8") if isinstance(body, str) else body
        return self

    def text(self, text: str, content_type: str = TEXT_CONTENT_TYPE) -> "ResponseBuilder":
        """Plain-text body with a text Content-Type."""
        self._body = text.encode("utf-8")
        self._headers["Content-Type"] = content_type
        return self

    def json(self, data: Any) -> "ResponseBuilder":
        """
        Serialize ``data`` as the body and mark it application/json.

        Raises:
            TypeError: If ``data`` holds something json cannot encode.
        """
        self._body = json.dumps(data, ensure_ascii=False).encode("utf-8")
        self._headers["Content-Type"] = JSON_CONTENT_TYPE
        return self

    def close_connection(self) -> "ResponseBuilder":
        """Tell the client this is the last response on the connection."""
        return self.header("Connection", "close")

    def build(self) -> HTTPResponse:
        return HTTPResponse(
            status=self._status,
            headers=self._headers,
            body=self._body,
        )


def format_http_date(dt: datetime) -> str:
    """
    Format a UTC datetime as an RFC 7231 HTTP-date.

    Example: "Mon, 19 Oct 2026 12:00:00 GMT"
    """
    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
    return (
        f"{days[dt.weekday()]}, {dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def ok(text: str) -> HTTPResponse:
    """200 with a plain-text body."""
    return ResponseBuilder().status(HTTPStatus.OK).text(text).build()


def created(data: Any, location: Optional[str] = None) -> HTTPResponse:
    """201 with a JSON body and, optionally, a Location header."""
    builder = ResponseBuilder().status(HTTPStatus.CREATED).json(data)
    if location:
        builder.header("Location", location)
    return builder.build()


def empty(status: HTTPStatus) -> HTTPResponse:
    """A response with no body at all."""
    return ResponseBuilder().status(status).build()


def unauthorized(realm: str) -> HTTPResponse:
    """
    401 with a Basic challenge and no body.

    Args:
        realm: Protection space shown to the user by the client.
    """
    return (ResponseBuilder()
        .status(HTTPStatus.UNAUTHORIZED)
        .header("WWW-Authenticate", f'Basic realm="{realm}"')
        .build())
