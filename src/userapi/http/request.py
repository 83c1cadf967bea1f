"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Turns the raw bytes of one HTTP/1.1 request into an HTTPRequest.

=============================================================================
WHAT GETS PULLED APART
=============================================================================

    POST /api/users/register?source=cli HTTP/1.1\r\n     ← request line
    Host: localhost:8000\r\n                              ┐
    Authorization: Basic YWRtaW46YWRtaW4=\r\n             │ headers
    Content-Type: application/json\r\n                    │ (names lowercased)
    Content-Length: 35\r\n                                ┘
    \r\n                                                  ← separator
    {"login": "alice", "password": "pw"}                  ← body (bytes)

    HTTPRequest(
        method="POST",
        path="/api/users/register",
        query_string="source=cli",            ← raw; handlers call parse_query
        headers={"host": ..., "authorization": ..., ...},
        body=b'{"login": "alice", "password": "pw"}',
    )

The body stays as bytes. Decoding it is the job of whoever knows what it
should contain (the registration handler validates it against a schema).

=============================================================================
FAILURE MODES
=============================================================================

    ┌──────────────────────────────────────┬────────┐
    │ Problem                              │ Status │
    ├──────────────────────────────────────┼────────┤
    │ request larger than the limit        │  413   │
    │ no blank line after the headers      │  400   │
    │ request line not METHOD SP URI SP V  │  400   │
    │ version other than 1.0 / 1.1         │  505   │
    │ ".." in the path                     │  400   │
    │ body shorter than Content-Length     │  400   │
    └──────────────────────────────────────┴────────┘

=============================================================================
INTERVIEW QUESTIONS
=============================================================================

Q: "Why lowercase header names at parse time?"
A: "Header names are case-insensitive (RFC 7230). Normalizing once means
   every lookup afterwards is a plain dict access."

Q: "Why does the request carry only the raw query string?"
A: "Parsing policy belongs to the application. The handler that cares
   about valueless parameters decodes the exact text it was sent."

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, List
from urllib.parse import urlsplit, unquote
import re


class HTTPParseError(Exception):
    """
    Raised when the bytes on the wire are not a usable HTTP request.

    Carries the status code the server should answer with, so the
    connection loop can reply without knowing why parsing failed.
    """

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class HTTPRequest:
    """
    A parsed HTTP request.

    Attributes:
        method:         Upper-case HTTP method.
        path:           Percent-decoded path without the query string.
        version:        "HTTP/1.0" or "HTTP/1.1".
        headers:        Header values keyed by lower-case name.
        query_string:   Query exactly as received, without "?".
        body:           Body bytes, exactly Content-Length long.
        client_address: (ip, port) of the peer.
    """

    method: str
    path: str
    version: str = "HTTP/1.1"

    headers: Dict[str, str] = field(default_factory=dict)
    query_string: str = ""
    body: bytes = b""

    client_address: tuple[str, int] = ("", 0)

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def user_agent(self) -> str:
        return self.headers.get("user-agent", "")

    @property
    def is_keep_alive(self) -> bool:
        """
        Whether the client expects the connection to stay open.

            HTTP/1.1: open unless "Connection: close"
            HTTP/1.0: closed unless "Connection: keep-alive"
        """
        connection = self.headers.get("connection", "").lower()
        if self.version == "HTTP/1.1":
            return connection != "close"
        return connection == "keep-alive"

    # =========================================================================
    # ACCESSORS
    # =========================================================================

    def get_header(self, name: str, default: str = "") -> str:
        """Case-insensitive header lookup."""
        return self.headers.get(name.lower(), default)


class RequestParser:
    """
    Parses raw request bytes into HTTPRequest objects.

    One parser is shared by all worker threads; it holds no per-request
    state, only the size limit.

        bytes ──► size check ──► split at \\r\\n\\r\\n ──► request line
                                                      ──► headers
                                                      ──► body[:Content-Length]
    """

    # METHOD SP REQUEST-TARGET SP HTTP-VERSION; any upper-case token is a
    # method here, endpoints decide which ones they answer
    REQUEST_LINE_PATTERN = re.compile(r"^([A-Z]+) ([^ ]+) (HTTP/\d\.\d)$")
    # field-name ":" OWS field-value
    HEADER_PATTERN = re.compile(r"^([^:]+):\s*(.*)$")

    def __init__(self, max_request_size: int = 10 * 1024 * 1024):
        """
        Args:
            max_request_size: Largest accepted request in bytes, headers
                              included. Bigger requests fail with 413.
        """
        self.max_request_size = max_request_size

    def parse(
        self,
        data: bytes,
        client_address: tuple[str, int] = ("", 0)
    ) -> HTTPRequest:
        """
        Parse one complete request.

        Args:
            data: Request bytes as returned by ``Connection.read_request``.
            client_address: Peer (ip, port), copied onto the request.

        Returns:
            The parsed request.

        Raises:
            HTTPParseError: If the request is malformed; ``status_code``
                            tells the caller what to answer.
        """
        if len(data) > self.max_request_size:
            raise HTTPParseError(
                f"Request too large: {len(data)} bytes",
                status_code=413
            )

        header_end = data.find(b"\r\n\r\n")
        if header_end == -1:
            raise HTTPParseError("Incomplete request: no header terminator")

        header_section = data[:header_end].decode("utf-8", errors="replace")
        body = data[header_end + 4:]

        lines = header_section.split("\r\n")
        method, path, query_string, version = self._parse_request_line(lines[0])
        headers = self._parse_headers(lines[1:])

        try:
            content_length = int(headers.get("content-length", 0))
        except ValueError:
            raise HTTPParseError(
                f"Invalid Content-Length: {headers['content-length']}"
            )
        if len(body) < content_length:
            raise HTTPParseError(
                f"Incomplete body: expected {content_length} bytes, got {len(body)}"
            )

        return HTTPRequest(
            method=method,
            path=path,
            version=version,
            headers=headers,
            query_string=query_string,
            body=body[:content_length],
            client_address=client_address,
        )

    def _parse_request_line(self, line: str) -> tuple[str, str, str, str]:
        """
        Split the request line into method, path, raw query and version.

            "GET /api/hello?name=Marcin HTTP/1.1"
             ─┬─ ─────┬──── ─────┬───── ───┬────
              │       │          │         │
           method   path       query    version
        """
        match = self.REQUEST_LINE_PATTERN.match(line)
        if not match:
            raise HTTPParseError(f"Invalid request line: {line}")

        method, target, version = match.groups()

        if version not in ("HTTP/1.0", "HTTP/1.1"):
            raise HTTPParseError(
                f"Unsupported HTTP version: {version}",
                status_code=505
            )

        parts = urlsplit(target)
        path = unquote(parts.path) or "/"

        if ".." in path:
            raise HTTPParseError("Invalid path: contains ..")

        return method, path, parts.query, version

    def _parse_headers(self, lines: List[str]) -> Dict[str, str]:
        """
        Parse header lines into a dict keyed by lower-case name.

        Repeated headers are joined with ", " (RFC 7230 section 3.2.2).
        Lines starting with whitespace continue the previous header.
        Lines without a colon are skipped.
        """
        headers: Dict[str, str] = {}
        current_name: Optional[str] = None

        for line in lines:
            if not line:
                continue

            if line[0] in (" ", "\t"):
                if current_name is not None:
                    headers[current_name] += " " + line.strip()
                continue

            match = self.HEADER_PATTERN.match(line)
            if not match:
                continue

            name = match.group(1).strip().lower()
            value = match.group(2).strip()
            current_name = name

            if name in headers:
                headers[name] += ", " + value
            else:
                headers[name] = value

        return headers
