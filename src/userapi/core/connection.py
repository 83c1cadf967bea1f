"""
=============================================================================
CLIENT CONNECTION
=============================================================================

Wraps one accepted TCP socket and reads whole HTTP requests from it.

TCP delivers a byte stream, not messages. A single recv() may return half
a request line or two pipelined requests, so reading is buffered:

    recv() chunks:   "POST /api/us"  "ers/register HTTP/1.1\\r\\nContent-Le"
                     "ngth: 35\\r\\n\\r\\n{\\"login\\": \\"a\\", \\"password\\": \\"b\\"}"
                                    │
                                    ▼
    _buffer grows until "\\r\\n\\r\\n" is in it       (headers complete)
    Content-Length read from the header bytes        (35)
    _buffer grows until 35 body bytes are present    (body complete)
    first request sliced off, the rest stays         (keep-alive / pipelining)

=============================================================================
CONNECTION STATES
=============================================================================

    NEW ──► READING ──► PROCESSING ──► WRITING ──► KEEP_ALIVE ──┐
             ▲                                                   │
             └───────────────────────────────────────────────────┘
    any state ──► CLOSING ──► CLOSED

=============================================================================
"""

import socket
import time
import logging
import uuid
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    NEW = "new"
    READING = "reading"
    PROCESSING = "processing"
    WRITING = "writing"
    KEEP_ALIVE = "keep_alive"
    CLOSING = "closing"
    CLOSED = "closed"


class RequestTooLarge(ValueError):
    """The client sent more bytes than max_request_size allows."""


@dataclass
class Connection:
    """
    A client connection.

    Attributes:
        socket: The accepted client socket.
        address: Peer (ip, port).
        id: Short random id used in log lines.
        state: Current ConnectionState.
        requests_handled: Complete requests read so far.
    """

    socket: socket.socket
    address: tuple[str, int]

    id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)
    requests_handled: int = 0

    buffer_size: int = 8192
    timeout: Optional[float] = 30.0
    keep_alive_timeout: float = 5.0
    max_request_size: int = 1024 * 1024

    _buffer: bytes = field(default=b"", repr=False)

    def __post_init__(self):
        self.socket.setblocking(True)
        self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def age(self) -> float:
        """Seconds since the connection was accepted."""
        return time.time() - self.created_at

    # =========================================================================
    # READING
    # =========================================================================

    def read_request(self) -> Optional[bytes]:
        """
        Read exactly one request: headers, blank line, Content-Length body.

        Returns:
            The request bytes, or None if the client closed the connection
            or an idle keep-alive connection timed out.

        Raises:
            TimeoutError: The first request did not arrive in time.
            RequestTooLarge: The request exceeds max_request_size.
        """
        self.state = ConnectionState.READING

        # Idle keep-alive connections get the shorter timeout.
        if self.requests_handled > 0:
            self.socket.settimeout(self.keep_alive_timeout)

        try:
            while b"\r\n\r\n" not in self._buffer:
                if not self._fill():
                    return None

            header_end = self._buffer.find(b"\r\n\r\n")
            body_start = header_end + 4
            content_length = self._parse_content_length(self._buffer[:header_end])
            request_end = body_start + content_length

            if request_end > self.max_request_size:
                raise RequestTooLarge(f"Request too large: {request_end} bytes")

            while len(self._buffer) < request_end:
                if not self._fill():
                    # Peer closed mid-body; the parser reports the short body.
                    break

            request_data = self._buffer[:request_end]
            self._buffer = self._buffer[request_end:]
            self.requests_handled += 1
            return request_data

        except socket.timeout:
            if self.requests_handled > 0 and not self._buffer:
                logger.debug(f"[{self.id}] Keep-alive timeout")
                return None
            raise TimeoutError("Request read timeout")

        finally:
            self.socket.settimeout(self.timeout)

    def _fill(self) -> bool:
        """Append one recv() to the buffer; False when the peer is gone."""
        try:
            chunk = self.socket.recv(self.buffer_size)
        except (ConnectionResetError, BrokenPipeError):
            return False
        if not chunk:
            return False

        self._buffer += chunk
        if len(self._buffer) > self.max_request_size:
            raise RequestTooLarge(f"Request too large: {len(self._buffer)} bytes")
        return True

    @staticmethod
    def _parse_content_length(header_bytes: bytes) -> int:
        """Content-Length from raw header bytes; 0 if absent or unreadable."""
        text = header_bytes.decode("latin-1").lower()
        for line in text.split("\r\n")[1:]:
            name, _, value = line.partition(":")
            if name.strip() == "content-length":
                try:
                    return max(int(value.strip()), 0)
                except ValueError:
                    return 0
        return 0

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> bool:
        """
        Write a serialized response.

        Returns:
            True on success, False if the client went away.
        """
        self.state = ConnectionState.WRITING
        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def set_keep_alive(self):
        self.state = ConnectionState.KEEP_ALIVE

    def close(self):
        """
        Close gracefully: send FIN, drain what the client still sends,
        release the descriptor. Safe to call twice.
        """
        if self.state == ConnectionState.CLOSED:
            return
        self.state = ConnectionState.CLOSING

        try:
            self.socket.shutdown(socket.SHUT_WR)
            self.socket.settimeout(0.5)
            while self.socket.recv(1024):
                pass
        except OSError:
            # Peer already gone; nothing left to drain.
            pass
        finally:
            self.socket.close()

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Closed after {self.requests_handled} requests")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
