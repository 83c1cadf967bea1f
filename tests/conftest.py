"""
pytest configuration and fixtures.
"""

import base64
import threading
from typing import Generator
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from userapi import HTTPServer, ServerConfig, create_app


def basic_auth(username: str, password: str) -> str:
    """Authorization header value for Basic credentials."""
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


@pytest.fixture
def admin_auth() -> str:
    """Credentials the default configuration accepts."""
    return basic_auth("admin", "admin")


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample greeting request."""
    return (
        b"GET /api/hello?name=Marcin HTTP/1.1\r\n"
        b"Host: localhost:8000\r\n"
        b"User-Agent: pytest\r\n"
        b"Authorization: Basic YWRtaW46YWRtaW4=\r\n"
        b"Connection: keep-alive\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_post_request() -> bytes:
    """Sample registration request with JSON body."""
    body = b'{"login": "test", "password": "test"}'
    return (
        b"POST /api/users/register HTTP/1.1\r\n"
        b"Host: localhost:8000\r\n"
        b"Content-Type: application/json\r\n"
        + f"Content-Length: {len(body)}\r\n".encode()
        + b"Connection: close\r\n"
        b"\r\n"
    ) + body


@pytest.fixture
def config() -> ServerConfig:
    """Default test server configuration."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        min_workers=2,
        max_workers=4,
        timeout=5.0,
        keep_alive_timeout=1.0,
        log_level="WARNING",
    )


class TestServer:
    """Test server helper that runs in a background thread."""

    __test__ = False

    def __init__(self, server: HTTPServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def host(self) -> str:
        return self.server.address[0]

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        """Start server in background thread."""
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        """Stop the server."""
        self.server.stop()

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=10.0)


@pytest.fixture
def test_server(config: ServerConfig) -> Generator[TestServer, None, None]:
    """The full application on a free port."""
    test_srv = TestServer(create_app(config))
    test_srv.start()

    yield test_srv

    test_srv.stop()
