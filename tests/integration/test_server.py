"""
Integration tests: the full application on a real socket.
"""

import http.client
import json
import re
import socket
import threading

import pytest


UUID_PATTERN = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$")


def request(test_server, method, path, body=None, headers=None):
    """Send one request on a fresh connection; return (status, headers, body)."""
    conn = http.client.HTTPConnection(test_server.host, test_server.port, timeout=5.0)
    try:
        conn.request(method, path, body=body, headers=headers or {})
        response = conn.getresponse()
        return response.status, dict(response.getheaders()), response.read()
    finally:
        conn.close()


def raw_exchange(test_server, data: bytes) -> bytes:
    """Write raw bytes and read until the server closes the connection."""
    with socket.create_connection((test_server.host, test_server.port), timeout=5.0) as sock:
        sock.sendall(data)
        chunks = []
        while True:
            chunk = sock.recv(4096)
            if not chunk:
                break
            chunks.append(chunk)
    return b"".join(chunks)


class TestHelloOverHTTP:
    """GET /api/hello against a running server."""

    def test_anonymous(self, test_server, admin_auth):
        """Test the default greeting."""
        status, headers, body = request(
            test_server, "GET", "/api/hello", headers={"Authorization": admin_auth}
        )

        assert status == 200
        assert body == b"Hello Anonymous!"
        assert headers["Content-Type"].startswith("text/plain")

    def test_named(self, test_server, admin_auth):
        """Test ?name=Marcin."""
        status, _, body = request(
            test_server, "GET", "/api/hello?name=Marcin", headers={"Authorization": admin_auth}
        )

        assert status == 200
        assert body == b"Hello Marcin!"

    def test_encoded_name(self, test_server, admin_auth):
        """Test that percent-encoded names are decoded."""
        status, _, body = request(
            test_server, "GET", "/api/hello?name=Zo%C3%AB", headers={"Authorization": admin_auth}
        )

        assert status == 200
        assert body.decode("utf-8") == "Hello Zoë!"

    def test_unauthorized(self, test_server):
        """Test that no credentials get 401 with a challenge."""
        status, headers, _ = request(test_server, "GET", "/api/hello")

        assert status == 401
        assert headers["WWW-Authenticate"] == 'Basic realm="myrealm"'

    def test_trailing_slash_unauthorized(self, test_server):
        """Test that "/api/hello/" also demands credentials."""
        status, _, body = request(test_server, "GET", "/api/hello/?name=x")

        assert status == 401
        assert body == b""

    def test_unknown_method(self, test_server, admin_auth):
        """Test that an unfamiliar method reaches the endpoint and gets 405."""
        reply = raw_exchange(
            test_server,
            b"FOO /api/hello HTTP/1.1\r\n"
            + f"Authorization: {admin_auth}\r\n".encode()
            + b"Connection: close\r\n"
            b"\r\n",
        )

        assert reply.startswith(b"HTTP/1.1 405 Method Not Allowed\r\n")
        assert reply.endswith(b"\r\n\r\n")

    def test_put_not_allowed(self, test_server, admin_auth):
        """Test that PUT gets 405 with an empty body."""
        status, headers, body = request(
            test_server, "PUT", "/api/hello", headers={"Authorization": admin_auth}
        )

        assert status == 405
        assert body == b""
        assert headers["Content-Length"] == "0"


class TestRegisterOverHTTP:
    """POST /api/users/register against a running server."""

    def test_register(self, test_server):
        """Test that a valid body gets 201 with an id."""
        status, headers, body = request(
            test_server, "POST", "/api/users/register",
            body=b'{"login":"test","password":"test"}',
            headers={"Content-Type": "application/json"},
        )

        assert status == 201
        assert headers["Content-Type"] == "application/json"
        assert UUID_PATTERN.match(json.loads(body)["id"])

    def test_wrong_body(self, test_server):
        """Test that {"wrong":"request"} gets 400 {code, message}."""
        status, _, body = request(
            test_server, "POST", "/api/users/register",
            body=b'{"wrong":"request"}',
            headers={"Content-Type": "application/json"},
        )

        assert status == 400
        error = json.loads(body)
        assert error["code"] == 400
        assert isinstance(error["message"], str) and error["message"]

    def test_get_not_allowed(self, test_server):
        """Test that GET gets 405."""
        status, headers, _ = request(test_server, "GET", "/api/users/register")

        assert status == 405
        assert headers["Allow"] == "POST"

    def test_concurrent_registrations(self, test_server):
        """Test parallel registrations from several clients."""
        ids = []
        errors = []
        lock = threading.Lock()

        def register(n):
            try:
                status, _, body = request(
                    test_server, "POST", "/api/users/register",
                    body=json.dumps({"login": f"user{n}", "password": "pw"}).encode(),
                )
                with lock:
                    ids.append((status, json.loads(body)["id"]))
            except Exception as e:
                with lock:
                    errors.append(e)

        threads = [threading.Thread(target=register, args=(n,)) for n in range(10)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10.0)

        assert errors == []
        assert [status for status, _ in ids] == [201] * 10
        assert len({user_id for _, user_id in ids}) == 10


class TestTransport:
    """Connection handling and protocol errors."""

    def test_keep_alive_reuses_connection(self, test_server, admin_auth):
        """Test several requests on one HTTP/1.1 connection."""
        conn = http.client.HTTPConnection(test_server.host, test_server.port, timeout=5.0)
        try:
            for name in ("Ann", "Bob"):
                conn.request("GET", f"/api/hello?name={name}", headers={"Authorization": admin_auth})
                response = conn.getresponse()
                assert response.read() == f"Hello {name}!".encode()
                assert response.getheader("Connection") == "keep-alive"
        finally:
            conn.close()

    def test_unknown_path(self, test_server):
        """Test that unknown paths get 404 JSON."""
        status, _, body = request(test_server, "GET", "/nothing/here")

        assert status == 404
        assert json.loads(body)["code"] == 404

    def test_malformed_request_line(self, test_server):
        """Test that garbage gets 400 and the connection is closed."""
        reply = raw_exchange(test_server, b"NONSENSE\r\n\r\n")

        assert reply.startswith(b"HTTP/1.1 400 Bad Request\r\n")
        assert b"Connection: close" in reply

    def test_unsupported_version(self, test_server):
        """Test that HTTP/2.0 in the request line gets 505."""
        reply = raw_exchange(test_server, b"GET /api/hello HTTP/2.0\r\n\r\n")

        assert reply.startswith(b"HTTP/1.1 505 ")

    def test_http10_closes(self, test_server):
        """Test that HTTP/1.0 without keep-alive is answered and closed."""
        reply = raw_exchange(
            test_server,
            b"POST /api/users/register HTTP/1.0\r\n"
            b"Content-Length: 2\r\n"
            b"\r\n"
            b"{}",
        )

        assert reply.startswith(b"HTTP/1.1 400 Bad Request\r\n")
        assert b"Connection: close" in reply
