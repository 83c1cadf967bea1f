"""
Tests for the assembled application, driven through the request chain
without sockets.
"""

import base64
import re

import pytest

from userapi import ServerConfig, build_context, create_app
from userapi.http import HTTPRequest


UUID_PATTERN = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$")


def make_request(
    method: str,
    path: str,
    query: str = "",
    body: bytes = b"",
    auth: str = None,
) -> HTTPRequest:
    headers = {}
    if auth is not None:
        headers["authorization"] = auth
    return HTTPRequest(
        method=method,
        path=path,
        headers=headers,
        query_string=query,
        body=body,
        client_address=("127.0.0.1", 50000),
    )


@pytest.fixture
def app():
    """The request chain of a default application."""
    return create_app(ServerConfig(port=0)).build_handler()


class TestHelloEndpoint:
    """GET /api/hello through middleware, auth and router."""

    def test_anonymous(self, app, admin_auth):
        """Test the greeting without a name."""
        response = app(make_request("GET", "/api/hello", auth=admin_auth))

        assert response.status == 200
        assert response.text == "Hello Anonymous!"

    def test_named(self, app, admin_auth):
        """Test the greeting with ?name=Marcin."""
        response = app(make_request("GET", "/api/hello", "name=Marcin", auth=admin_auth))

        assert response.status == 200
        assert response.text == "Hello Marcin!"

    def test_requires_credentials(self, app):
        """Test that no Authorization header gets 401."""
        response = app(make_request("GET", "/api/hello"))

        assert response.status == 401
        assert response.headers["WWW-Authenticate"] == 'Basic realm="myrealm"'

    def test_wrong_credentials(self, app):
        """Test that wrong credentials get 401."""
        auth = "Basic " + base64.b64encode(b"admin:wrong").decode("ascii")
        response = app(make_request("GET", "/api/hello", auth=auth))

        assert response.status == 401

    def test_put_not_allowed(self, app, admin_auth):
        """Test that PUT gets 405 with an empty body."""
        response = app(make_request("PUT", "/api/hello", auth=admin_auth))

        assert response.status == 405
        assert response.body == b""

    def test_put_without_credentials(self, app):
        """Test that authentication is checked before the method."""
        response = app(make_request("PUT", "/api/hello"))

        assert response.status == 401

    @pytest.mark.parametrize("path", ["/api/hello/", "/api/hello//"])
    def test_trailing_slash_requires_credentials(self, app, path):
        """Test that a trailing slash does not skip authentication."""
        response = app(make_request("GET", path, "name=x"))

        assert response.status == 401
        assert response.body == b""

    def test_trailing_slash_with_credentials(self, app, admin_auth):
        """Test that "/api/hello/" is served like "/api/hello"."""
        response = app(make_request("GET", "/api/hello/", "name=x", auth=admin_auth))

        assert response.status == 200
        assert response.text == "Hello x!"

    def test_unknown_method_without_credentials(self, app):
        """Test that an unfamiliar method is still asked for credentials."""
        response = app(make_request("FOO", "/api/hello"))

        assert response.status == 401

    def test_unknown_method_not_allowed(self, app, admin_auth):
        """Test that an unfamiliar method gets the empty 405."""
        response = app(make_request("FOO", "/api/hello", auth=admin_auth))

        assert response.status == 405
        assert response.body == b""

    def test_auth_disabled(self):
        """Test that auth_enabled=False serves the greeting openly."""
        app = create_app(ServerConfig(port=0, auth_enabled=False)).build_handler()

        response = app(make_request("GET", "/api/hello", "name=Ann"))

        assert response.status == 200
        assert response.text == "Hello Ann!"


class TestRegisterEndpoint:
    """POST /api/users/register through the full chain."""

    def test_register(self, app):
        """Test a valid registration without credentials."""
        response = app(make_request(
            "POST", "/api/users/register", body=b'{"login":"test","password":"test"}'
        ))

        assert response.status == 201
        assert UUID_PATTERN.match(response.json()["id"])

    def test_wrong_body(self, app):
        """Test that an unknown field gets 400 {code, message}."""
        response = app(make_request(
            "POST", "/api/users/register", body=b'{"wrong":"request"}'
        ))

        assert response.status == 400
        body = response.json()
        assert set(body) == {"code", "message"}
        assert body["code"] == 400
        assert body["message"]

    def test_get_not_allowed(self, app):
        """Test that GET gets 405 with a JSON error and Allow header."""
        response = app(make_request("GET", "/api/users/register"))

        assert response.status == 405
        assert response.headers["Allow"] == "POST"
        assert response.json()["code"] == 405

    def test_duplicate_login_overwrites(self):
        """Test that the same login twice succeeds with distinct ids."""
        context = build_context(ServerConfig(port=0))
        app = create_app(context=context).build_handler()
        body = b'{"login":"ann","password":"x"}'

        first = app(make_request("POST", "/api/users/register", body=body)).json()["id"]
        second = app(make_request("POST", "/api/users/register", body=body)).json()["id"]

        assert first != second
        assert context.user_store.get("ann").id == second

    def test_duplicate_login_rejected(self):
        """Test reject_duplicate_logins answers 400 for the second login."""
        app = create_app(ServerConfig(port=0, reject_duplicate_logins=True)).build_handler()
        body = b'{"login":"ann","password":"x"}'

        assert app(make_request("POST", "/api/users/register", body=body)).status == 201
        response = app(make_request("POST", "/api/users/register", body=body))

        assert response.status == 400
        assert "ann" in response.json()["message"]

    def test_apps_do_not_share_users(self):
        """Test that two applications keep separate stores."""
        first = build_context(ServerConfig(port=0))
        second = build_context(ServerConfig(port=0))
        create_app(context=first).build_handler()(make_request(
            "POST", "/api/users/register", body=b'{"login":"ann","password":"x"}'
        ))

        assert "ann" in first.user_store
        assert "ann" not in second.user_store


class TestUnknownRoutes:
    """Paths no handler serves."""

    def test_not_found(self, app):
        """Test that unknown paths get 404 JSON."""
        response = app(make_request("GET", "/api/nothing"))

        assert response.status == 404
        assert response.json()["code"] == 404

    def test_request_id_on_every_response(self, app):
        """Test that the access log middleware tags error responses too."""
        response = app(make_request("GET", "/api/nothing"))

        assert "X-Request-ID" in response.headers
