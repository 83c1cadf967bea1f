"""
Greeting endpoint.

    GET /api/hello                 → 200 "Hello Anonymous!"
    GET /api/hello?name=Marcin     → 200 "Hello Marcin!"
    GET /api/hello?name=a&name=b   → 200 "Hello a!"        (first value wins)
    PUT /api/hello                 → 405, empty body

Authentication is checked by BasicAuthMiddleware before this handler runs.
"""

from ..http import HTTPRequest, HTTPResponse, HTTPStatus, empty, ok, parse_query


DEFAULT_NAME = "Anonymous"


class HelloHandler:
    """Answers GET with a plain-text greeting."""

    def __init__(self, default_name: str = DEFAULT_NAME):
        self.default_name = default_name

    def __call__(self, request: HTTPRequest) -> HTTPResponse:
        if request.method != "GET":
            return empty(HTTPStatus.METHOD_NOT_ALLOWED)

        params = parse_query(request.query_string)
        names = params.get("name")
        # "?name" and "?name=" carry no usable name
        name = names[0] if names and names[0] else self.default_name

        return ok(f"Hello {name}!")
