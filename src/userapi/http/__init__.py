"""
HTTP protocol layer: request parsing, query decoding, responses, routing.

    bytes ──► RequestParser ──► HTTPRequest ──► Router ──► handler
                                                              │
    bytes ◄── HTTPResponse.to_bytes() ◄───────────────────────┘
"""

from .status_codes import HTTPStatus
from .query import QueryParams, parse_query
from .request import HTTPRequest, HTTPParseError, RequestParser
from .response import (
    HTTPResponse,
    ResponseBuilder,
    JSON_CONTENT_TYPE,
    TEXT_CONTENT_TYPE,
    ok,
    created,
    empty,
    unauthorized,
)
from .router import Router, Route, Handler, normalize_path

__all__ = [
    "HTTPStatus",
    "QueryParams",
    "parse_query",
    "HTTPRequest",
    "HTTPParseError",
    "RequestParser",
    "HTTPResponse",
    "ResponseBuilder",
    "JSON_CONTENT_TYPE",
    "TEXT_CONTENT_TYPE",
    "ok",
    "created",
    "empty",
    "unauthorized",
    "Router",
    "Route",
    "normalize_path",
    "Handler",
]
