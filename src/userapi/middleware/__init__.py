"""
Middleware applied around the request handlers.

    LoggingMiddleware     access log line per request, X-Request-ID
    BasicAuthMiddleware   HTTP Basic authentication for selected paths
"""

from .base import Middleware, MiddlewarePipeline, NextHandler
from .logging import LoggingMiddleware, RequestLog
from .auth import (
    BasicAuthMiddleware,
    CredentialVerifier,
    StaticCredentialVerifier,
    parse_basic_credentials,
)

__all__ = [
    "Middleware",
    "MiddlewarePipeline",
    "NextHandler",
    "LoggingMiddleware",
    "RequestLog",
    "BasicAuthMiddleware",
    "CredentialVerifier",
    "StaticCredentialVerifier",
    "parse_basic_credentials",
]
