"""
=============================================================================
ACCESS LOG MIDDLEWARE
=============================================================================

Writes one line per request to the "userapi.access" logger.

    text:  127.0.0.1 - - [19/Oct/2026:12:00:00 +0000] "POST /api/users/register" 201 45 1.84ms
    json:  {"request_id": "a1b2c3d4", "method": "POST", "path": "/api/users/register", ...}

Placed first in the pipeline so that 401s from authentication and every
translated error response are logged with their final status.

Request bodies and the Authorization header are never logged; they
carry passwords.

=============================================================================
"""

import time
import json
import uuid
import logging
from dataclasses import dataclass, asdict
from typing import Optional

from .base import Middleware, NextHandler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger("userapi.access")


@dataclass
class RequestLog:
    """One access log entry."""

    request_id: str
    method: str
    path: str
    query: str
    client_ip: str
    user_agent: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        entry = asdict(self)
        entry["duration_ms"] = round(self.duration_ms, 2)
        return entry

    def to_text(self) -> str:
        """Apache-style line."""
        target = f"{self.path}?{self.query}" if self.query else self.path
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.method} {target}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )


class LoggingMiddleware(Middleware):
    """
    Times each request and logs the outcome.

    Args:
        log_format: "text" or "json".
        include_request_id: Echo the generated id as X-Request-ID.
        log_level: Level of the access log records.
        skip_paths: Paths that are served but not logged.
    """

    def __init__(
        self,
        log_format: str = "text",
        include_request_id: bool = True,
        log_level: int = logging.INFO,
        skip_paths: Optional[list[str]] = None,
    ):
        self.log_format = log_format
        self.include_request_id = include_request_id
        self.log_level = log_level
        self.skip_paths = set(skip_paths or [])

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        request_id = uuid.uuid4().hex[:8]
        start_time = time.time()

        try:
            response = next(request)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"[{request_id}] {request.method} {request.path} raised "
                f"{type(e).__name__}: {e} ({duration_ms:.2f}ms)"
            )
            raise

        duration_ms = (time.time() - start_time) * 1000

        if self.include_request_id:
            response.headers["X-Request-ID"] = request_id

        if request.path in self.skip_paths:
            return response

        entry = RequestLog(
            request_id=request_id,
            method=request.method,
            path=request.path,
            query=request.query_string,
            client_ip=request.client_address[0],
            user_agent=request.user_agent or "-",
            status_code=int(response.status),
            content_length=len(response.body),
            duration_ms=duration_ms,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )

        if self.log_format == "json":
            logger.log(self.log_level, json.dumps(entry.to_dict()))
        else:
            logger.log(self.log_level, entry.to_text())

        return response
