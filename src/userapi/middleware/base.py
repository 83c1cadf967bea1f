"""
=============================================================================
MIDDLEWARE PIPELINE
=============================================================================

Middleware wraps the request handler to add behaviour that applies to
many endpoints: access logging, authentication.

    pipeline.add(LoggingMiddleware())       # outermost
    pipeline.add(BasicAuthMiddleware(...))  # innermost
    handler = pipeline.wrap(endpoint_chain)

    request ──► Logging ──► BasicAuth ──► endpoint_chain
                   │            │               │
    response ◄─────┴────────────┴───────────────┘

A middleware may answer on its own without calling ``next``; BasicAuth
does that with a 401. Outer middleware still sees that response.

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import Callable, List
import logging

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger(__name__)

NextHandler = Callable[[HTTPRequest], HTTPResponse]


class Middleware(ABC):
    """
    Base class for middleware.

        class Timing(Middleware):
            def __call__(self, request, next):
                start = time.time()
                response = next(request)
                response.set_header("X-Elapsed", f"{time.time() - start:.3f}")
                return response
    """

    @abstractmethod
    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        """Handle ``request``, usually by calling ``next(request)``."""

    @property
    def name(self) -> str:
        return self.__class__.__name__


class MiddlewarePipeline:
    """Ordered middleware list; the first one added runs first."""

    def __init__(self):
        self._middleware: List[Middleware] = []

    def add(self, middleware: Middleware) -> "MiddlewarePipeline":
        self._middleware.append(middleware)
        logger.debug(f"Added middleware: {middleware.name}")
        return self

    def wrap(self, handler: NextHandler) -> NextHandler:
        """
        Build the chain around ``handler``.

        Wrapping runs in reverse so that for [A, B] the result is
        A(B(handler)).
        """
        current = handler
        for middleware in reversed(self._middleware):
            current = self._bind(middleware, current)
        return current

    @staticmethod
    def _bind(middleware: Middleware, next_handler: NextHandler) -> NextHandler:
        def wrapped(request: HTTPRequest) -> HTTPResponse:
            return middleware(request, next_handler)
        return wrapped

    def __len__(self) -> int:
        return len(self._middleware)

    def __iter__(self):
        return iter(self._middleware)
