"""
=============================================================================
URL ROUTER
=============================================================================

Maps a request path to a handler. Paths are matched exactly, after
normalization:

    /api/hello        ──►  /api/hello
    /api/hello/       ──►  /api/hello
    /api/hello//      ──►  /api/hello
    /                 ──►  /

Anything that looks at a path to make a decision (the router, the auth
middleware) must go through ``normalize_path``; otherwise two spellings
of one route can be treated differently.

=============================================================================
METHOD HANDLING
=============================================================================

The router does not look at the method. Each endpoint answers a wrong
method itself, because they answer differently (the greeting with an
empty 405, registration with a JSON error).

    no route for the path  → not_found (404), raised as ApplicationError

=============================================================================
"""

from dataclasses import dataclass
from typing import Callable, Optional, Dict, List

from .request import HTTPRequest
from .response import HTTPResponse
from ..errors.exceptions import not_found


Handler = Callable[[HTTPRequest], HTTPResponse]


def normalize_path(path: str) -> str:
    """Strip leading and trailing slashes down to one leading slash."""
    return "/" + path.strip("/")


@dataclass
class Route:
    """A registered path and its handler."""

    path: str
    handler: Handler
    name: Optional[str] = None


class Router:
    """
    Exact-path router.

    Usage:
        router = Router()
        router.add_route("/api/hello", hello_handler, name="hello")

        response = router.handle(request)
    """

    def __init__(self):
        self._routes: Dict[str, Route] = {}

    def add_route(
        self,
        path: str,
        handler: Handler,
        name: Optional[str] = None,
    ) -> Route:
        """
        Register a handler.

        Args:
            path: Path to serve; normalized before it is stored.
            handler: Callable taking an HTTPRequest, returning an HTTPResponse.
            name: Optional label shown by ``print_routes``.

        Returns:
            The new Route.

        Raises:
            ValueError: If the path already has a handler.
        """
        route = Route(path=normalize_path(path), handler=handler, name=name)
        if route.path in self._routes:
            raise ValueError(f"Route already registered: {route.path}")
        self._routes[route.path] = route
        return route

    def match(self, path: str) -> Optional[Route]:
        return self._routes.get(normalize_path(path))

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Dispatch a request to its handler.

        Raises:
            ApplicationError: RESOURCE_NOT_FOUND when no route applies.
        """
        route = self.match(request.path)
        if route is None:
            raise not_found(f"No route matches {request.path}")
        return route.handler(request)

    @property
    def routes(self) -> List[Route]:
        return list(self._routes.values())

    def print_routes(self) -> None:
        """Print the route table, used by the startup banner."""
        print("\nRegistered routes:")
        print("-" * 60)
        for route in self._routes.values():
            name = f" ({route.name})" if route.name else ""
            print(f"  {route.path}{name}")
        print("-" * 60)
