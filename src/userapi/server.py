"""
=============================================================================
HTTP SERVER
=============================================================================

Ties the transport, the protocol layer and the application together.

    ┌──────────────────────────────────────────────────────────────────────┐
    │                         REQUEST FLOW                                 │
    ├──────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   SocketServer.accept()                                              │
    │        │                                                             │
    │        ▼                                                             │
    │   ThreadPool.submit(_process_connection)  ── queue full ──► 503      │
    │        │                                                             │
    │        ▼  (worker thread, once per request on the connection)        │
    │   Connection.read_request() ─── too slow ──► 408                     │
    │        │                    └── too big ───► 413                     │
    │        ▼                                                             │
    │   RequestParser.parse() ──── malformed ──► 400 / 505                 │
    │        │                                                             │
    │        ▼                                                             │
    │   LoggingMiddleware                                                  │
    │        ▼                                                             │
    │   BasicAuthMiddleware ────── no credentials ──► 401                  │
    │        ▼                                                             │
    │   ErrorHandler.wrap( Router.handle ) ── any exception ──► JSON error │
    │        ▼                                                             │
    │   HelloHandler / RegistrationHandler                                 │
    │                                                                      │
    └──────────────────────────────────────────────────────────────────────┘

Every error answered before the middleware runs uses the same
{"code": ..., "message": ...} JSON body as the ErrorHandler.

=============================================================================
INTERVIEW QUESTIONS
=============================================================================

Q: "Why is the ErrorHandler inside the middleware and not outside?"
A: "The access log should record the status the client actually got.
   With errors translated first, a failed registration is logged as 400,
   not as an exception."

Q: "What happens during graceful shutdown?"
A: "The accept loop stops, queued connections get up to 30 seconds to
   finish, then the workers receive poison pills and are joined."

=============================================================================
"""

import logging
from typing import Optional, Callable, Tuple

from .api.schemas import ErrorResponse
from .config import ServerConfig
from .core import SocketServer, Connection, ConnectionState, RequestTooLarge, ThreadPool
from .errors import ErrorHandler
from .http import (
    HTTPRequest, RequestParser, HTTPParseError,
    HTTPResponse, ResponseBuilder, HTTPStatus,
    Router, Handler,
)
from .middleware import MiddlewarePipeline, Middleware


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    Multi-threaded HTTP/1.1 server.

    Usage:
        server = HTTPServer(ServerConfig(port=8000))
        server.use(LoggingMiddleware())
        server.add_route("/api/hello", HelloHandler())
        server.run()        # blocks until SIGINT / SIGTERM / stop()
    """

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        error_handler: Optional[ErrorHandler] = None,
    ):
        """
        Args:
            config: Server settings; validated immediately.
            error_handler: Translator for failures; a default one if omitted.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        # ─────────────────────────────────────────────────────────────────
        # TRANSPORT
        # ─────────────────────────────────────────────────────────────────
        self._socket_server = SocketServer(self.config)
        self._thread_pool = ThreadPool(
            min_workers=self.config.min_workers,
            max_workers=self.config.max_workers,
            queue_size=self.config.queue_size,
        )
        self._parser = RequestParser(max_request_size=self.config.max_request_size)

        # ─────────────────────────────────────────────────────────────────
        # APPLICATION
        # ─────────────────────────────────────────────────────────────────
        self._router = Router()
        self._middleware = MiddlewarePipeline()
        self._errors = error_handler or ErrorHandler()

        # Built in run(): middleware(errors(router))
        self._handler: Optional[Callable[[HTTPRequest], HTTPResponse]] = None
        self._running = False

    # =========================================================================
    # CONFIGURATION
    # =========================================================================

    def use(self, middleware: Middleware) -> "HTTPServer":
        """Append middleware; the first added is the outermost."""
        self._middleware.add(middleware)
        return self

    @property
    def router(self) -> Router:
        return self._router

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def address(self) -> Tuple[str, int]:
        """(host, port) being served; the real port when configured with 0."""
        return self._socket_server.address

    def add_route(
        self,
        path: str,
        handler: Handler,
        name: Optional[str] = None,
    ) -> "HTTPServer":
        self._router.add_route(path, handler, name=name)
        return self

    def build_handler(self) -> Callable[[HTTPRequest], HTTPResponse]:
        """
        The complete request chain: middleware around the error-guarded
        router. Also usable without sockets, e.g. in tests.
        """
        return self._middleware.wrap(self._errors.wrap(self._router.handle))

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def run(self, host: Optional[str] = None, port: Optional[int] = None):
        """
        Serve until stopped. Blocks.

        Args:
            host: Override ``config.host``.
            port: Override ``config.port``.

        Raises:
            OSError: If the address cannot be bound.
        """
        if host:
            self.config.host = host
        if port is not None:
            self.config.port = port

        self._setup_logging()
        self._handler = self.build_handler()
        self._thread_pool.start()
        self._running = True

        logger.info(f"Starting {self.config.server_name} on {self.config.host}:{self.config.port}")
        self._print_startup_banner()

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._shutdown()

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the listening socket accepts connections."""
        return self._socket_server.wait_until_ready(timeout)

    def stop(self):
        """Ask a running server to stop; ``run()`` returns shortly after."""
        self._socket_server.shutdown()

    def _setup_logging(self):
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)
        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("userapi").setLevel(level)

    def _print_startup_banner(self):
        print()
        print("=" * 64)
        print(f"  {self.config.server_name} listening on http://{self.config.host}:{self.config.port}")
        print(f"  Workers: {self.config.min_workers}-{self.config.max_workers} threads")
        auth = f"realm {self.config.auth_realm}" if self.config.auth_enabled else "off"
        print(f"  Basic auth: {auth}")
        print("  Press Ctrl+C to stop")
        print("=" * 64)
        self._router.print_routes()

    def _shutdown(self):
        logger.info("Shutting down server...")
        self._running = False
        self._thread_pool.shutdown(wait=True, timeout=30.0)
        logger.info("Server stopped")

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """Runs on the accept thread: hand the connection to a worker."""
        if not self._thread_pool.submit(self._process_connection, args=(conn,)):
            logger.warning(f"[{conn.id}] Worker queue full, rejecting connection")
            self._send_error(conn, HTTPStatus.SERVICE_UNAVAILABLE, "Server overloaded")
            conn.close()

    def _process_connection(self, conn: Connection):
        """
        Runs on a worker: serve requests until the client or the
        keep-alive policy ends the connection.
        """
        with conn:
            while self._running:
                try:
                    raw_request = conn.read_request()
                except TimeoutError:
                    self._send_error(conn, HTTPStatus.REQUEST_TIMEOUT, "Request timeout")
                    break
                except RequestTooLarge as e:
                    self._send_error(conn, HTTPStatus.PAYLOAD_TOO_LARGE, str(e))
                    break

                if raw_request is None:
                    break

                try:
                    request = self._parser.parse(raw_request, conn.address)
                except HTTPParseError as e:
                    logger.info(f"[{conn.id}] Bad request: {e}")
                    self._send_error(conn, HTTPStatus(e.status_code), str(e))
                    break

                conn.state = ConnectionState.PROCESSING
                try:
                    response = self._handler(request)
                except Exception as e:
                    # Raised by middleware outside the error-guarded router.
                    response = self._errors.handle(e, request)

                keep_alive = request.is_keep_alive and self.config.keep_alive
                if keep_alive:
                    response.headers.setdefault("Connection", "keep-alive")
                    response.headers.setdefault(
                        "Keep-Alive", f"timeout={int(self.config.keep_alive_timeout)}"
                    )
                else:
                    response.headers["Connection"] = "close"

                if not conn.send_response(response.to_bytes(self.config.server_name)):
                    break
                if not keep_alive:
                    break

                conn.set_keep_alive()

    def _send_error(self, conn: Connection, status: HTTPStatus, message: str):
        """Answer a failure that happened before a request could be dispatched."""
        body = ErrorResponse(code=int(status), message=message).model_dump()
        response = (ResponseBuilder()
            .status(status)
            .json(body)
            .close_connection()
            .build())
        conn.send_response(response.to_bytes(self.config.server_name))


# =============================================================================
# MODULE SUMMARY
# =============================================================================
#
# HTTPServer owns the socket server, thread pool, parser, router,
# middleware pipeline and error handler. Requests flow
# accept → worker → read → parse → middleware → errors(router) → send,
# looping while the connection is kept alive.
# =============================================================================
