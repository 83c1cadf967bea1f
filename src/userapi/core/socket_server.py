"""
=============================================================================
TCP SOCKET SERVER
=============================================================================

Owns the listening socket and hands every accepted client, wrapped in a
Connection, to a callback. It knows nothing about HTTP.

    socket() ─► setsockopt() ─► bind() ─► listen() ─► accept loop
                                                          │
                                          Connection(client_socket)
                                                          │
                                              connection_handler(conn)

=============================================================================
STOPPING
=============================================================================

accept() runs with a 1 second timeout so the loop re-checks ``_running``
at least once a second. ``shutdown()`` only flips the flag; the loop
notices it, leaves, and closes the listening socket.

SIGINT and SIGTERM call ``shutdown()`` when the server runs on the main
thread. Python only allows signal handlers there, so a server started on
a background thread (as the tests do) is stopped by calling
``shutdown()`` directly.

=============================================================================
"""

import socket
import signal
import logging
import threading
from typing import Optional, Callable, Tuple

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)


class SocketServer:
    """
    Accepts TCP connections until shut down.

    Usage:
        server = SocketServer(config)
        server.start(handle_connection)   # blocks
    """

    def __init__(self, config: ServerConfig):
        self.config = config
        self._socket: Optional[socket.socket] = None
        self._running = False
        self._ready = threading.Event()
        self._original_handlers: dict = {}

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def address(self) -> Tuple[str, int]:
        """
        Address actually bound; differs from the config when port is 0.
        """
        if self._socket is not None:
            return self._socket.getsockname()[:2]
        return (self.config.host, self.config.port)

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until the socket is listening. False on timeout."""
        return self._ready.wait(timeout)

    def _create_socket(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        # Rebind immediately after a restart, despite TIME_WAIT.
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        # Small responses go out without waiting for Nagle's algorithm.
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        sock.settimeout(1.0)
        return sock

    def _setup_signals(self):
        if threading.current_thread() is not threading.main_thread():
            logger.debug("Not on the main thread, signal handlers not installed")
            return

        def shutdown_handler(signum, frame):
            logger.info(f"Received {signal.Signals(signum).name}, shutting down")
            self.shutdown()

        for sig in (signal.SIGTERM, signal.SIGINT):
            self._original_handlers[sig] = signal.signal(sig, shutdown_handler)

    def _restore_signals(self):
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    def start(self, connection_handler: Callable[[Connection], None]):
        """
        Bind, listen and accept until ``shutdown()`` is called.

        Args:
            connection_handler: Called with each new Connection on the
                                accepting thread; must not block for long.

        Raises:
            OSError: If the address cannot be bound.
        """
        self._socket = self._create_socket()
        try:
            self._socket.bind((self.config.host, self.config.port))
        except OSError as e:
            logger.error(f"Failed to bind to {self.config.host}:{self.config.port}: {e}")
            self._socket.close()
            self._socket = None
            raise

        self._socket.listen(self.config.backlog)
        self._running = True
        self._setup_signals()

        host, port = self.address
        logger.info(f"Listening on {host}:{port}")
        self._ready.set()

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if self._running:
                    logger.error(f"Accept error: {e}")
                break

            logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")
            conn = Connection(
                socket=client_socket,
                address=client_address,
                buffer_size=self.config.buffer_size,
                timeout=self.config.timeout,
                keep_alive_timeout=self.config.keep_alive_timeout,
                max_request_size=self.config.max_request_size,
            )
            connection_handler(conn)

    def shutdown(self):
        """Stop accepting. Idempotent and safe from any thread."""
        if self._running:
            logger.info("Stopping socket server")
        self._running = False

    def _cleanup(self):
        self._restore_signals()
        if self._socket:
            self._socket.close()
            self._socket = None
        self._ready.clear()
        logger.info("Socket server stopped")
