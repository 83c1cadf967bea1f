"""
Transport layer: listening socket, per-client connections, worker threads.
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState, RequestTooLarge
from .thread_pool import ThreadPool

__all__ = [
    "SocketServer",
    "Connection",
    "ConnectionState",
    "RequestTooLarge",
    "ThreadPool",
]
