"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Every setting of the service in one dataclass, validated at startup.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    WHERE SETTINGS COME FROM                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m userapi --port 9000 --no-auth                    │
    │                                                                      │
    │   2. Code                                                            │
    │      └── ServerConfig(port=9000, reject_duplicate_logins=True)      │
    │                                                                      │
    │   3. Defaults (below)                                                │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Environment variables and config files are deliberately not read: the
service has no state that outlives the process, and everything it needs
fits on a command line.

=============================================================================
INTERVIEW QUESTIONS
=============================================================================

Q: "Why validate in one place at startup?"
A: "Fail fast. A bad port or an empty password should stop the process
   before it binds a socket, not surface on the first request."

Q: "Why are the demo credentials in the config at all?"
A: "So that tests and local runs can change them without touching the
   authentication code; the verifier is built from whatever is here."

=============================================================================
"""

from dataclasses import dataclass
from typing import Optional


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ServerConfig:
    """
    Configuration for the service.

    =========================================================================
    GROUPS
    =========================================================================

    NETWORK      host, port, backlog, buffer_size, timeout
    HTTP         keep_alive, keep_alive_timeout, max_request_size
    THREADING    min_workers, max_workers, queue_size
    LOGGING      log_level, log_format
    AUTH         auth_enabled, auth_realm, auth_username, auth_password
    USERS        reject_duplicate_logins

    =========================================================================
    """

    host: str = "127.0.0.1"
    """Interface to bind. "0.0.0.0" listens on all of them."""

    port: int = 8000
    """TCP port. 0 lets the OS pick a free one."""

    backlog: int = 128
    """Pending connections the kernel queues before refusing new ones."""

    buffer_size: int = 8192
    """Bytes read per recv() call."""

    timeout: Optional[float] = 30.0
    """Seconds to wait for the first request on a connection."""

    keep_alive: bool = True
    """Serve several requests per connection when the client allows it."""

    keep_alive_timeout: float = 5.0
    """Seconds an idle keep-alive connection is kept open."""

    max_request_size: int = 1024 * 1024
    """Largest accepted request, headers plus body, in bytes."""

    min_workers: int = 4
    """Worker threads started with the server."""

    max_workers: int = 16
    """Upper bound when the pool grows under load."""

    queue_size: int = 100
    """Connections that may wait for a worker before 503 is returned."""

    log_level: str = "INFO"
    """Root log level: DEBUG, INFO, WARNING, ERROR or CRITICAL."""

    log_format: str = "text"
    """Access log format, "text" or "json"."""

    server_name: str = "userapi/1.0"
    """Value of the Server response header."""

    auth_enabled: bool = True
    """Require Basic authentication on the greeting endpoint."""

    auth_realm: str = "myrealm"
    """Realm sent in the WWW-Authenticate challenge."""

    auth_username: str = "admin"
    auth_password: str = "admin"

    reject_duplicate_logins: bool = False
    """
    False: registering an existing login overwrites the stored user.
    True:  it fails with 400 and the first registration is kept.
    """

    def validate(self) -> None:
        """
        Check every value; called by HTTPServer before anything starts.

        Raises:
            ValueError: Naming the first invalid setting.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")
        if self.min_workers < 1:
            raise ValueError("min_workers must be >= 1")
        if self.max_workers < self.min_workers:
            raise ValueError("max_workers must be >= min_workers")
        if self.queue_size < 1:
            raise ValueError("queue_size must be >= 1")
        if self.buffer_size < 1024:
            raise ValueError("buffer_size must be >= 1024")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")
        if self.keep_alive_timeout <= 0:
            raise ValueError("keep_alive_timeout must be > 0")
        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(
                f"Invalid log_level: {self.log_level}. "
                f"Must be one of {', '.join(LOG_LEVELS)}."
            )
        if self.log_format not in ("text", "json"):
            raise ValueError(f"Invalid log_format: {self.log_format}")
        if self.auth_enabled and not (self.auth_username and self.auth_realm):
            raise ValueError("auth_username and auth_realm must not be empty")


# =============================================================================
# MODULE SUMMARY
# =============================================================================
#
# One dataclass holds network, HTTP, threading, logging, auth and user
# store settings. Defaults describe the demo service: port 8000, Basic auth
# as admin/admin in realm "myrealm", duplicate logins overwrite.
# =============================================================================
