"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Central, immutable configuration for the file server.

=============================================================================
WHY FROZEN?
=============================================================================

Every worker thread reads the same ServerConfig instance. Because the
dataclass is frozen and built once before the accept loop starts, there
is no write path after startup and no lock is needed to read it:

    main thread                     worker threads
    ───────────                     ──────────────
    config = ServerConfig(...)
    config.validate()
    FileServer(config).run()  ───►  handle_request(req, config)   (read only)
                              ───►  handle_request(req, config)   (read only)

=============================================================================
SOURCES
=============================================================================

    1. Defaults (below)
    2. Environment variables (ServerConfig.from_env)
    3. Command-line arguments (servum.__main__)

Later sources override earlier ones.

=============================================================================
"""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional


LOG_FORMATS = ("text", "json")


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class ServerConfig:
    """
    Configuration for the file server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK
    - host, port, backlog, buffer_size, timeout

    CONTENT
    - base_dir, list_dir, index_file

    THREADING
    - threads

    OUTPUT
    - verbose, log_level, log_format

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """
    The IP address to bind to. Loopback by default: this is a local
    development server.
    """

    port: int = 8080
    """
    The port number to listen on. 0 lets the OS pick a free port.
    """

    backlog: int = 128
    """
    Maximum number of queued connections before the OS refuses new ones.
    """

    buffer_size: int = 1024
    """
    Size of the single read taken from each connection. A request line
    that does not fit is truncated and fails to parse.
    """

    timeout: Optional[float] = None
    """
    Socket timeout in seconds for reads and writes on client connections.
    None = no deadline: a slow client occupies its worker until it is done.
    """

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT
    # ─────────────────────────────────────────────────────────────────────

    base_dir: Path = field(default_factory=Path.cwd)
    """
    Root directory to serve. Canonicalized on construction; nothing
    outside it is ever read.
    """

    list_dir: bool = True
    """
    Render HTML listings for directory requests. When off, directory
    requests get 403 Forbidden.
    """

    index_file: str = "index.html"
    """
    Default document served for "/".
    """

    # ─────────────────────────────────────────────────────────────────────
    # THREAD POOL
    # ─────────────────────────────────────────────────────────────────────

    threads: int = 4
    """
    Number of worker threads. Fixed for the lifetime of the server.
    """

    # ─────────────────────────────────────────────────────────────────────
    # OUTPUT
    # ─────────────────────────────────────────────────────────────────────

    verbose: bool = True
    """
    Log one access line per request and report unreadable requests.
    """

    log_level: str = "INFO"
    """
    Logging level (DEBUG, INFO, WARNING, ERROR).
    """

    log_format: str = "text"
    """
    Access log format: 'text' (aligned columns) or 'json'.
    """

    server_name: str = "servum/1.0.0"

    def __post_init__(self):
        # Frozen dataclass: bypass __setattr__ to store the canonical path.
        object.__setattr__(self, "base_dir", Path(self.base_dir).expanduser().resolve())

    @classmethod
    def from_env(cls, **overrides) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        SERVUM_HOST         Address to bind (default: 127.0.0.1)
        SERVUM_PORT         Port (default: 8080)
        SERVUM_BASE_DIR     Directory to serve (default: current directory)
        SERVUM_THREADS      Worker threads (default: 4)
        SERVUM_QUIET        Disable access logging when set to 1/true/yes
        SERVUM_NO_LIST_DIR  Disable directory listings when set
        SERVUM_LOG_LEVEL    Logging level (default: INFO)

        =====================================================================

        Keyword arguments override both defaults and environment.
        """
        values = dict(
            host=os.getenv("SERVUM_HOST", "127.0.0.1"),
            port=int(os.getenv("SERVUM_PORT", "8080")),
            base_dir=Path(os.getenv("SERVUM_BASE_DIR") or Path.cwd()),
            threads=int(os.getenv("SERVUM_THREADS", "4")),
            verbose=not _env_flag("SERVUM_QUIET"),
            list_dir=not _env_flag("SERVUM_NO_LIST_DIR"),
            log_level=os.getenv("SERVUM_LOG_LEVEL", "INFO"),
        )
        values.update(overrides)
        return cls(**values)

    def with_overrides(self, **changes) -> "ServerConfig":
        """Return a copy with some fields replaced."""
        return replace(self, **changes)

    def validate(self) -> None:
        """
        Validate configuration values.

        Checked at startup, before the socket is bound or any worker is
        started.

        Raises:
            ValueError: On the first invalid value.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.threads < 1:
            raise ValueError(f"threads must be >= 1, got {self.threads}")

        if not self.base_dir.is_dir():
            raise ValueError(f"Base directory does not exist: {self.base_dir}")

        if not self.index_file or "/" in self.index_file:
            raise ValueError(f"Invalid index file name: {self.index_file!r}")

        if self.buffer_size < 16:
            raise ValueError("buffer_size must be >= 16")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"log_format must be one of {', '.join(LOG_FORMATS)}")
