"""
=============================================================================
FILE SERVER
=============================================================================

Wires the pieces together: socket server, thread pool and the static
file handler.

=============================================================================
ARCHITECTURE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                           FileServer                                 │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   ┌──────────────┐    ┌──────────────┐    ┌──────────────────────┐  │
    │   │ SocketServer │───►│  ThreadPool  │───►│ _process_connection  │  │
    │   │ (accept)     │    │ (N workers)  │    │                      │  │
    │   └──────────────┘    └──────────────┘    │  read (one recv)     │  │
    │                                           │  parse_request       │  │
    │                                           │  StaticFileHandler   │  │
    │                                           │  access log          │  │
    │                                           │  write, close        │  │
    │                                           └──────────────────────┘  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

A request line that does not parse is logged (when verbose) and the
connection is closed without any response. Everything else gets exactly
one response followed by close.

=============================================================================
"""

import sys
import time
import logging
from typing import Optional, Tuple

from . import tui
from .access_log import RequestLog, log_request
from .config import ServerConfig
from .core.connection import Connection
from .core.socket_server import SocketServer
from .core.thread_pool import ThreadPool
from .handlers.static import StaticFileHandler
from .http.request import HTTPRequestError, parse_request
from .http.response import HTTPResponse
from .http.status_codes import HTTPStatus, StatusCode


logger = logging.getLogger(__name__)


class FileServer:
    """
    Multi-threaded static file server.

    =========================================================================
    USAGE
    =========================================================================

        config = ServerConfig(base_dir=Path("./public"), port=8000)
        server = FileServer(config)
        server.run()  # Blocks until Ctrl+C or stop()

    From another thread (tests, embedding):

        thread = threading.Thread(target=server.run, kwargs={"banner": False})
        thread.start()
        server.wait_until_ready()
        ...
        server.stop()
        thread.join()

    =========================================================================
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        """
        Args:
            config: Server configuration. Uses defaults if not provided.

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self._handler = StaticFileHandler(self.config)
        self._socket_server = SocketServer(self.config)
        self._thread_pool: Optional[ThreadPool] = None

    @property
    def address(self) -> Tuple[str, int]:
        """The address actually bound, once run() has bound the socket."""
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._socket_server.is_running

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        return self._socket_server.wait_until_ready(timeout)

    def run(self, banner: bool = True):
        """
        Start the server (blocking).

        Args:
            banner: Print the logo and startup summary to stdout.

        Raises:
            OSError: If the address cannot be bound.
        """
        self._setup_logging()

        if banner:
            tui.print_logo()
            tui.print_info()

        self._socket_server.bind()
        self._thread_pool = ThreadPool(self.config.threads)

        host, port = self.address
        logger.info(f"Serving {self.config.base_dir} on {host}:{port} with {self.config.threads} workers")

        if banner:
            tui.print_config(self.config, self.address)
            if self.config.verbose and self.config.log_format == "text":
                tui.print_verbose_header()

        # ─────────────────────────────────────────────────────────────────
        # MAIN LOOP (blocks here)
        # ─────────────────────────────────────────────────────────────────
        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._shutdown()

    def stop(self):
        """Stop accepting connections; run() returns once workers drain."""
        self._socket_server.shutdown()

    def _setup_logging(self):
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("servum").setLevel(level)

        # The access log is switched by verbose/quiet, not by log_level.
        access_logger = logging.getLogger("servum.access")
        access_logger.setLevel(logging.INFO if self.config.verbose else logging.WARNING)

        # Text rows line up under the printed column header, so they go to
        # stdout bare, without the timestamp/level prefix.
        if self.config.verbose and self.config.log_format == "text" and not access_logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(logging.Formatter("%(message)s"))
            access_logger.addHandler(handler)
            access_logger.propagate = False

    def _shutdown(self):
        """Drain the pool: queued connections are still answered."""
        logger.info("Shutting down server...")

        if self._thread_pool is not None:
            self._thread_pool.shutdown()
            logger.debug(f"Pool stats at shutdown: {self._thread_pool.stats}")

        logger.info("Server stopped")

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """
        Queue a connection for a worker (runs on the accept thread).
        """
        try:
            self._thread_pool.submit(self._process_connection, conn)
        except RuntimeError:
            # Pool already shut down; nobody will answer.
            logger.debug(f"[{conn.id}] Server stopping, dropping connection")
            conn.close()

    def _process_connection(self, conn: Connection):
        """
        Answer one connection (runs in a worker thread).

        Args:
            conn: The client connection; always closed on return.
        """
        with conn:
            # ─────────────────────────────────────────────────────────────
            # READ REQUEST
            # ─────────────────────────────────────────────────────────────
            try:
                buffer = conn.read_request()
            except OSError as e:
                logger.warning(f"[{conn.id}] Read from {conn.client_ip} failed: {e}")
                return

            started = time.perf_counter()

            if not buffer:
                logger.debug(f"[{conn.id}] {conn.client_ip} closed without sending a request")
                return

            # ─────────────────────────────────────────────────────────────
            # PARSE REQUEST
            # ─────────────────────────────────────────────────────────────
            try:
                request = parse_request(buffer)
            except HTTPRequestError as e:
                # No response for an unreadable request line.
                if self.config.verbose:
                    logger.warning(f"Invalid HTTP request from {conn.client_ip}: {e}")
                return

            # ─────────────────────────────────────────────────────────────
            # HANDLE REQUEST
            # ─────────────────────────────────────────────────────────────
            try:
                response = self._handler.handle(request)
            except Exception as e:
                logger.exception(f"[{conn.id}] Handler error for {request}: {e}")
                response = HTTPResponse.from_status(
                    HTTPStatus.from_code(StatusCode.INTERNAL_SERVER_ERROR)
                )

            if self.config.verbose:
                log_request(
                    RequestLog.from_exchange(request, response, started, conn.client_ip),
                    self.config.log_format,
                )

            # ─────────────────────────────────────────────────────────────
            # SEND RESPONSE
            # ─────────────────────────────────────────────────────────────
            conn.send_response(response.to_bytes(head_only=request.is_head))
