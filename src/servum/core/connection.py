"""
=============================================================================
CLIENT CONNECTION
=============================================================================

Wraps one accepted client socket for the lifetime of a single request.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    Connection Lifecycle                              │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   NEW ──read_request()──► READING ──► PROCESSING                    │
    │                                          │                           │
    │                       send_response() ◄──┘                           │
    │                              │                                       │
    │                           WRITING ──close()──► CLOSING ──► CLOSED   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

There is no keep-alive: every response carries "Connection: close" and
the socket is closed right after it is written.

=============================================================================
"""

import socket
import time
import logging
import uuid
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Connection lifecycle states, for logging and debugging."""
    NEW = "new"
    READING = "reading"
    PROCESSING = "processing"
    WRITING = "writing"
    CLOSING = "closing"
    CLOSED = "closed"


@dataclass
class Connection:
    """
    Represents a client connection.

    Attributes:
        socket: The accepted client socket.
        address: (ip, port) of the client.
        buffer_size: Size of the single read taken by read_request().
        timeout: Read/write timeout in seconds; None blocks indefinitely.
    """

    socket: socket.socket
    address: tuple

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    buffer_size: int = 1024
    timeout: Optional[float] = None

    def __post_init__(self):
        # Blocking mode with an optional deadline; settimeout(None) == blocking.
        self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def client_port(self) -> int:
        return self.address[1]

    def read_request(self) -> bytes:
        """
        Read the request with a single recv() of at most buffer_size bytes.

        Whatever arrived in that one read is the request. A request line
        split across TCP segments, or longer than the buffer, is not
        reassembled; it fails to parse later.

        Returns:
            The bytes read; b"" if the client closed without sending.

        Raises:
            OSError: On socket errors, including socket.timeout when a
                     timeout is configured.
        """
        self.state = ConnectionState.READING
        data = self.socket.recv(self.buffer_size)
        self.state = ConnectionState.PROCESSING
        return data

    def send_response(self, data: bytes) -> bool:
        """
        Send response bytes to the client.

        Uses sendall() so that the whole response is written.

        Returns:
            True if sent, False if the client went away. The failure is
            logged and the connection should just be closed.
        """
        self.state = ConnectionState.WRITING

        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            logger.warning(f"[{self.id}] Send to {self.client_ip}:{self.client_port} failed: {e}")
            return False

    def close(self):
        """
        Close the connection.

        shutdown(SHUT_WR) sends FIN first so the client sees the end of
        the response before the descriptor is released.
        """
        if self.state == ConnectionState.CLOSED:
            return

        self.state = ConnectionState.CLOSING

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Client already gone

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {time.time() - self.created_at:.3f}s")

    # =========================================================================
    # CONTEXT MANAGER
    # =========================================================================

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False  # Don't suppress exceptions
