"""
=============================================================================
ACCESS LOG
=============================================================================

One log record per answered request, emitted on the "servum.access"
logger when the server runs verbose.

=============================================================================
LOG FORMATS
=============================================================================

    TEXT (default), lined up under tui.print_verbose_header():
    ┌─────────────────────────────────────────────────────────────────────┐
    │ [GET    /docs/index.html                 ] -> 200    OK       87μs  │
    │  ──────  ───────────────────────────────       ───   ──       ────  │
    │  Method  Path (first 32 chars)                 Code  Message  Time  │
    └─────────────────────────────────────────────────────────────────────┘

    JSON (for log aggregators):
    ┌─────────────────────────────────────────────────────────────────────┐
    │ {"method": "GET", "path": "/docs/index.html", "status_code": 200,  │
    │  "message": "OK", "content_length": 5120, "duration_us": 87,       │
    │  "client_ip": "127.0.0.1", "timestamp": "17/Oct/2026:10:55:36 +0000"}│
    └─────────────────────────────────────────────────────────────────────┘

Route the records elsewhere with the standard logging API:

    logging.getLogger("servum.access").addHandler(file_handler)

=============================================================================
"""

import json
import time
import logging
from dataclasses import dataclass, asdict

from .http.request import HTTPRequest
from .http.response import HTTPResponse


logger = logging.getLogger("servum.access")

PATH_COLUMN_WIDTH = 32


@dataclass
class RequestLog:
    """Structured log entry for one request/response pair."""

    method: str
    path: str
    status_code: int
    message: str
    content_length: int
    duration_us: int
    client_ip: str = "-"
    timestamp: str = ""

    @classmethod
    def from_exchange(
        cls,
        request: HTTPRequest,
        response: HTTPResponse,
        started: float,
        client_ip: str = "-",
    ) -> "RequestLog":
        """
        Build an entry from a handled request.

        Args:
            started: time.perf_counter() value taken before parsing.
        """
        return cls(
            method=request.method,
            path=request.path,
            status_code=int(response.status.code),
            message=response.status.message,
            content_length=len(response.body),
            duration_us=int((time.perf_counter() - started) * 1_000_000),
            client_ip=client_ip,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )

    def to_dict(self) -> dict:
        return asdict(self)

    def to_text(self) -> str:
        path = self.path[:PATH_COLUMN_WIDTH]
        return (
            f"[{self.method:<6} {path:<{PATH_COLUMN_WIDTH + 1}}] -> "
            f"{self.status_code:<6} {self.message:<24} {self.duration_us:<4}μs"
        )


def log_request(entry: RequestLog, log_format: str = "text"):
    """Emit an entry on the access logger in the given format."""
    if log_format == "json":
        logger.info(json.dumps(entry.to_dict()))
    else:
        logger.info(entry.to_text())
