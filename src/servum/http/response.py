"""
=============================================================================
HTTP RESPONSE BUILDER
=============================================================================

Every request that parses ends in exactly one HTTPResponse, including
failures: errors are turned into an HTML error page, never raised to the
caller.

=============================================================================
WIRE FORMAT
=============================================================================

    HTTP/1.1 200 OK\r\n                  ← status line
    Content-Length: 1234\r\n             ← always, from len(body)
    Content-Type: text/html\r\n          ← only when a MIME type is known
    Connection: close\r\n                ← always, no keep-alive
    \r\n
    <body bytes>                         ← omitted for HEAD

Header order is fixed; there are no other headers.

=============================================================================
"""

from dataclasses import dataclass
from typing import Optional

from .html import HTML_MIME_TYPE
from .status_codes import HTTPStatus, StatusCode


@dataclass
class HTTPResponse:
    """
    Represents an HTTP response to be sent to the client.

    Use the classmethods rather than the constructor for errors, so the
    error page and its MIME type are always set together:

        HTTPResponse.ok(body, mime)              200 with content
        HTTPResponse.from_status(status)         HTML page for a status
        HTTPResponse.from_error(os_error)        classify, then HTML page
    """

    status: HTTPStatus
    mime: Optional[str] = None
    body: bytes = b""

    @classmethod
    def ok(cls, body: bytes, mime: Optional[str] = None) -> "HTTPResponse":
        return cls(HTTPStatus.from_code(StatusCode.OK), mime, body)

    @classmethod
    def from_status(cls, status: HTTPStatus) -> "HTTPResponse":
        """Build the HTML error page for a status."""
        return cls(status, HTML_MIME_TYPE, status.to_html().encode("utf-8"))

    @classmethod
    def from_error(cls, error: OSError) -> "HTTPResponse":
        return cls.from_status(HTTPStatus.from_error(error))

    @property
    def status_line(self) -> str:
        return self.status.status_line

    def header(self) -> bytes:
        """
        Render the status line and headers, including the blank line that
        ends them.
        """
        lines = [
            self.status_line,
            f"Content-Length: {len(self.body)}",
        ]
        if self.mime:
            lines.append(f"Content-Type: {self.mime}")
        lines.append("Connection: close")

        return ("\r\n".join(lines) + "\r\n\r\n").encode("utf-8")

    def to_bytes(self, head_only: bool = False) -> bytes:
        """
        Serialize for sending over the socket.

        Args:
            head_only: Send only the header (HEAD requests). Content-Length
                       still describes the body that a GET would receive.
        """
        if head_only:
            return self.header()
        return self.header() + self.body

    def __str__(self) -> str:
        # For debugging; bodies of binary files are shown with replacements.
        return self.to_bytes().decode("utf-8", errors="replace")
