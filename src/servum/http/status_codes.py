"""
=============================================================================
HTTP STATUS
=============================================================================

The file server answers with a small, closed set of status codes:

    ┌───────┬───────────────────────┬──────────────────────────────────────┐
    │ Code  │ Phrase                │ When                                 │
    ├───────┼───────────────────────┼──────────────────────────────────────┤
    │  200  │ OK                    │ File or directory listing served     │
    │  403  │ Forbidden             │ Traversal attempt, listing disabled, │
    │       │                       │ permission denied                    │
    │  404  │ Not Found             │ No such file                         │
    │  500  │ Internal Server Error │ Any other I/O failure                │
    │  501  │ Not Implemented       │ Method other than GET / HEAD         │
    └───────┴───────────────────────┴──────────────────────────────────────┘

Anything outside that table is folded into 500.

=============================================================================
"""

import errno
import html
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from .html import html_doc


class StatusCode(IntEnum):
    """
    Supported HTTP status codes.

    IntEnum, so codes compare equal to plain integers:

        >>> StatusCode.NOT_FOUND == 404
        True
        >>> StatusCode.NOT_FOUND.phrase
        'Not Found'
    """

    OK = 200
    FORBIDDEN = 403
    NOT_FOUND = 404
    INTERNAL_SERVER_ERROR = 500
    NOT_IMPLEMENTED = 501

    @property
    def phrase(self) -> str:
        return _PHRASES[self]

    @property
    def is_error(self) -> bool:
        return self >= 400

    @classmethod
    def fold(cls, code: int) -> "StatusCode":
        """Map any integer onto the supported set (unknown → 500)."""
        try:
            return cls(code)
        except ValueError:
            return cls.INTERNAL_SERVER_ERROR


_PHRASES = {
    StatusCode.OK: "OK",
    StatusCode.FORBIDDEN: "Forbidden",
    StatusCode.NOT_FOUND: "Not Found",
    StatusCode.INTERNAL_SERVER_ERROR: "Internal Server Error",
    StatusCode.NOT_IMPLEMENTED: "Not Implemented",
}

# errno values reported as 404 rather than 500
_NOT_FOUND_ERRNOS = {errno.ENOENT, errno.ENOTDIR}


@dataclass(frozen=True)
class HTTPStatus:
    """
    A status code, its reason phrase and an optional comment.

    The comment is shown to the client on the error page, so it is
    HTML-escaped when rendered. It may come from an OS error message.
    """

    code: StatusCode
    message: str
    comment: Optional[str] = None

    @classmethod
    def from_code(cls, code: int, comment: Optional[str] = None) -> "HTTPStatus":
        status = StatusCode.fold(code)
        return cls(status, status.phrase, comment)

    @classmethod
    def from_error(cls, error: OSError) -> "HTTPStatus":
        """
        Classify an I/O failure.

            FileNotFoundError, NotADirectoryError  →  404
            PermissionError                        →  403
            anything else                          →  500

        Errors raised with a plain message, e.g.
        PermissionError("Directory traversal is not allowed!"), carry that
        message as the comment; OS errors carry their strerror. The
        filename is never included.
        """
        if isinstance(error, (FileNotFoundError, NotADirectoryError)) or \
                error.errno in _NOT_FOUND_ERRNOS:
            code = StatusCode.NOT_FOUND
        elif isinstance(error, PermissionError):
            code = StatusCode.FORBIDDEN
        else:
            code = StatusCode.INTERNAL_SERVER_ERROR

        return cls(code, code.phrase, _error_comment(error))

    @property
    def status_line(self) -> str:
        """Format: HTTP/1.1 SP CODE SP PHRASE."""
        return f"HTTP/1.1 {int(self.code)} {self.message}"

    def to_html(self) -> str:
        """Render the shared error page for this status."""
        content = html.escape(self.message)
        if self.comment:
            content += "</p><p>" + html.escape(self.comment)
        return html_doc(int(self.code), int(self.code), content)

    def __str__(self) -> str:
        return self.status_line


def _error_comment(error: OSError) -> Optional[str]:
    if error.strerror:
        return error.strerror
    if error.args and isinstance(error.args[0], str):
        return error.args[0]
    return None
