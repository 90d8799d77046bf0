"""
=============================================================================
HTTP REQUEST PARSER
=============================================================================

Turns the bytes read from a connection into an HTTPRequest.

Only the request line matters to a static file server:

    GET /docs/index.html HTTP/1.1\r\n
    ─┬─ ───────┬──────── ────┬───
     │         │             │
   Method     Path        Version

Headers and body (if any) are ignored. The buffer comes from a single
read; a request line cut off by the end of the buffer simply fails to
parse. Nothing is reassembled across reads.

=============================================================================
PARSE ERRORS
=============================================================================

    HTTPRequestError
    ├── InvalidEncodingError       bytes are not valid UTF-8
    ├── NoMethodError              empty request line
    ├── NoPathError                path or version token missing
    └── MalformedRequestLineError  more than three tokens

A request that fails to parse gets no response at all: the connection is
closed, since there is no valid request to answer.

=============================================================================
"""

import re
from dataclasses import dataclass


class HTTPRequestError(Exception):
    """Raised when a request line cannot be parsed."""

    message = "Invalid HTTP request"

    def __init__(self, message: str = None):
        super().__init__(message or self.message)


class NoMethodError(HTTPRequestError):
    message = "Request does not have an associated HTTP method"


class NoPathError(HTTPRequestError):
    message = "Request does not have an associated request path"


class InvalidEncodingError(HTTPRequestError):
    message = "Request contains invalid UTF-8 characters"


class MalformedRequestLineError(HTTPRequestError):
    message = "Request line has more than three parts"


# Space, tab, line feed, form feed, carriage return
_ASCII_WHITESPACE = re.compile(r"[ \t\n\f\r]+")


@dataclass(frozen=True)
class HTTPRequest:
    """
    A parsed request line.

    Attributes:
        method: HTTP method exactly as sent ("GET", "HEAD", ...). Not
                validated here; unsupported methods get 501 later.
        path:   Raw request path, still percent-encoded. Never used for
                filesystem access directly.
    """

    method: str
    path: str

    @property
    def is_head(self) -> bool:
        return self.method == "HEAD"

    def __str__(self) -> str:
        return f"{self.method} {self.path} HTTP/1.1"


def parse_request(buffer: bytes) -> HTTPRequest:
    """
    Parse the request line out of a raw buffer.

    Args:
        buffer: Bytes read from the client.

    Returns:
        The parsed request.

    Raises:
        HTTPRequestError: One of its subclasses, see the module docstring.

    Example:
        >>> parse_request(b"HEAD /static/logo.svg HTTP/1.1\\r\\n\\r\\n")
        HTTPRequest(method='HEAD', path='/static/logo.svg')
    """
    try:
        text = buffer.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidEncodingError() from e

    # First non-blank line
    tokens = [t for t in _ASCII_WHITESPACE.split(text.lstrip(" \t\n\f\r").split("\n", 1)[0]) if t]

    if not tokens:
        raise NoMethodError()
    if len(tokens) < 3:
        # "GET" or "GET /" without a protocol version
        raise NoPathError()
    if len(tokens) > 3:
        raise MalformedRequestLineError()

    method, path, _version = tokens
    return HTTPRequest(method=method, path=path)
