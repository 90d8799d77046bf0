"""
=============================================================================
HTTP PROTOCOL COMPONENTS
=============================================================================

    request.py       Request line parsing and parse errors
    response.py      Response model and wire serialization
    status_codes.py  Supported status codes, I/O error classification
    html.py          Shared HTML document template
    mime_types.py    Extension → MIME type lookup

=============================================================================
"""

from .request import (
    HTTPRequest,
    HTTPRequestError,
    NoMethodError,
    NoPathError,
    InvalidEncodingError,
    MalformedRequestLineError,
    parse_request,
)
from .response import HTTPResponse
from .status_codes import HTTPStatus, StatusCode
from .html import html_doc, HTML_MIME_TYPE
from .mime_types import guess_mime_type

__all__ = [
    # Request parsing
    "HTTPRequest",
    "HTTPRequestError",
    "NoMethodError",
    "NoPathError",
    "InvalidEncodingError",
    "MalformedRequestLineError",
    "parse_request",

    # Responses
    "HTTPResponse",
    "HTTPStatus",
    "StatusCode",
    "html_doc",
    "HTML_MIME_TYPE",

    # MIME types
    "guess_mime_type",
]
