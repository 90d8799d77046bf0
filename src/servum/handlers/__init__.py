"""
=============================================================================
REQUEST HANDLERS
=============================================================================

    static.py    Request → response (method check, path resolution,
                 file read, directory listing, index fallback)
    paths.py     Percent-decoding, lexical normalization, traversal guard
    listing.py   HTML directory listings

=============================================================================
"""

from .static import StaticFileHandler, handle_request
from .paths import (
    TraversalError,
    decode_percents,
    normalize_path,
    is_within,
    request_filename,
    resolve_path,
)
from .listing import list_directory, render_directory_entry

__all__ = [
    "StaticFileHandler",
    "handle_request",
    "TraversalError",
    "decode_percents",
    "normalize_path",
    "is_within",
    "request_filename",
    "resolve_path",
    "list_directory",
    "render_directory_entry",
]
