"""
=============================================================================
STATIC FILE HANDLER
=============================================================================

Turns a parsed request into a response: a file, a directory listing or
an HTML error page. It never raises for request-level problems; every
outcome is an HTTPResponse.

=============================================================================
FLOW
=============================================================================

    MethodCheck ──(not GET/HEAD)──────────────────────────► 501
        │
        ▼
    PathResolve ──(escapes base_dir)──────────────────────► 403
        │
        ▼
    FilesystemLookup
        ├── directory, listing off ───────────────────────► 403
        ├── directory, listing on ──► DirectoryListing ───► 200
        └── file / missing ─────────► FileRead ───────────► 200
                                         │ failed
                                         ▼
                                    IndexFallback ─(index file requested
                                         │          and listing on)──► 200
                                         ▼                        (root listing)
                                    404 / 403 / 500

The handler is read-only: at most one file read or one directory scan per
request, plus the optional fallback scan of the root.

=============================================================================
"""

import logging

from ..config import ServerConfig
from ..http.html import HTML_MIME_TYPE
from ..http.mime_types import guess_mime_type
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse
from ..http.status_codes import HTTPStatus, StatusCode
from .listing import list_directory
from .paths import TraversalError, request_filename, resolve_path


logger = logging.getLogger(__name__)


SUPPORTED_METHODS = ("GET", "HEAD")

METHOD_NOT_SUPPORTED_MESSAGE = "Server only supports GET and HEAD requests"
LISTING_DISABLED_MESSAGE = "Directory listing is not allowed!"


class StaticFileHandler:
    """
    Serves files below ServerConfig.base_dir.

    =========================================================================
    USAGE
    =========================================================================

        handler = StaticFileHandler(config)
        response = handler.handle(parse_request(buffer))
        conn.send_response(response.to_bytes(head_only=request.is_head))

    The handler keeps no state besides the (frozen) config, so one
    instance is shared by all worker threads.

    =========================================================================
    """

    def __init__(self, config: ServerConfig):
        self.config = config

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Handle one request.

        Args:
            request: The parsed request line.

        Returns:
            The response to send; never raises for filesystem errors.
        """
        # ─────────────────────────────────────────────────────────────────
        # METHOD CHECK
        # ─────────────────────────────────────────────────────────────────
        if request.method not in SUPPORTED_METHODS:
            return HTTPResponse.from_status(
                HTTPStatus.from_code(StatusCode.NOT_IMPLEMENTED, METHOD_NOT_SUPPORTED_MESSAGE)
            )

        # ─────────────────────────────────────────────────────────────────
        # RESOLVE PATH
        # ─────────────────────────────────────────────────────────────────
        # Nothing below this point sees request.path; only the resolved
        # path is handed to the filesystem.
        filename = request_filename(request.path, self.config.index_file)

        try:
            path = resolve_path(filename, self.config.base_dir)
        except TraversalError as e:
            logger.warning(f"Path traversal attempt: {request.path}")
            return HTTPResponse.from_error(e)
        except FileNotFoundError as e:
            return HTTPResponse.from_error(e)

        # ─────────────────────────────────────────────────────────────────
        # FILESYSTEM LOOKUP
        # ─────────────────────────────────────────────────────────────────
        mime = guess_mime_type(path)

        try:
            if path.is_dir():
                if not self.config.list_dir:
                    return HTTPResponse.from_status(
                        HTTPStatus.from_code(StatusCode.FORBIDDEN, LISTING_DISABLED_MESSAGE)
                    )
                mime = HTML_MIME_TYPE
                body = list_directory(path, self.config.base_dir)
            else:
                body = path.read_bytes()

        except OSError as error:
            if not self._falls_back_to_listing(filename):
                return HTTPResponse.from_error(error)

            # ─────────────────────────────────────────────────────────────
            # INDEX FALLBACK
            # ─────────────────────────────────────────────────────────────
            # A missing default document degrades into a listing of the
            # served root instead of a 404.
            logger.debug(f"{filename} unavailable ({error.strerror or error}), listing root")
            mime = HTML_MIME_TYPE
            try:
                body = list_directory(self.config.base_dir, self.config.base_dir)
            except OSError as fallback_error:
                return HTTPResponse.from_error(fallback_error)

        return HTTPResponse.ok(body, mime)

    def _falls_back_to_listing(self, filename: str) -> bool:
        return self.config.list_dir and filename == self.config.index_file


def handle_request(request: HTTPRequest, config: ServerConfig) -> HTTPResponse:
    """
    Handle one request with a throwaway handler.

    Example:
        >>> response = handle_request(HTTPRequest("POST", "/contact"), ServerConfig())
        >>> response.status_line
        'HTTP/1.1 501 Not Implemented'
    """
    return StaticFileHandler(config).handle(request)
