"""
=============================================================================
MIME TYPE DETECTION
=============================================================================

Extension → MIME type lookup for the Content-Type header.

Unknown or missing extensions give None, and the response is then sent
without a Content-Type header; the browser sniffs the content itself.

=============================================================================
"""

from pathlib import PurePath
from typing import Optional, Union


MIME_TYPES = {
    # -------------------------------------------------------------------------
    # TEXT TYPES
    # -------------------------------------------------------------------------
    #
    ".html": "text/html",
    ".htm": "text/html",
    ".css": "text/css",
    ".js": "text/javascript",
    ".mjs": "text/javascript",
    ".csv": "text/csv",
    ".ics": "text/calendar",
    ".txt": "text/plain",
    ".md": "text/markdown",
    ".rs": "text/x-rust",
    ".py": "text/x-python",

    # -------------------------------------------------------------------------
    # STRUCTURED DATA
    # -------------------------------------------------------------------------
    #
    ".json": "application/json",
    ".jsonld": "application/ld+json",
    ".xml": "application/xml",
    ".xhtml": "application/xhtml+xml",
    ".xul": "application/vnd.mozilla.xul+xml",
    ".wasm": "application/wasm",

    # -------------------------------------------------------------------------
    # IMAGE TYPES
    # -------------------------------------------------------------------------
    #
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".ico": "image/vnd.microsoft.icon",
    ".webp": "image/webp",
    ".avif": "image/avif",
    ".bmp": "image/bmp",
    ".tif": "image/tiff",
    ".tiff": "image/tiff",

    # -------------------------------------------------------------------------
    # FONT TYPES
    # -------------------------------------------------------------------------
    #
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".ttf": "font/ttf",
    ".otf": "font/otf",
    ".eot": "application/vnd.ms-fontobject",

    # -------------------------------------------------------------------------
    # AUDIO TYPES
    # -------------------------------------------------------------------------
    #
    ".aac": "audio/aac",
    ".mid": "audio/midi",
    ".midi": "audio/midi",
    ".mp3": "audio/mpeg",
    ".oga": "audio/ogg",
    ".opus": "audio/opus",
    ".wav": "audio/wav",
    ".weba": "audio/webm",

    # -------------------------------------------------------------------------
    # VIDEO TYPES
    # -------------------------------------------------------------------------
    #
    ".avi": "video/x-msvideo",
    ".mp4": "video/mp4",
    ".mpeg": "video/mpeg",
    ".ogv": "video/ogg",
    ".ts": "video/mp2t",
    ".webm": "video/webm",
    ".3gp": "video/3gpp",
    ".3g2": "video/3gpp2",

    # -------------------------------------------------------------------------
    # DOCUMENT TYPES
    # -------------------------------------------------------------------------
    #
    ".pdf": "application/pdf",
    ".rtf": "application/rtf",
    ".epub": "application/epub+zip",
    ".azw": "application/vnd.amazon.ebook",
    ".abw": "application/x-abiword",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".xls": "application/vnd.ms-excel",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".ppt": "application/vnd.ms-powerpoint",
    ".pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    ".odp": "application/vnd.oasis.opendocument.presentation",
    ".ods": "application/vnd.oasis.opendocument.spreadsheet",
    ".odt": "application/vnd.oasis.opendocument.text",
    ".vsd": "application/vnd.visio",

    # -------------------------------------------------------------------------
    # ARCHIVES AND BINARIES
    # -------------------------------------------------------------------------
    #
    ".arc": "application/x-freearc",
    ".bin": "application/octet-stream",
    ".bz": "application/x-bzip",
    ".bz2": "application/x-bzip2",
    ".gz": "application/gzip",
    ".jar": "application/java-archive",
    ".mpkg": "application/vnd.apple.installer+xml",
    ".ogx": "application/ogg",
    ".rar": "application/vnd.rar",
    ".tar": "application/x-tar",
    ".zip": "application/zip",
    ".7z": "application/x-7z-compressed",
    ".swf": "application/x-shockwave-flash",

    # -------------------------------------------------------------------------
    # SCRIPTS (served for download/viewing, never executed)
    # -------------------------------------------------------------------------
    #
    ".csh": "application/x-csh",
    ".sh": "application/x-sh",
    ".php": "application/x-httpd-php",
}


def guess_mime_type(path: Union[str, PurePath]) -> Optional[str]:
    """
    Get the MIME type for a file based on its extension.

    Args:
        path: File path or name.

    Returns:
        The MIME type, or None for unknown or missing extensions.

    Examples:
        >>> guess_mime_type("/srv/www/style.css")
        'text/css'

        >>> guess_mime_type("IMAGE.PNG")
        'image/png'

        >>> guess_mime_type("Makefile") is None
        True
    """
    extension = PurePath(path).suffix.lower()
    return MIME_TYPES.get(extension)
