"""
=============================================================================
SERVUM - Minimal Multi-Threaded Static File Server
=============================================================================

Serves the files below one directory over HTTP/1.1 GET and HEAD, with a
fixed pool of worker threads, optional directory listings and a strict
guard against escaping the served directory.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    servum/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m servum)
    ├── server.py            # FileServer: socket server + pool + handler
    ├── config.py            # ServerConfig dataclass
    ├── access_log.py        # Per-request log records
    ├── tui.py               # Startup banner and column header
    ├── core/                # Low-level components
    │   ├── socket_server.py # TCP accept loop
    │   ├── connection.py    # One client socket
    │   └── thread_pool.py   # Fixed-size worker pool
    ├── http/                # HTTP protocol components
    │   ├── request.py       # Request line parsing
    │   ├── response.py      # Response serialization
    │   ├── status_codes.py  # Status codes, error classification
    │   ├── html.py          # HTML document template
    │   └── mime_types.py    # MIME type detection
    └── handlers/            # Request handling
        ├── static.py        # Request → response
        ├── paths.py         # Decoding, normalization, traversal guard
        └── listing.py       # Directory listings

=============================================================================
QUICK START
=============================================================================

    from pathlib import Path
    from servum import FileServer, ServerConfig

    FileServer(ServerConfig(base_dir=Path("./public"), port=8000)).run()

=============================================================================
"""

__version__ = "1.0.0"

from .config import ServerConfig
from .server import FileServer

__all__ = [
    "__version__",
    "FileServer",
    "ServerConfig",
]
