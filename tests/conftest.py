"""
pytest configuration and fixtures.
"""

import logging
import socket
import threading
from pathlib import Path
from typing import Generator
import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from servum import FileServer, ServerConfig


INDEX_HTML = b"<!DOCTYPE html><html><body><h1>Home</h1></body></html>"


@pytest.fixture
def site(tmp_path: Path) -> Path:
    """
    A small served directory:

        site/
        ├── index.html
        ├── notes.txt
        ├── data.json
        ├── logo.svg
        ├── a&b <x>.txt
        └── docs/
            ├── guide.md
            └── sub/
    """
    root = tmp_path / "site"
    root.mkdir()
    (root / "index.html").write_bytes(INDEX_HTML)
    (root / "notes.txt").write_text("hello notes\n")
    (root / "data.json").write_text('{"ok": true}')
    (root / "logo.svg").write_text("<svg/>")
    (root / "a&b <x>.txt").write_text("escaped")
    docs = root / "docs"
    docs.mkdir()
    (docs / "guide.md").write_text("# Guide\n")
    (docs / "sub").mkdir()

    # Sibling of the served directory, must never be reachable
    (tmp_path / "secret.txt").write_text("top secret")
    return root


@pytest.fixture
def bare_site(tmp_path: Path) -> Path:
    """A served directory without an index.html."""
    root = tmp_path / "bare"
    root.mkdir()
    (root / "readme.txt").write_text("no index here")
    (root / "img").mkdir()
    return root


@pytest.fixture
def config(site: Path) -> ServerConfig:
    """Default test server configuration."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        base_dir=site,
        threads=2,
        verbose=False,
        timeout=5.0,
    )


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


class TestServer:
    """Test server helper that runs in a background thread."""

    __test__ = False

    def __init__(self, server: FileServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        """Start server in background thread."""
        self._thread = threading.Thread(
            target=self.server.run,
            kwargs={"banner": False},
            daemon=True,
        )
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        """Stop the server and wait for the workers to drain."""
        self.server.stop()

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    def request(self, raw: bytes) -> bytes:
        """Send raw bytes and read until the server closes the connection."""
        with socket.create_connection(("127.0.0.1", self.port), timeout=5.0) as s:
            s.sendall(raw)
            chunks = []
            while True:
                chunk = s.recv(65536)
                if not chunk:
                    break
                chunks.append(chunk)
        return b"".join(chunks)


@pytest.fixture
def test_server(config: ServerConfig) -> Generator[TestServer, None, None]:
    """Create a running test server on an OS-assigned port."""
    test_srv = TestServer(FileServer(config))
    test_srv.start()

    yield test_srv

    test_srv.stop()


@pytest.fixture
def make_server(config: ServerConfig):
    """Start extra servers with config overrides; all are stopped on teardown."""
    started = []

    def factory(**overrides) -> TestServer:
        test_srv = TestServer(FileServer(config.with_overrides(**overrides)))
        test_srv.start()
        started.append(test_srv)
        return test_srv

    yield factory

    for test_srv in started:
        test_srv.stop()

    # A verbose server points the access log at the (captured) stdout.
    access_logger = logging.getLogger("servum.access")
    for handler in list(access_logger.handlers):
        access_logger.removeHandler(handler)
    access_logger.propagate = True
