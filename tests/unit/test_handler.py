"""
Unit tests for the static file handler and directory listings.
"""

import os
from pathlib import Path

import pytest

from servum.config import ServerConfig
from servum.handlers.listing import list_directory, render_directory_entry
from servum.handlers.static import (
    LISTING_DISABLED_MESSAGE,
    METHOD_NOT_SUPPORTED_MESSAGE,
    StaticFileHandler,
    handle_request,
)
from servum.http.request import HTTPRequest


def get(handler: StaticFileHandler, path: str):
    return handler.handle(HTTPRequest("GET", path))


@pytest.fixture
def handler(config: ServerConfig) -> StaticFileHandler:
    return StaticFileHandler(config)


class TestMethodCheck:
    """Tests for the GET/HEAD method check."""

    @pytest.mark.parametrize("method", ["POST", "PUT", "DELETE", "OPTIONS", "get", "PATCH"])
    def test_unsupported_method(self, handler: StaticFileHandler, method: str):
        response = handler.handle(HTTPRequest(method, "/index.html"))

        assert response.status.code == 501
        assert METHOD_NOT_SUPPORTED_MESSAGE.encode() in response.body
        assert response.mime == "text/html"

    def test_unsupported_method_skips_path_checks(self, handler: StaticFileHandler):
        """Even a traversal attempt gets 501 first."""
        response = handler.handle(HTTPRequest("POST", "/../etc/passwd"))

        assert response.status.code == 501

    def test_head_is_handled_like_get(self, handler: StaticFileHandler):
        head = handler.handle(HTTPRequest("HEAD", "/notes.txt"))

        assert head == get(handler, "/notes.txt")


class TestFiles:
    """Tests for serving files."""

    def test_root_serves_index(self, handler: StaticFileHandler, site: Path):
        response = get(handler, "/")

        assert response.status.code == 200
        assert response.body == (site / "index.html").read_bytes()
        assert response.mime == "text/html"

    def test_serves_file_bytes(self, handler: StaticFileHandler, site: Path):
        response = get(handler, "/notes.txt")

        assert response.status.code == 200
        assert response.body == (site / "notes.txt").read_bytes()
        assert response.mime == "text/plain"

    def test_mime_from_extension(self, handler: StaticFileHandler):
        assert get(handler, "/data.json").mime == "application/json"
        assert get(handler, "/logo.svg").mime == "image/svg+xml"
        assert get(handler, "/docs/guide.md").mime == "text/markdown"

    def test_unknown_extension_has_no_mime(self, handler: StaticFileHandler, site: Path):
        (site / "blob.xyz123").write_bytes(b"\x00\x01")

        response = get(handler, "/blob.xyz123")

        assert response.status.code == 200
        assert response.mime is None

    def test_percent_encoded_name(self, handler: StaticFileHandler):
        response = get(handler, "/a%26b%20%3Cx%3E.txt")

        assert response.status.code == 200
        assert response.body == b"escaped"

    def test_query_string_ignored(self, handler: StaticFileHandler):
        assert get(handler, "/notes.txt?download=1").status.code == 200

    def test_missing_file(self, handler: StaticFileHandler):
        response = get(handler, "/nope.txt")

        assert response.status.code == 404
        assert response.body.startswith(b"<!DOCTYPE html>")

    def test_file_used_as_directory(self, handler: StaticFileHandler):
        assert get(handler, "/notes.txt/more").status.code == 404

    @pytest.mark.skipif(os.name != "posix" or os.geteuid() == 0, reason="needs POSIX permissions as non-root")
    def test_unreadable_file(self, handler: StaticFileHandler, site: Path):
        locked = site / "locked.txt"
        locked.write_text("x")
        locked.chmod(0)

        try:
            assert get(handler, "/locked.txt").status.code == 403
        finally:
            locked.chmod(0o644)


class TestTraversal:
    """Tests for the traversal guard as seen by clients."""

    @pytest.mark.parametrize("path", [
        "/../etc/passwd",
        "/../secret.txt",
        "/docs/../../secret.txt",
        "/%2e%2e/secret.txt",
        "/..%2Fsecret.txt",
    ])
    def test_traversal_forbidden(self, handler: StaticFileHandler, path: str):
        response = get(handler, path)

        assert response.status.code == 403
        assert b"Directory traversal is not allowed!" in response.body
        assert b"top secret" not in response.body

    def test_dotdot_inside_base_is_fine(self, handler: StaticFileHandler):
        assert get(handler, "/docs/../notes.txt").status.code == 200


class TestDirectories:
    """Tests for directory listings and the index fallback."""

    def test_listing(self, handler: StaticFileHandler):
        response = get(handler, "/docs")

        assert response.status.code == 200
        assert response.mime == "text/html"
        assert response.body.startswith(b"<!DOCTYPE html>")
        assert b'<a href="/docs/guide.md">guide.md</a>' in response.body
        assert b'<a href="/docs/sub/">sub/</a>' in response.body

    def test_parent_link_comes_first(self, handler: StaticFileHandler):
        body = get(handler, "/docs/").body

        parent = body.index(b"Parent Directory")
        assert parent < body.index(b"guide.md")
        assert b'<a href="/">&uarr; Parent Directory</a>' in body

    def test_listing_disabled(self, config: ServerConfig):
        handler = StaticFileHandler(config.with_overrides(list_dir=False))

        response = get(handler, "/docs")

        assert response.status.code == 403
        assert LISTING_DISABLED_MESSAGE.encode() in response.body

    def test_missing_index_falls_back_to_root_listing(self, config: ServerConfig, bare_site: Path):
        handler = StaticFileHandler(config.with_overrides(base_dir=bare_site))

        response = get(handler, "/")

        assert response.status.code == 200
        assert response.mime == "text/html"
        assert b"Listing for /" in response.body
        assert b"readme.txt" in response.body

    def test_explicit_index_falls_back_too(self, config: ServerConfig, bare_site: Path):
        handler = StaticFileHandler(config.with_overrides(base_dir=bare_site))

        assert get(handler, "/index.html").status.code == 200

    def test_no_fallback_when_listing_disabled(self, config: ServerConfig, bare_site: Path):
        handler = StaticFileHandler(config.with_overrides(base_dir=bare_site, list_dir=False))

        assert get(handler, "/").status.code == 404

    def test_no_fallback_for_other_files(self, config: ServerConfig, bare_site: Path):
        handler = StaticFileHandler(config.with_overrides(base_dir=bare_site))

        assert get(handler, "/other.html").status.code == 404

    def test_custom_index_file(self, config: ServerConfig, site: Path):
        (site / "home.htm").write_text("home")
        handler = StaticFileHandler(config.with_overrides(index_file="home.htm"))

        assert get(handler, "/").body == b"home"

    def test_names_are_escaped(self, handler: StaticFileHandler):
        """Test that file names cannot inject markup into a listing."""
        body = get(handler, "/docs/..").body

        assert b"a&amp;b &lt;x&gt;.txt" in body
        assert b"<x>" not in body
        assert b'href="/a%26b%20%3Cx%3E.txt"' in body


class TestListing:
    """Tests for the listing renderer itself."""

    def test_entries_sorted(self, site: Path):
        body = list_directory(site, site).decode()

        names = ["a&amp;b", "data.json", "docs/", "index.html", "logo.svg", "notes.txt"]
        positions = [body.index(name) for name in names]
        assert positions == sorted(positions)

    def test_root_heading(self, site: Path):
        body = list_directory(site, site)

        assert b"<title>Directory Listing</title>" in body
        assert b"<h1>Listing for /</h1>" in body

    def test_empty_directory(self, site: Path):
        body = list_directory(site / "docs" / "sub", site)

        assert b'<a href="/docs/">&uarr; Parent Directory</a><ul><li></li></ul>' in body

    def test_render_directory_entry(self, site: Path):
        with os.scandir(site) as it:
            entries = {entry.name: entry for entry in it}

        assert render_directory_entry(entries["docs"], "/") == '<a href="/docs/">docs/</a>'
        assert render_directory_entry(entries["notes.txt"], "/x/") == '<a href="/x/notes.txt">notes.txt</a>'


def test_handle_request(config: ServerConfig):
    """Test the module-level convenience wrapper."""
    response = handle_request(HTTPRequest("GET", "/notes.txt"), config)

    assert response.status.code == 200
