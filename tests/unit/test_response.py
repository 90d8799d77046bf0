"""
Unit tests for response building, status codes and the HTML template.
"""

import errno

import pytest

from servum.http.html import html_doc
from servum.http.response import HTTPResponse
from servum.http.status_codes import HTTPStatus, StatusCode


class TestHTTPResponse:
    """Tests for HTTPResponse serialization."""

    def test_header_order(self):
        """Test the exact header bytes for a response with a MIME type."""
        response = HTTPResponse.ok(b"hello", "text/plain")

        assert response.header() == (
            b"HTTP/1.1 200 OK\r\n"
            b"Content-Length: 5\r\n"
            b"Content-Type: text/plain\r\n"
            b"Connection: close\r\n"
            b"\r\n"
        )

    def test_no_content_type_without_mime(self):
        response = HTTPResponse.ok(b"\x00\x01", None)

        assert b"Content-Type" not in response.header()
        assert response.header().startswith(b"HTTP/1.1 200 OK\r\nContent-Length: 2\r\n")

    def test_to_bytes_appends_body(self):
        response = HTTPResponse.ok(b"body", "text/plain")

        assert response.to_bytes() == response.header() + b"body"

    def test_head_only_sends_header(self):
        """Test that HEAD gets the header with the full Content-Length."""
        response = HTTPResponse.ok(b"x" * 100, "text/plain")

        data = response.to_bytes(head_only=True)

        assert data == response.header()
        assert b"Content-Length: 100\r\n" in data

    def test_content_length_counts_bytes(self):
        """Multi-byte characters count in bytes, not characters."""
        body = "héllo".encode("utf-8")
        response = HTTPResponse.ok(body, "text/plain")

        assert f"Content-Length: {len(body)}".encode() in response.header()

    def test_from_status_renders_error_page(self):
        response = HTTPResponse.from_status(HTTPStatus.from_code(404))

        assert response.status_line == "HTTP/1.1 404 Not Found"
        assert response.mime == "text/html"
        assert response.body.startswith(b"<!DOCTYPE html>")
        assert b"<h1>404</h1>" in response.body

    def test_str(self):
        assert str(HTTPResponse.ok(b"hi", "text/plain")).startswith("HTTP/1.1 200 OK\r\n")


class TestHTTPStatus:
    """Tests for status codes and error classification."""

    @pytest.mark.parametrize("code, phrase", [
        (200, "OK"),
        (403, "Forbidden"),
        (404, "Not Found"),
        (500, "Internal Server Error"),
        (501, "Not Implemented"),
    ])
    def test_status_table(self, code: int, phrase: str):
        status = HTTPStatus.from_code(code)

        assert status.status_line == f"HTTP/1.1 {code} {phrase}"

    def test_unknown_code_folds_to_500(self):
        assert HTTPStatus.from_code(418).code == StatusCode.INTERNAL_SERVER_ERROR

    @pytest.mark.parametrize("error, code", [
        (FileNotFoundError(errno.ENOENT, "No such file or directory"), 404),
        (NotADirectoryError(errno.ENOTDIR, "Not a directory"), 404),
        (PermissionError(errno.EACCES, "Permission denied"), 403),
        (IsADirectoryError(errno.EISDIR, "Is a directory"), 500),
        (OSError(errno.EIO, "Input/output error"), 500),
    ])
    def test_from_error(self, error: OSError, code: int):
        """Test mapping I/O failures to status codes."""
        assert HTTPStatus.from_error(error).code == code

    def test_comment_from_plain_message(self):
        status = HTTPStatus.from_error(PermissionError("Directory traversal is not allowed!"))

        assert status.comment == "Directory traversal is not allowed!"

    def test_comment_never_contains_filename(self):
        error = FileNotFoundError(errno.ENOENT, "No such file or directory", "/srv/secret")

        assert "/srv/secret" not in HTTPStatus.from_error(error).to_html()

    def test_error_page_exact(self):
        page = HTTPStatus.from_code(403, "Nope").to_html()

        assert page == (
            '<!DOCTYPE html><html lang="en"><head><meta charset="utf-8">'
            "<title>403</title></head><body><h1>403</h1>"
            "<p>Forbidden</p><p>Nope</p></body></html>\n"
        )

    def test_error_page_without_comment(self):
        assert "<p>Not Found</p></body>" in HTTPStatus.from_code(404).to_html()

    def test_comment_is_escaped(self):
        """Test that markup in a comment cannot reach the page."""
        page = HTTPStatus.from_code(500, "<script>alert(1)</script>").to_html()

        assert "<script>" not in page
        assert "&lt;script&gt;" in page

    def test_is_error(self):
        assert not StatusCode.OK.is_error
        assert StatusCode.NOT_IMPLEMENTED.is_error


class TestHtmlDoc:
    """Tests for the shared HTML template."""

    def test_fields_are_inserted(self):
        doc = html_doc("Title", "Lead", "Content")

        assert "<title>Title</title>" in doc
        assert "<h1>Lead</h1>" in doc
        assert "<p>Content</p>" in doc
        assert doc.endswith("</html>\n")
