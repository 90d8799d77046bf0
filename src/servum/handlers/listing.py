"""
HTML directory listings.
"""

import html
import os
from pathlib import Path
from urllib.parse import quote, unquote

from ..http.html import html_doc


def directory_url(path: Path, base_dir: Path) -> str:
    """URL of a served directory, with a trailing slash ("/" for the root)."""
    relative = path.relative_to(base_dir).as_posix()
    if relative == ".":
        return "/"
    return "/" + quote(relative, errors="surrogateescape") + "/"


def parent_url(url: str) -> str:
    if url == "/":
        return "/"
    return url.rstrip("/").rsplit("/", 1)[0] + "/"


def render_directory_entry(entry: os.DirEntry, url_prefix: str) -> str:
    """
    Format one directory entry as a link.

    Directories get a trailing "/". The name is HTML-escaped and the link
    target percent-encoded, so file names cannot inject markup.
    """
    try:
        is_dir = entry.is_dir()
    except OSError:
        is_dir = False
    suffix = "/" if is_dir else ""

    href = url_prefix + quote(entry.name, errors="surrogateescape") + suffix
    label = entry.name + suffix
    return f'<a href="{html.escape(href)}">{html.escape(label)}</a>'


def list_directory(path: Path, base_dir: Path) -> bytes:
    """
    Render an HTML listing of a directory.

    The parent-directory link comes first, followed by the entries sorted
    by name.

    Raises:
        OSError: If the directory cannot be read.
    """
    url = directory_url(path, base_dir)

    with os.scandir(path) as it:
        entries = sorted(it, key=lambda entry: entry.name)
    links = [render_directory_entry(entry, url) for entry in entries]

    content = (
        f'<a href="{html.escape(parent_url(url))}">&uarr; Parent Directory</a>'
        "<ul><li>" + "</li><li>".join(links) + "</li></ul>"
    )
    heading = "Listing for " + html.escape(unquote(url, errors="surrogateescape"))
    document = html_doc("Directory Listing", heading, content)

    # Undecodable file names (surrogate escapes) are replaced for display.
    return document.encode("utf-8", errors="replace")
