"""
=============================================================================
PATH RESOLUTION & TRAVERSAL GUARD
=============================================================================

Maps a raw request path onto a file below the served directory.

    "/docs/My%20File.txt"
          │
          │ 1. request_filename()   "/" → index file, strip query and
          │                         leading slashes
          ▼
    "docs/My%20File.txt"
          │
          │ 2. decode_percents()    %XY → byte
          ▼
    "docs/My File.txt"
          │
          │ 3. join onto base_dir, normalize_path()  (lexical . and ..)
          ▼
    "/srv/www/docs/My File.txt"
          │
          │ 4. is_within(base_dir)  else TraversalError
          ▼
    ResolvedPath

=============================================================================
SECURITY
=============================================================================

Two independent defenses:

    normalize_path() folds ".." lexically and can never climb above the
    filesystem root, and is_within() then re-checks that the result still
    has base_dir as an ancestor (or is base_dir itself).

Decoding happens BEFORE normalization, so "..%2F..%2Fetc" is folded like
"../../etc". An encoded absolute path ("%2Fetc%2Fpasswd") replaces the
base directory on join and is rejected by the ancestor check.

Everything here is pure string/path manipulation: no filesystem calls,
no symlink resolution.

=============================================================================
"""

import errno
from pathlib import Path, PurePath
from typing import Union


TRAVERSAL_MESSAGE = "Directory traversal is not allowed!"

_HEX_DIGITS = b"0123456789abcdefABCDEF"


class TraversalError(PermissionError):
    """The resolved path would leave the served directory."""

    def __init__(self, message: str = TRAVERSAL_MESSAGE):
        super().__init__(message)


def decode_percents(path: str) -> str:
    """
    Decode %XY escapes in a request path.

    A "%" not followed by two hex digits is kept literally, and decoding
    resumes right after it. Input without "%" is returned unchanged.

    Raises:
        UnicodeDecodeError: If the decoded bytes are not valid UTF-8.

    Examples:
        >>> decode_percents("a%20b%2Fc")
        'a b/c'
        >>> decode_percents("100%.txt")
        '100%.txt'
    """
    if "%" not in path:
        return path

    raw = path.encode("utf-8")
    decoded = bytearray()

    i = 0
    while i < len(raw):
        pair = raw[i + 1:i + 3]
        if raw[i] == ord("%") and len(pair) == 2 and all(c in _HEX_DIGITS for c in pair):
            decoded.append(int(pair, 16))
            i += 3
        else:
            decoded.append(raw[i])
            i += 1

    return decoded.decode("utf-8")


def normalize_path(path: Union[str, PurePath]) -> PurePath:
    """
    Lexically normalize a path.

    "." components are dropped; ".." removes the previous component if
    there is one and is discarded otherwise, so the result never climbs
    above its anchor. Idempotent.

    Examples:
        >>> normalize_path("/a/b/c/./../../g")
        PurePosixPath('/a/g')
        >>> normalize_path("mid/content=5/../6")
        PurePosixPath('mid/6')
        >>> normalize_path("/../../etc")
        PurePosixPath('/etc')
    """
    path = PurePath(path)
    anchor = path.anchor
    components = path.parts[1:] if anchor else path.parts

    kept = []
    for component in components:
        if component == ".":
            continue
        if component == "..":
            if kept:
                kept.pop()
            continue
        kept.append(component)

    return PurePath(anchor, *kept)


def is_within(path: PurePath, root: PurePath) -> bool:
    """True if root is path itself or one of its ancestors."""
    try:
        PurePath(path).relative_to(root)
    except ValueError:
        return False
    return True


def request_filename(raw_path: str, index_file: str) -> str:
    """
    The file name a request refers to, relative to the served directory.

    The query string is dropped; "/" names the default document.

        >>> request_filename("/", "index.html")
        'index.html'
        >>> request_filename("/css/site.css?v=3", "index.html")
        'css/site.css'
    """
    path = raw_path.split("?", 1)[0]
    if path == "/":
        return index_file
    return path.lstrip("/")


def resolve_path(filename: str, base_dir: Path) -> Path:
    """
    Resolve a request file name to a path inside base_dir.

    Args:
        filename: Output of request_filename(), still percent-encoded.
        base_dir: Absolute, canonical served directory.

    Returns:
        An absolute path equal to or below base_dir.

    Raises:
        TraversalError: If the path escapes base_dir.
        FileNotFoundError: If the name cannot exist on disk (undecodable
            escapes or an embedded NUL byte).
    """
    try:
        decoded = decode_percents(filename)
    except UnicodeDecodeError:
        raise FileNotFoundError(errno.ENOENT, "No such file or directory")

    if "\x00" in decoded:
        raise FileNotFoundError(errno.ENOENT, "No such file or directory")

    resolved = Path(normalize_path(base_dir / decoded))

    if not is_within(resolved, base_dir):
        raise TraversalError()

    return resolved
