"""
Console output shown when the server starts.

Diagnostics go through logging; these functions only print the banner,
usage hints and the column header of the verbose access log.
"""

from typing import Optional, TextIO
import sys

from .access_log import PATH_COLUMN_WIDTH
from .config import ServerConfig


LOGO = r"""______________________   _____  ________ ___
__  ___/  _ \_  ___/_ | / /  / / /_  __ `__ \
_(__  )/  __/  /   __ |/ // /_/ /_  / / / / /
/____/ \___//_/    _____/ \__,_/ /_/ /_/ /_/
"""


def print_logo(file: Optional[TextIO] = None):
    print(LOGO, file=file or sys.stdout)


def print_info(file: Optional[TextIO] = None):
    """Print how to quit and how to get help."""
    out = file or sys.stdout
    print("To exit, just press Ctrl/Cmd+C at any time", file=out)
    print("To get help, pass --help", file=out)
    print(file=out)


def print_config(config: ServerConfig, address: Optional[tuple] = None, file: Optional[TextIO] = None):
    """
    Print the served directory and the URL to open.

    Args:
        address: The bound (host, port) when it differs from the config,
                 e.g. after binding port 0.
    """
    out = file or sys.stdout
    host, port = address or (config.host, config.port)
    if ":" in host:
        host = f"[{host}]"
    print(f"Serving {config.base_dir}", file=out)
    print(f"Server listening at http://{host}:{port}", file=out)
    print(file=out)


def print_verbose_header(file: Optional[TextIO] = None):
    """Print the column titles matching RequestLog.to_text()."""
    out = file or sys.stdout
    header = (
        f"[{'Method':<6} {'/path/to/file/...':<{PATH_COLUMN_WIDTH + 1}}] -> "
        f"{'Code':<6} {'Message':<24} Time in μs"
    )
    print(header, file=out)
    print("-" * len(header), file=out)
