"""
Minimal HTML document shared by error pages and directory listings.
"""

HTML_MIME_TYPE = "text/html"

_TEMPLATE = (
    '<!DOCTYPE html><html lang="en"><head><meta charset="utf-8">'
    "<title>{title}</title></head>"
    "<body><h1>{lead}</h1><p>{content}</p></body></html>\n"
)


def html_doc(title, lead, content) -> str:
    """
    Generate an HTML document with a title, a heading and one paragraph.

    Arguments are inserted as-is; callers escape untrusted text first.

        >>> html_doc("Not Found", 404, "Page not found!").startswith("<!DOCTYPE html>")
        True
    """
    return _TEMPLATE.format(title=title, lead=lead, content=content)
