"""HTML escaping helpers shared by the parser and renderer."""

from __future__ import annotations


def escape_html(text: str) -> str:
    """Escape text destined for an HTML text node (``&``, ``<``, ``>``)."""
    return str(text).replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def escape_attr(text: str) -> str:
    """Escape text destined for a double-quoted attribute value."""
    return (
        str(text)
        .replace("&", "&amp;")
        .replace('"', "&quot;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
    )
