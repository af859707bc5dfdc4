"""Parser for the plain-text content format.

A content file is an optional frontmatter header followed by a flat sequence
of typed blocks::

    ---
    title: Ohm's Law
    date: 2024-01-15
    tags: circuits, resistors
    ---
    [text]
    Paragraph with **bold** and *italic*.

    [heading] ## Section Title

    [image]
    src: images/circuit.jpg
    caption: My circuit

    [divider]

Every function here is pure: any ``str`` input produces a best-effort result
and nothing raises for malformed content.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from signalnoise.markup import escape_html

from .base import Block, Document, FrontmatterResult, ImageSpec, Metadata

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Frontmatter
# ---------------------------------------------------------------------------

_FRONTMATTER_RE = re.compile(r"^---\s*\n(.*?)\n---", re.DOTALL)


def parse_frontmatter(raw: str) -> FrontmatterResult:
    """Split the leading ``---`` section off *raw* and parse its ``key: value`` lines."""
    match = _FRONTMATTER_RE.match(raw)
    if not match:
        return FrontmatterResult({}, raw.strip())

    metadata: Metadata = {}
    for line in match.group(1).split("\n"):
        key, sep, value = line.partition(":")
        if not sep:
            continue
        key = key.strip().lower()
        value = value.strip()
        if key == "tags":
            metadata[key] = [tag.strip() for tag in value.split(",") if tag.strip()]
        else:
            metadata[key] = value

    return FrontmatterResult(metadata, raw[match.end():].strip())


# ---------------------------------------------------------------------------
# Body blocks
# ---------------------------------------------------------------------------

# Markers must start the line; "[word]" anywhere else is ordinary text.
_MARKER_RE = re.compile(r"^\[(\w+)\][ \t]*(.*)$", re.ASCII)


def parse_body(body_raw: str) -> list[Block]:
    """Split *body_raw* into blocks, one per ``[kind]`` marker line."""
    blocks: list[Block] = []
    if not body_raw:
        return blocks

    kind: str | None = None
    inline = ""
    lines: list[str] = []

    def flush() -> None:
        body = "\n".join(lines).strip()
        if kind is None:
            if body:
                blocks.append(Block(kind="text", content=body))
            return
        if inline and body:
            content = f"{inline}\n{body}"
        else:
            content = inline or body
        blocks.append(Block(kind=kind, content=content))

    for line in body_raw.split("\n"):
        match = _MARKER_RE.match(line)
        if match is None:
            lines.append(line)
            continue
        flush()
        kind = match.group(1)
        inline = match.group(2).strip()
        lines = []

    flush()
    return blocks


# ---------------------------------------------------------------------------
# Image blocks
# ---------------------------------------------------------------------------

_IMAGE_KEYS = ("src", "caption", "alt")


def parse_image_block(content: str) -> ImageSpec:
    """Read ``src``/``caption``/``alt`` lines; alt falls back to caption, then ``"image"``."""
    fields = dict.fromkeys(_IMAGE_KEYS, "")
    for line in content.split("\n"):
        key, sep, value = line.partition(":")
        if not sep:
            continue
        key = key.strip().lower()
        if key in fields:
            fields[key] = value.strip()

    if not fields["alt"]:
        fields["alt"] = fields["caption"] or "image"
    return ImageSpec(**fields)


# ---------------------------------------------------------------------------
# Inline formatting
# ---------------------------------------------------------------------------

# Order matters: ``**`` must be consumed before the single ``*`` rule runs,
# otherwise "**x**" would turn into "<em></em>x<em></em>".
_BOLD_RE = re.compile(r"\*\*(.+?)\*\*")
_ITALIC_RE = re.compile(r"\*(.+?)\*")
_CODE_RE = re.compile(r"`(.+?)`")
_LINK_RE = re.compile(r"\[(.+?)\]\((.+?)\)")


def _link(match: re.Match[str]) -> str:
    href = match.group(2).replace('"', "&quot;")
    return f'<a href="{href}" target="_blank" rel="noopener noreferrer">{match.group(1)}</a>'


def format_inline(text: str) -> str:
    """Apply bold, italic, code and link substitutions, in that order.

    The passes are independent and non-recursive. Callers pass text that has
    already been HTML-escaped; only the markup introduced here is trusted.
    """
    text = _BOLD_RE.sub(r"<strong>\1</strong>", text)
    text = _ITALIC_RE.sub(r"<em>\1</em>", text)
    text = _CODE_RE.sub(r"<code>\1</code>", text)
    return _LINK_RE.sub(_link, text)


# ---------------------------------------------------------------------------
# List blocks
# ---------------------------------------------------------------------------

_ORDERED_RE = re.compile(r"^\d+[.)]")
_BULLET_RE = re.compile(r"^[-*]\s*")
_NUMBER_RE = re.compile(r"^\d+[.)]\s*")


def parse_list_block(content: str) -> str:
    """Render a list block as ``<ol>`` or ``<ul>`` markup.

    The list is ordered when its first non-blank line starts with ``1.`` or
    ``1)`` style numbering.
    """
    lines = [line for line in content.split("\n") if line.strip()]
    tag = "ol" if lines and _ORDERED_RE.match(lines[0]) else "ul"
    items = []
    for line in lines:
        text = _NUMBER_RE.sub("", _BULLET_RE.sub("", line, count=1), count=1)
        items.append(f"<li>{format_inline(escape_html(text))}</li>")
    return f"<{tag}>{''.join(items)}</{tag}>"


# ---------------------------------------------------------------------------
# Index documents
# ---------------------------------------------------------------------------

def parse_index(raw: str) -> list[str]:
    """Return the identifiers listed in an index document, skipping blanks and ``#`` comments."""
    slugs = []
    for line in raw.split("\n"):
        line = line.strip()
        if line and not line.startswith("#"):
            slugs.append(line)
    return slugs


# ---------------------------------------------------------------------------
# Whole documents
# ---------------------------------------------------------------------------

def parse(raw: str) -> Document:
    metadata, body_raw = parse_frontmatter(raw)
    return Document(metadata=metadata, blocks=parse_body(body_raw))


class TxtParser:
    """Parse ``.txt`` content files into Documents."""

    def parse(self, input_path: Path) -> Document:
        input_path = Path(input_path)
        raw = input_path.read_text(encoding="utf-8", errors="ignore")
        document = parse(raw)
        log.debug("Parsed %s: %d blocks", input_path, len(document.blocks))
        return document

    def parse_text(self, raw: str) -> Document:
        return parse(raw)
