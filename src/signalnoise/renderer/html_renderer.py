"""Render parsed blocks into HTML fragments and whole site pages."""

from __future__ import annotations

import itertools
import re
from collections.abc import Callable, Iterable, Iterator, Sequence
from pathlib import Path

from jinja2 import Environment, FileSystemLoader
from markupsafe import Markup

from signalnoise.config import KATEX_VERSION, SECTIONS, SectionInfo
from signalnoise.markup import escape_attr, escape_html
from signalnoise.parser.base import Block, Document, ImageSpec
from signalnoise.parser.txt_parser import format_inline, parse_image_block, parse_list_block


# ---------------------------------------------------------------------------
# Block fragments
# ---------------------------------------------------------------------------

_URL_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")
_PARAGRAPH_SPLIT_RE = re.compile(r"\n\n+")
_HEADING_RE = re.compile(r"^(#{2,3})\s*(.*)", re.DOTALL)


def resolve_src(src: str, asset_root: str = "") -> str:
    """Prefix a site-relative *src* with *asset_root*; absolute paths and URLs are left alone."""
    if not asset_root or not src or src.startswith(("/", "#")) or _URL_SCHEME_RE.match(src):
        return src
    return asset_root + src


def render_text(content: str) -> str:
    """Render paragraphs separated by blank lines; single newlines become spaces."""
    parts: list[str] = []
    for paragraph in _PARAGRAPH_SPLIT_RE.split(content):
        if paragraph:
            text = escape_html(paragraph.replace("\n", " "))
            parts.append(f"<p>{format_inline(text)}</p>")
    html = "".join(parts)
    return f'<div class="block block-text">{html}</div>'


def render_heading(content: str) -> str:
    """Render a heading; a leading ``##`` or ``###`` picks the level (default 2)."""
    level = 2
    text = content
    match = _HEADING_RE.match(content)
    if match:
        level = len(match.group(1))
        text = match.group(2)
    tag = f"h{level}"
    return f'<{tag} class="block block-heading {tag}">{format_inline(escape_html(text))}</{tag}>'


def render_latex(content: str, block_id: str) -> str:
    # Typesetting happens later in signalnoise.renderer.latex.activate_latex.
    return f'<div class="block block-latex" id="{escape_attr(block_id)}">{escape_html(content)}</div>'


def render_image(content: str, asset_root: str = "") -> str:
    """Render an image block; relative srcs are prefixed with *asset_root*."""
    img = parse_image_block(content)
    html = '<div class="block block-image">'
    html += f'<img src="{escape_attr(resolve_src(img.src, asset_root))}" alt="{escape_attr(img.alt)}" loading="lazy">'
    if img.caption:
        html += f'<div class="caption">{escape_html(img.caption)}</div>'
    return html + "</div>"


def render_code(content: str) -> str:
    return f'<div class="block block-code"><pre>{escape_html(content)}</pre></div>'


def render_quote(content: str) -> str:
    formatted = format_inline(escape_html(content).replace("\n", "<br>"))
    return f'<div class="block block-quote">{formatted}</div>'


def render_list(content: str) -> str:
    return f'<div class="block block-list">{parse_list_block(content)}</div>'


def render_divider(content: str = "") -> str:
    return '<hr class="block block-divider">'


_SIMPLE_RENDERERS: dict[str, Callable[[str], str]] = {
    "text": render_text,
    "heading": render_heading,
    "code": render_code,
    "quote": render_quote,
    "list": render_list,
    "divider": render_divider,
}


def _render_block(block: Block, latex_ids: Iterator[int], asset_root: str) -> str:
    if block.kind == "latex":
        return render_latex(block.content, f"latex-{next(latex_ids)}")
    if block.kind == "image":
        return render_image(block.content, asset_root)
    return _SIMPLE_RENDERERS.get(block.kind, render_text)(block.content)


def render_blocks(blocks: Iterable[Block], *, asset_root: str = "") -> str:
    """Render *blocks* in order, one fragment per block, joined by newlines.

    Unknown kinds render as text. LaTeX containers get ``latex-1``,
    ``latex-2``, ... ids, numbered per call, so a page's blocks must be
    rendered in a single call. *asset_root* prefixes relative image srcs for
    pages that do not sit at the site root.
    """
    latex_ids = itertools.count(1)
    return "\n".join(_render_block(block, latex_ids, asset_root) for block in blocks)


# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------

class HTMLRenderer:
    """Render Documents into full HTML pages through the package templates."""

    def __init__(self, template_dir: Path | None = None) -> None:
        if template_dir is None:
            template_dir = Path(__file__).resolve().parent.parent / "template"

        loader = FileSystemLoader(str(template_dir))
        self._env = Environment(loader=loader, autoescape=True, trim_blocks=True, lstrip_blocks=True)
        self._env.globals["katex_version"] = KATEX_VERSION
        self._env.globals["nav_sections"] = list(SECTIONS.values())
        self._env.filters["asset"] = resolve_src
        self.stylesheet = Path(template_dir) / "style.css"

    def render_home(self, sections: Sequence[SectionInfo], *, math_engine: str = "none") -> str:
        return self._render("home.html", sections=sections, root="", math_engine=math_engine)

    def render_section(
        self,
        section: SectionInfo,
        posts: Sequence[tuple[str, Document]],
        *,
        missing_index: bool = False,
        math_engine: str = "none",
    ) -> str:
        """Render a section listing from ``(slug, document)`` pairs."""
        cards = [
            {
                "slug": slug,
                "title": document.title or slug,
                "date": _meta_str(document, "date"),
                "excerpt": _meta_str(document, "excerpt"),
                "tags": document.tags,
            }
            for slug, document in posts
        ]
        return self._render(
            "section.html",
            section=section,
            posts=cards,
            missing_index=missing_index,
            root="../",
            math_engine=math_engine,
        )

    def render_post(
        self,
        section: SectionInfo,
        slug: str,
        document: Document | None,
        *,
        root: str = "../",
        math_engine: str = "none",
    ) -> str:
        """Render a single post page; ``document=None`` renders the not-found state."""
        body = Markup(render_blocks(document.blocks, asset_root=root)) if document is not None else None
        return self._render(
            "post.html",
            section=section,
            slug=slug,
            title=(document.title if document is not None else "") or slug,
            date=_meta_str(document, "date") if document is not None else "",
            tags=document.tags if document is not None else [],
            body=body,
            root=root,
            math_engine=math_engine,
        )

    def render_gallery(
        self,
        section: SectionInfo,
        images: Sequence[ImageSpec],
        *,
        description: str = "",
        missing_index: bool = False,
        math_engine: str = "none",
    ) -> str:
        return self._render(
            "gallery.html",
            section=section,
            images=images,
            description=description or section.description,
            missing_index=missing_index,
            root="../",
            math_engine=math_engine,
        )

    def _render(self, template_name: str, **context) -> str:
        template = self._env.get_template(template_name)
        return template.render(**context)


def _meta_str(document: Document, key: str) -> str:
    value = document.metadata.get(key, "")
    return value if isinstance(value, str) else ", ".join(value)
