"""Typeset LaTeX in rendered markup once it is live.

Rendering leaves ``[latex]`` blocks as escaped source inside
``<div class="block block-latex">`` containers. :func:`activate_latex` runs
after that markup has been placed in its final container and hands it to the
math engine. The engine is injected, so the module works (and is tested)
without one installed:

* ``render_math_in_element(container, delimiters=..., throw_on_error=False)``
  typesets delimited math anywhere in the container, in place.
* ``render_expression(expression, display_mode=True)`` returns the markup for
  a single expression and may raise.

:func:`auto_render` builds the former from the latter.
"""

from __future__ import annotations

import html
import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from signalnoise.markup import escape_html

log = logging.getLogger(__name__)


@dataclass(slots=True)
class Container:
    """Live markup that typesetting mutates in place."""

    html: str


@dataclass(frozen=True, slots=True)
class Delimiter:
    left: str
    right: str
    display: bool


# "$$" precedes "$" so a display opener is never read as two inline ones.
DEFAULT_DELIMITERS: tuple[Delimiter, ...] = (
    Delimiter("$$", "$$", display=True),
    Delimiter("$", "$", display=False),
    Delimiter("\\[", "\\]", display=True),
    Delimiter("\\(", "\\)", display=False),
)


class RenderExpression(Protocol):
    def __call__(self, expression: str, *, display_mode: bool) -> str:  # pragma: no cover - structural protocol
        """Return typeset markup for one expression."""


class RenderMathInElement(Protocol):
    def __call__(
        self,
        container: Container,
        *,
        delimiters: Sequence[Delimiter],
        throw_on_error: bool,
    ) -> None:  # pragma: no cover - structural protocol
        """Typeset every delimited expression in *container*."""


_LATEX_BLOCK_RE = re.compile(r'(<div class="block block-latex"[^>]*>)(.*?)(</div>)', re.DOTALL)


def activate_latex(
    container: Container,
    *,
    render_math_in_element: RenderMathInElement | None = None,
    render_expression: RenderExpression | None = None,
) -> Container:
    """Typeset math in *container* with whichever engines are available.

    Delimited math is handled first. Any ``block-latex`` container still
    holding literal source afterwards is typeset as one display expression;
    if that fails the escaped source stays in place.
    """
    if render_math_in_element is not None:
        render_math_in_element(container, delimiters=DEFAULT_DELIMITERS, throw_on_error=False)

    if render_expression is None:
        return container

    def typeset_block(match: re.Match[str]) -> str:
        open_tag, body, close_tag = match.groups()
        # Escaped source never contains "<"; a tag means it was already typeset.
        if "<" in body:
            return match.group(0)
        source = html.unescape(body).strip()
        try:
            rendered = render_expression(source, display_mode=True)
        except Exception as exc:
            log.debug("Leaving LaTeX block as source after typesetting error: %s", exc)
            return match.group(0)
        return f"{open_tag}{rendered}{close_tag}"

    container.html = _LATEX_BLOCK_RE.sub(typeset_block, container.html)
    return container


# ---------------------------------------------------------------------------
# Delimiter scanning
# ---------------------------------------------------------------------------

_TAG_RE = re.compile(r"(<[^>]*>)")
_TAG_NAME_RE = re.compile(r"<\s*(/?)\s*([a-zA-Z0-9]+)")
_SKIP_TAGS = ("pre", "code", "script", "style", "textarea")


def auto_render(render_expression: RenderExpression) -> RenderMathInElement:
    """Build a container-wide renderer from a single-expression renderer.

    Text inside ``pre``, ``code``, ``script``, ``style`` and ``textarea``
    elements is left alone.
    """

    def render_math_in_element(
        container: Container,
        *,
        delimiters: Sequence[Delimiter] = DEFAULT_DELIMITERS,
        throw_on_error: bool = False,
    ) -> None:
        parts = _TAG_RE.split(container.html)
        skip_depth = 0
        for idx, part in enumerate(parts):
            if idx % 2 == 1:
                skip_depth += _skip_delta(part)
                continue
            if skip_depth > 0 or not part:
                continue
            parts[idx] = _render_text_segment(part, delimiters, render_expression, throw_on_error)
        container.html = "".join(parts)

    return render_math_in_element


def _skip_delta(tag: str) -> int:
    match = _TAG_NAME_RE.match(tag)
    if not match or match.group(2).lower() not in _SKIP_TAGS or tag.endswith("/>"):
        return 0
    return -1 if match.group(1) else 1


def _render_text_segment(
    segment: str,
    delimiters: Sequence[Delimiter],
    render_expression: RenderExpression,
    throw_on_error: bool,
) -> str:
    text = html.unescape(segment)
    pieces = _split_at_delimiters(text, delimiters)
    if len(pieces) == 1 and pieces[0][1] is None:
        return segment

    out: list[str] = []
    for chunk, delimiter in pieces:
        if delimiter is None:
            out.append(escape_html(chunk))
            continue
        try:
            out.append(render_expression(chunk, display_mode=delimiter.display))
        except Exception as exc:
            if throw_on_error:
                raise
            log.debug("Leaving %s%s%s as text: %s", delimiter.left, chunk, delimiter.right, exc)
            out.append(escape_html(f"{delimiter.left}{chunk}{delimiter.right}"))
    return "".join(out)


def _split_at_delimiters(
    text: str, delimiters: Sequence[Delimiter]
) -> list[tuple[str, Delimiter | None]]:
    """Split *text* into ``(chunk, delimiter)`` pairs; plain text has ``None``."""
    pieces: list[tuple[str, Delimiter | None]] = []
    pos = 0
    while pos < len(text):
        best: tuple[int, Delimiter] | None = None
        for delimiter in delimiters:
            start = text.find(delimiter.left, pos)
            if start != -1 and (best is None or start < best[0]):
                best = (start, delimiter)
        if best is None:
            break

        start, delimiter = best
        end = text.find(delimiter.right, start + len(delimiter.left))
        if end == -1:
            break

        if start > pos:
            pieces.append((text[pos:start], None))
        pieces.append((text[start + len(delimiter.left):end], delimiter))
        pos = end + len(delimiter.right)

    if pos < len(text) or not pieces:
        pieces.append((text[pos:], None))
    return pieces
