"""Tests for the plain-text content parser.

Covers:
- Frontmatter (presence, absence, tags, malformed lines)
- Body block splitting ([kind] markers, inline content, leading text)
- Image blocks and the alt fallback
- Inline formatting order (bold before italic)
- List blocks (ordered / unordered)
- Index documents
- Whole-document parsing and file parsing
"""

from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest

from signalnoise.parser import (
    Block,
    Document,
    ImageSpec,
    TxtParser,
    format_inline,
    parse,
    parse_body,
    parse_frontmatter,
    parse_image_block,
    parse_index,
    parse_list_block,
)


# ---------------------------------------------------------------------------
# Frontmatter
# ---------------------------------------------------------------------------

def test_frontmatter_title_and_tags() -> None:
    metadata, body = parse_frontmatter("---\ntitle: A\ntags: a, b\n---\nBODY")
    assert metadata == {"title": "A", "tags": ["a", "b"]}
    assert body == "BODY"


def test_frontmatter_absent_returns_trimmed_input() -> None:
    raw = "\n  [text]\nHello\n\n"
    metadata, body = parse_frontmatter(raw)
    assert metadata == {}
    assert body == raw.strip()


def test_frontmatter_keys_lowercased_and_values_split_on_first_colon() -> None:
    raw = "---\nTitle:  Ohm's Law \ncover: https://example.com/a.jpg\n---\n"
    metadata, body = parse_frontmatter(raw)
    assert metadata["title"] == "Ohm's Law"
    assert metadata["cover"] == "https://example.com/a.jpg"
    assert body == ""


def test_frontmatter_skips_lines_without_colon() -> None:
    metadata, _ = parse_frontmatter("---\njust words\ndate: 2024-01-15\n---\nbody")
    assert metadata == {"date": "2024-01-15"}


def test_frontmatter_tags_drop_empty_entries() -> None:
    metadata, _ = parse_frontmatter("---\ntags: circuits, , resistors,\n---\n")
    assert metadata["tags"] == ["circuits", "resistors"]


def test_frontmatter_must_start_the_input() -> None:
    raw = "intro\n---\ntitle: A\n---\nbody"
    metadata, body = parse_frontmatter(raw)
    assert metadata == {}
    assert body == raw


# ---------------------------------------------------------------------------
# Body blocks
# ---------------------------------------------------------------------------

def test_body_inline_and_following_text() -> None:
    blocks = parse_body("[heading] Intro\n[text]\nHello")
    assert blocks == [Block(kind="heading", content="Intro"), Block(kind="text", content="Hello")]


def test_body_leading_text_becomes_text_block() -> None:
    blocks = parse_body("Opening paragraph.\n\n[code]\nx = 1")
    assert blocks == [Block("text", "Opening paragraph."), Block("code", "x = 1")]


def test_body_blank_leading_text_is_dropped() -> None:
    blocks = parse_body("\n   \n[divider]")
    assert blocks == [Block("divider", "")]


def test_body_inline_joined_with_following_lines() -> None:
    blocks = parse_body("[quote] First line\nSecond line\n\n[divider]\n")
    assert blocks[0] == Block("quote", "First line\nSecond line")
    assert blocks[1] == Block("divider", "")


def test_body_preserves_blank_lines_inside_block() -> None:
    blocks = parse_body("[text]\n\nPara one\n\nPara two\n\n[list]\n- a\n- b")
    assert blocks[0].content == "Para one\n\nPara two"
    assert blocks[1] == Block("list", "- a\n- b")


def test_body_marker_must_start_the_line() -> None:
    blocks = parse_body("See [text] here\n [code] indented")
    assert blocks == [Block("text", "See [text] here\n [code] indented")]


def test_body_kind_is_case_sensitive_and_unknown_kinds_kept() -> None:
    blocks = parse_body("[Text]\nhi\n[callout] note")
    assert [b.kind for b in blocks] == ["Text", "callout"]
    assert blocks[1].content == "note"


def test_body_marker_word_is_ascii_only() -> None:
    blocks = parse_body("[text]\nintro\n[größe]\n42 mm")
    assert blocks == [Block("text", "intro\n[größe]\n42 mm")]


def test_body_empty() -> None:
    assert parse_body("") == []


def test_body_full_format() -> None:
    body = """\
[text]
Paragraph one.

Paragraph two with **bold**.

[heading] ## Section Title

[latex]
V = IR

[image]
src: path/to/file.jpg
caption: A caption

[code]
raw code

[quote]
Quoted text across
multiple lines.

[list]
- item one
- item two

[divider]
"""
    blocks = parse_body(body)
    assert [b.kind for b in blocks] == [
        "text", "heading", "latex", "image", "code", "quote", "list", "divider",
    ]
    assert blocks[1].content == "## Section Title"
    assert blocks[2].content == "V = IR"
    assert blocks[5].content == "Quoted text across\nmultiple lines."


# ---------------------------------------------------------------------------
# Image blocks
# ---------------------------------------------------------------------------

def test_image_alt_fallback_without_caption() -> None:
    assert parse_image_block("src: x.jpg") == ImageSpec(src="x.jpg", caption="", alt="image")


def test_image_alt_falls_back_to_caption() -> None:
    img = parse_image_block("src: x.jpg\ncaption: My circuit")
    assert img.alt == "My circuit"


def test_image_explicit_alt_and_unknown_keys() -> None:
    img = parse_image_block("SRC: https://cdn/x.jpg\nwidth: 300\nalt: Board\ncaption: Rev B")
    assert img == ImageSpec(src="https://cdn/x.jpg", caption="Rev B", alt="Board")


def test_image_empty_content() -> None:
    assert parse_image_block("") == ImageSpec(src="", caption="", alt="image")


# ---------------------------------------------------------------------------
# Inline formatting
# ---------------------------------------------------------------------------

def test_inline_all_spans() -> None:
    html = format_inline("**a** *b* `c` [d](e)")
    assert html == (
        '<strong>a</strong> <em>b</em> <code>c</code> '
        '<a href="e" target="_blank" rel="noopener noreferrer">d</a>'
    )


def test_inline_bold_is_not_corrupted_by_italic() -> None:
    assert format_inline("**x**") == "<strong>x</strong>"


def test_inline_shortest_match() -> None:
    assert format_inline("*a* and *b*") == "<em>a</em> and <em>b</em>"


def test_inline_plain_text_untouched() -> None:
    assert format_inline("2 * 3 = 6") == "2 * 3 = 6"


def test_inline_link_href_quotes_are_escaped() -> None:
    html = format_inline('[x](a" onclick="b)')
    assert 'href="a&quot; onclick=&quot;b"' in html


# ---------------------------------------------------------------------------
# List blocks
# ---------------------------------------------------------------------------

def test_list_ordered() -> None:
    assert parse_list_block("1. a\n2. b") == "<ol><li>a</li><li>b</li></ol>"


def test_list_ordered_paren_marker() -> None:
    assert parse_list_block("1) a\n2) b") == "<ol><li>a</li><li>b</li></ol>"


def test_list_unordered() -> None:
    assert parse_list_block("- a\n- b") == "<ul><li>a</li><li>b</li></ul>"


def test_list_skips_blank_lines_and_formats_items() -> None:
    html = parse_list_block("* **bold** item\n\n- `code`\n")
    assert html == "<ul><li><strong>bold</strong> item</li><li><code>code</code></li></ul>"


def test_list_items_are_escaped() -> None:
    html = parse_list_block("- <script>alert(1)</script>")
    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_list_empty() -> None:
    assert parse_list_block("") == "<ul></ul>"


# ---------------------------------------------------------------------------
# Index documents
# ---------------------------------------------------------------------------

def test_index_skips_comments_and_blanks() -> None:
    assert parse_index("a\n# comment\n\nb") == ["a", "b"]


def test_index_trims_lines() -> None:
    assert parse_index("  ohms-law  \n\t# hidden\nkirchhoff\n") == ["ohms-law", "kirchhoff"]


# ---------------------------------------------------------------------------
# Whole documents
# ---------------------------------------------------------------------------

def test_parse_composes_frontmatter_and_body() -> None:
    raw = "---\ntitle: Ohm's Law\ntags: circuits\n---\n\n[text]\nV = IR\n"
    document = parse(raw)
    assert document.metadata == {"title": "Ohm's Law", "tags": ["circuits"]}
    assert document.blocks == [Block("text", "V = IR")]
    assert document.title == "Ohm's Law"
    assert document.tags == ["circuits"]


def test_parse_is_idempotent() -> None:
    raw = "---\ntitle: A\n---\n[heading] H\n[text]\nbody\n[image]\nsrc: x.jpg"
    assert parse(raw) == parse(raw)


def test_document_is_immutable() -> None:
    document = parse("[text]\nhi")
    with pytest.raises(dataclasses.FrozenInstanceError):
        document.blocks = []  # type: ignore[misc]


def test_parse_empty_string() -> None:
    assert parse("") == Document(metadata={}, blocks=[])


def test_document_images_in_order() -> None:
    document = parse("[image]\nsrc: a.jpg\n[text]\nhi\n[image]\nsrc: b.jpg\ncaption: B")
    assert document.images() == [
        ImageSpec(src="a.jpg", caption="", alt="image"),
        ImageSpec(src="b.jpg", caption="B", alt="B"),
    ]


def test_txt_parser_reads_file(tmp_path: Path) -> None:
    p = tmp_path / "post.txt"
    p.write_text("---\ntitle: From disk\n---\n[divider]\n", encoding="utf-8")

    document = TxtParser().parse(p)
    assert document.title == "From disk"
    assert document.blocks == [Block("divider", "")]
