"""Parser package."""

from .base import BLOCK_KINDS, Block, Document, FrontmatterResult, ImageSpec
from .txt_parser import (
    TxtParser,
    format_inline,
    parse,
    parse_body,
    parse_frontmatter,
    parse_image_block,
    parse_index,
    parse_list_block,
)

__all__ = [
    "BLOCK_KINDS",
    "Block",
    "Document",
    "FrontmatterResult",
    "ImageSpec",
    "TxtParser",
    "format_inline",
    "parse",
    "parse_body",
    "parse_frontmatter",
    "parse_image_block",
    "parse_index",
    "parse_list_block",
]
