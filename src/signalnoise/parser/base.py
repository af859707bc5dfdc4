"""Intermediate representation for parsed content documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import NamedTuple, Protocol

BLOCK_KINDS = ("text", "heading", "latex", "image", "code", "quote", "list", "divider")

Metadata = dict[str, str | list[str]]


@dataclass(frozen=True, slots=True)
class Block:
    kind: str
    content: str = ""


@dataclass(frozen=True, slots=True)
class ImageSpec:
    src: str = ""
    caption: str = ""
    alt: str = ""


@dataclass(frozen=True, slots=True)
class Document:
    metadata: Metadata = field(default_factory=dict)
    blocks: list[Block] = field(default_factory=list)

    @property
    def title(self) -> str:
        value = self.metadata.get("title", "")
        return value if isinstance(value, str) else ""

    @property
    def tags(self) -> list[str]:
        value = self.metadata.get("tags", [])
        return list(value) if isinstance(value, list) else []

    def images(self) -> list[ImageSpec]:
        """Return the image specs of every ``image`` block, in source order."""
        from .txt_parser import parse_image_block

        return [parse_image_block(block.content) for block in self.blocks if block.kind == "image"]


class FrontmatterResult(NamedTuple):
    metadata: Metadata
    body_raw: str


class Parser(Protocol):
    def parse(self, input_path: Path) -> Document:  # pragma: no cover - structural protocol
        """Parse an input file into a Document."""
