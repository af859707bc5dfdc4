"""Build a static site from a directory of content files.

Layout of the content root::

    content/
      lab-notes/index.txt        one slug per line
      lab-notes/ohms-law.txt     a post
      gallery/index.txt          [image] blocks

Output mirrors the sections: ``index.html``, ``<section>/index.html`` and
``<section>/<slug>.html``.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterable
from pathlib import Path

from signalnoise.config import GALLERY_SECTION, SECTIONS, SectionInfo
from signalnoise.parser.base import Document
from signalnoise.parser.txt_parser import parse, parse_index
from signalnoise.renderer.html_renderer import HTMLRenderer

log = logging.getLogger(__name__)

INDEX_FILE = "index.txt"
CONTENT_SUFFIX = ".txt"


class ContentNotFoundError(Exception):
    """Raised when a content file does not exist."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Content not found: {path}")
        self.path = path


class ContentLoader:
    """Fetch raw content text from a content root on disk."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def fetch(self, relative_path: str | Path) -> str:
        """Read a file under the content root; paths escaping the root count as missing."""
        path = (self.root / relative_path).resolve()
        if not path.is_relative_to(self.root.resolve()) or not path.is_file():
            raise ContentNotFoundError(path)
        return path.read_text(encoding="utf-8", errors="ignore")

    def load_index(self, section: str) -> list[str]:
        return parse_index(self.fetch(Path(section) / INDEX_FILE))

    def load_post(self, section: str, slug: str) -> Document:
        return parse(self.fetch(Path(section) / f"{slug}{CONTENT_SUFFIX}"))

    def iter_assets(self) -> list[Path]:
        """Return every non-content file under the root, relative to it."""
        return sorted(
            path.relative_to(self.root)
            for path in self.root.rglob("*")
            if path.is_file() and path.suffix != CONTENT_SUFFIX
        )


def is_safe_slug(slug: str) -> bool:
    """A slug names one file inside its section directory."""
    return bool(slug) and "/" not in slug and "\\" not in slug and slug not in (".", "..")


class SiteBuilder:
    """Render every section, post and the gallery into *output_dir*."""

    def __init__(
        self,
        loader: ContentLoader,
        output_dir: Path,
        *,
        renderer: HTMLRenderer | None = None,
        sections: Iterable[SectionInfo] | None = None,
        math_engine: str = "none",
    ) -> None:
        self.loader = loader
        self.output_dir = Path(output_dir)
        self.renderer = renderer or HTMLRenderer()
        self.sections = list(sections) if sections is not None else list(SECTIONS.values())
        self.math_engine = math_engine

    def build(self) -> list[Path]:
        """Write the whole site and return the paths written."""
        written = [self._write("index.html", self.renderer.render_home(self.sections, math_engine=self.math_engine))]
        for section in self.sections:
            if section.slug == GALLERY_SECTION:
                written.append(self._write(f"{section.slug}/index.html", self.build_gallery(section)))
            else:
                written.extend(self._build_section(section))
        written.extend(self._copy_assets())
        if self.renderer.stylesheet.is_file():
            target = self.output_dir / "style.css"
            shutil.copyfile(self.renderer.stylesheet, target)
            written.append(target)
        log.info("Wrote %d pages to %s", len(written), self.output_dir)
        return written

    def build_gallery(self, section: SectionInfo) -> str:
        try:
            document = parse(self.loader.fetch(Path(section.slug) / INDEX_FILE))
        except ContentNotFoundError as exc:
            log.warning("No gallery index: %s", exc.path)
            return self.renderer.render_gallery(section, [], missing_index=True, math_engine=self.math_engine)

        description = document.metadata.get("description", "")
        return self.renderer.render_gallery(
            section,
            document.images(),
            description=description if isinstance(description, str) else "",
            math_engine=self.math_engine,
        )

    def _build_section(self, section: SectionInfo) -> list[Path]:
        try:
            slugs = self.loader.load_index(section.slug)
        except ContentNotFoundError as exc:
            log.warning("No index for section %s: %s", section.slug, exc.path)
            page = self.renderer.render_section(section, [], missing_index=True, math_engine=self.math_engine)
            return [self._write(f"{section.slug}/index.html", page)]

        posts: list[tuple[str, Document]] = []
        written: list[Path] = []
        for slug in slugs:
            if not is_safe_slug(slug):
                log.warning("Skipping %s/%s: not a plain file name", section.slug, slug)
                continue
            try:
                document = self.loader.load_post(section.slug, slug)
            except ContentNotFoundError as exc:
                log.warning("Skipping %s/%s: %s", section.slug, slug, exc)
                continue
            posts.append((slug, document))
            page = self.renderer.render_post(section, slug, document, math_engine=self.math_engine)
            written.append(self._write(f"{section.slug}/{slug}.html", page))

        listing = self.renderer.render_section(section, posts, math_engine=self.math_engine)
        written.insert(0, self._write(f"{section.slug}/index.html", listing))
        return written

    def _copy_assets(self) -> list[Path]:
        copied: list[Path] = []
        for relative in self.loader.iter_assets():
            target = self.output_dir / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(self.loader.root / relative, target)
            copied.append(target)
        if copied:
            log.info("Copied %d assets", len(copied))
        return copied

    def _write(self, relative_path: str, html: str) -> Path:
        path = self.output_dir / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(html, encoding="utf-8")
        log.debug("Wrote %s", path)
        return path
