"""Configuration for signalnoise.

Site sections and the defaults used by the CLI live here. Environment
variables override the defaults; CLI options override the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path

MATH_ENGINES = ("none", "katex")

DEFAULT_CONTENT_ROOT = Path("content")
DEFAULT_OUTPUT_DIR = Path("site")

# KaTeX release loaded by page templates when math_engine == "katex".
KATEX_VERSION = "0.16.9"


class ConfigurationError(Exception):
    """Raised when a configuration value is invalid."""

    pass


@dataclass(frozen=True, slots=True)
class SectionInfo:
    slug: str
    title: str
    description: str
    icon: str


SECTIONS: dict[str, SectionInfo] = {
    "lab-notes": SectionInfo(
        slug="lab-notes",
        title="Lab Notes",
        description="Electrical engineering concepts, circuit analysis, and technical deep-dives.",
        icon="⚡",
    ),
    "projects": SectionInfo(
        slug="projects",
        title="Projects",
        description="Hands-on builds, schematics, and engineering experiments.",
        icon="🔧",
    ),
    "musings": SectionInfo(
        slug="musings",
        title="Musings",
        description="Thoughts on shows, quotes, ideas, and everything in between.",
        icon="💭",
    ),
    "gallery": SectionInfo(
        slug="gallery",
        title="Gallery",
        description="Memorable moments and images worth sharing.",
        icon="📸",
    ),
}

GALLERY_SECTION = "gallery"


def get_section(slug: str) -> SectionInfo:
    try:
        return SECTIONS[slug]
    except KeyError:
        raise ConfigurationError(f"Unknown section: {slug!r} (expected one of {', '.join(SECTIONS)})") from None


def validate_math_engine(value: str) -> str:
    engine = value.strip().lower()
    if engine not in MATH_ENGINES:
        raise ConfigurationError(f"Unsupported math engine: {value!r} (expected one of {', '.join(MATH_ENGINES)})")
    return engine


@dataclass(frozen=True, slots=True)
class SiteConfig:
    content_root: Path = DEFAULT_CONTENT_ROOT
    output_dir: Path = DEFAULT_OUTPUT_DIR
    math_engine: str = "katex"

    @classmethod
    def from_env(cls) -> "SiteConfig":
        """Build a config from ``SIGNALNOISE_*`` environment variables."""
        return cls(
            content_root=Path(os.environ.get("SIGNALNOISE_CONTENT_ROOT", str(DEFAULT_CONTENT_ROOT))),
            output_dir=Path(os.environ.get("SIGNALNOISE_OUTPUT_DIR", str(DEFAULT_OUTPUT_DIR))),
            math_engine=validate_math_engine(os.environ.get("SIGNALNOISE_MATH_ENGINE", "katex")),
        )

    def with_overrides(
        self,
        *,
        content_root: Path | None = None,
        output_dir: Path | None = None,
        math_engine: str | None = None,
    ) -> "SiteConfig":
        changes: dict = {}
        if content_root is not None:
            changes["content_root"] = content_root
        if output_dir is not None:
            changes["output_dir"] = output_dir
        if math_engine is not None:
            changes["math_engine"] = validate_math_engine(math_engine)
        return replace(self, **changes)
