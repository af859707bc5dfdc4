"""signalnoise CLI entrypoint."""

from __future__ import annotations

from pathlib import Path

import click

from signalnoise._logging import configure_logging
from signalnoise.config import SECTIONS, ConfigurationError, SiteConfig, get_section
from signalnoise.parser.txt_parser import TxtParser, parse_index
from signalnoise.renderer.html_renderer import HTMLRenderer
from signalnoise.site import ContentLoader, SiteBuilder

_MATH_ENGINE = click.Choice(["none", "katex"], case_sensitive=False)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--log-level", type=str, default=None, help="Override SIGNALNOISE_LOG_LEVEL")
def main(log_level: str | None) -> None:
    """Render Signal & Noise .txt content files into HTML."""
    configure_logging(log_level)


@main.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--output", "-o", type=click.Path(path_type=Path), required=True, help="Output HTML path")
@click.option(
    "--section",
    type=click.Choice(list(SECTIONS)),
    default="lab-notes",
    show_default=True,
    help="Section the post belongs to",
)
@click.option("--math-engine", type=_MATH_ENGINE, default="katex", show_default=True, help="Math rendering mode")
def render(input_path: Path, output: Path, section: str, math_engine: str) -> None:
    """Render a single content file into an HTML page."""
    document = TxtParser().parse(input_path)
    html = HTMLRenderer().render_post(
        get_section(section),
        input_path.stem,
        document,
        root="",
        math_engine=math_engine.lower(),
    )

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(html, encoding="utf-8")

    click.echo(f"Rendered: {output}")


@main.command()
@click.option("--content", "content_root", type=click.Path(file_okay=False, path_type=Path), default=None,
              help="Content root (default: $SIGNALNOISE_CONTENT_ROOT or ./content)")
@click.option("--output", "-o", "output_dir", type=click.Path(file_okay=False, path_type=Path), default=None,
              help="Output directory (default: $SIGNALNOISE_OUTPUT_DIR or ./site)")
@click.option("--math-engine", type=_MATH_ENGINE, default=None, help="Math rendering mode")
def build(content_root: Path | None, output_dir: Path | None, math_engine: str | None) -> None:
    """Build the static site from a content directory."""
    try:
        config = SiteConfig.from_env().with_overrides(
            content_root=content_root,
            output_dir=output_dir,
            math_engine=math_engine,
        )
    except ConfigurationError as exc:
        raise click.ClickException(str(exc)) from exc

    if not config.content_root.is_dir():
        raise click.ClickException(f"Content directory not found: {config.content_root}")

    builder = SiteBuilder(ContentLoader(config.content_root), config.output_dir, math_engine=config.math_engine)
    written = builder.build()

    click.echo(f"Built {len(written)} files into {config.output_dir}")


@main.command("index")
@click.argument("index_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def index_command(index_path: Path) -> None:
    """List the identifiers in an index file."""
    for slug in parse_index(index_path.read_text(encoding="utf-8", errors="ignore")):
        click.echo(slug)


if __name__ == "__main__":  # pragma: no cover
    main()
