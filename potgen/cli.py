"""CLI interface for potgen.

Provides commands for extracting catalogs from explicit files or a config file.
"""

import sys
from pathlib import Path
from typing import NoReturn

import click
from dotenv import load_dotenv

# Load .env before importing other potgen modules
# so POTGEN_LOG_LEVEL / POTGEN_DISABLE_PROGRESS are set when they are read
load_dotenv()

from potgen import __version__  # noqa: E402
from potgen.config import expand_sources, load_config  # noqa: E402
from potgen.exceptions import ExtractionAborted, PotgenError  # noqa: E402
from potgen.logging import set_verbose  # noqa: E402
from potgen.tasks import run_target, run_targets  # noqa: E402


def _fail(message: str) -> NoReturn:
    click.echo(message, err=True)
    sys.exit(1)


def _report_aborted(e: ExtractionAborted) -> NoReturn:
    for diagnostic in e.diagnostics:
        click.echo(f"  {diagnostic}", err=True)
    _fail(str(e))


@click.group()
@click.version_option(version=__version__, prog_name="potgen")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """potgen - extract translatable strings into a .pot catalog."""
    set_verbose(verbose)


@cli.command()
@click.argument("sources", nargs=-1, required=True)
@click.option(
    "--output",
    "-o",
    required=True,
    type=click.Path(dir_okay=False),
    help="Catalog file to write",
)
@click.option(
    "--extension",
    "template_extensions",
    multiple=True,
    help="Jinja extension to enable for templates (can be repeated)",
)
@click.option("--strict", is_flag=True, help="Do not write if any problem was reported")
def extract(
    sources: tuple[str, ...],
    output: str,
    template_extensions: tuple[str, ...],
    strict: bool,
) -> None:
    """Extract SOURCES into one catalog.

    SOURCES: Template (.html, .njk, .jinja, .j2) and script (.js, .mjs, .cjs, .jsx) files.
    """
    try:
        result = run_target(
            output,
            list(sources),
            template_extensions=template_extensions,
            strict=strict,
        )
    except ExtractionAborted as e:
        _report_aborted(e)
    except PotgenError as e:
        _fail(f"Extraction failed: {e}")

    click.echo(
        f"{output}: {len(result.records)} message(s) from {result.file_count} file(s)",
        err=True,
    )


@cli.command()
@click.argument("config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--strict", is_flag=True, help="Do not write if any problem was reported")
def run(config_path: Path, strict: bool) -> None:
    """Extract every target listed in CONFIG_PATH.

    CONFIG_PATH: JSON file mapping output catalogs to source globs.
    """
    try:
        config = load_config(config_path)
        base_dir = config_path.parent
        targets = {
            dest: expand_sources(patterns, base_dir)
            for dest, patterns in config.targets.items()
        }
        results = run_targets(
            targets,
            base_dir=base_dir,
            template_extensions=config.template_extensions,
            strict=strict or config.strict,
        )
    except ExtractionAborted as e:
        _report_aborted(e)
    except PotgenError as e:
        _fail(f"Extraction failed: {e}")

    for dest, result in results.items():
        click.echo(
            f"{dest}: {len(result.records)} message(s) from {result.file_count} file(s)",
            err=True,
        )


@cli.command()
@click.argument("sources", nargs=-1, required=True)
@click.option(
    "--extension",
    "template_extensions",
    multiple=True,
    help="Jinja extension to enable for templates (can be repeated)",
)
def check(sources: tuple[str, ...], template_extensions: tuple[str, ...]) -> None:
    """Validate marker calls in SOURCES without writing a catalog.

    Exits with status 1 when any problem is found.
    """
    try:
        result = run_target(
            "-",
            list(sources),
            template_extensions=template_extensions,
            write=False,
        )
    except PotgenError as e:
        _fail(f"Check failed: {e}")

    for diagnostic in result.diagnostics:
        click.echo(str(diagnostic))

    if result.diagnostics:
        sys.exit(1)

    click.echo(f"OK: {len(result.records)} message(s) in {result.file_count} file(s)")


def main() -> None:
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
