"""File I/O around catalog builds: read sources, write each catalog once."""

from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from potgen.exceptions import ConfigurationError, ExtractionAborted
from potgen.extract import build_catalog, check_extensions
from potgen.extractors import Extractor, get_extractors
from potgen.logging import log_operation, logger
from potgen.models import CatalogResult


def read_sources(filepaths: Sequence[str], base_dir: Path) -> list[tuple[str, str]]:
    """Read each source as UTF-8, keeping the path as given.

    Raises:
        ConfigurationError: A source cannot be read.
    """
    sources = []
    for filepath in filepaths:
        path = base_dir / filepath
        try:
            contents = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigurationError(f"Cannot read source {filepath}: {e}") from e
        sources.append((filepath, contents))
    return sources


def write_catalog(dest: Path, text: str) -> None:
    """Write catalog text, creating parent directories."""
    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_text(text, encoding="utf-8")
    logger.info("  Wrote %s", dest)


def _build_target(
    dest: str,
    filepaths: Sequence[str],
    base_dir: Path,
    extractors: dict[str, Extractor],
    strict: bool,
    write: bool,
    now: datetime | None,
) -> CatalogResult:
    with log_operation("extract", {"dest": dest, "files": len(filepaths)}):
        sources = read_sources(filepaths, base_dir)
        result = build_catalog(sources, now=now, extractors=extractors)

        if strict and result.diagnostics:
            raise ExtractionAborted(dest, result.diagnostics)

        if write:
            write_catalog(base_dir / dest, result.text)

    return result


def run_target(
    dest: str,
    filepaths: Sequence[str],
    base_dir: Path = Path("."),
    template_extensions: Sequence[str] = (),
    strict: bool = False,
    write: bool = True,
    now: datetime | None = None,
) -> CatalogResult:
    """Extract one output catalog from its source files.

    Args:
        dest: Output path, relative to base_dir unless absolute.
        filepaths: Source paths, relative to base_dir unless absolute.
        base_dir: Directory relative paths are resolved against.
        template_extensions: Extra Jinja extensions for template parsing.
        strict: Refuse to write when any diagnostic was reported.
        write: Set to False to build without writing (check mode).
        now: Creation timestamp for the catalog header.

    Returns:
        The CatalogResult that was (or would have been) written.

    Raises:
        ConfigurationError: Unsupported extension, unloadable template
            extension or unreadable source.
        ExtractionAborted: strict is set and diagnostics were reported.
    """
    extractors = get_extractors(template_extensions)
    check_extensions(filepaths, extractors)
    return _build_target(dest, filepaths, base_dir, extractors, strict, write, now)


def run_targets(
    targets: dict[str, list[str]],
    base_dir: Path = Path("."),
    template_extensions: Sequence[str] = (),
    strict: bool = False,
    write: bool = True,
    now: datetime | None = None,
) -> dict[str, CatalogResult]:
    """Extract every target catalog.

    Extensions of all targets are checked before any file is read, so a
    configuration error never leaves some catalogs written and others not.

    Returns:
        dest -> CatalogResult, in target order.
    """
    extractors = get_extractors(template_extensions)
    for filepaths in targets.values():
        check_extensions(filepaths, extractors)

    return {
        dest: _build_target(dest, filepaths, base_dir, extractors, strict, write, now)
        for dest, filepaths in targets.items()
    }
