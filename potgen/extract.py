"""Catalog build: extract every source, dedupe, serialize.

This layer takes file contents and returns catalog text; reading and
writing files is left to potgen.tasks.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime

from potgen.catalog import render_catalog
from potgen.dedupe import dedupe_strings, find_plural_conflicts
from potgen.extractors import (
    Extractor,
    get_extractor,
    get_extractors,
    report_diagnostic,
    run_extractor,
)
from potgen.logging import logger, progress_bar
from potgen.models import CatalogResult, Diagnostic, StringRecord


def check_extensions(
    filepaths: Iterable[str],
    extractors: dict[str, Extractor] | None = None,
) -> None:
    """Fail the batch up front if any file has no extractor.

    Raises:
        ConfigurationError: For the first unsupported extension.
    """
    if extractors is None:
        extractors = get_extractors()
    for filepath in filepaths:
        get_extractor(filepath, extractors)


def build_catalog(
    sources: Sequence[tuple[str, str]],
    template_extensions: Sequence[str] = (),
    now: datetime | None = None,
    extractors: dict[str, Extractor] | None = None,
) -> CatalogResult:
    """Build one catalog from (filepath, contents) pairs.

    Files are processed in the order given; that order decides both the
    catalog order and the order of merged locations. A file that fails to
    parse contributes nothing but does not stop the batch.

    Args:
        sources: (filepath, contents) pairs.
        template_extensions: Extra Jinja extensions for template parsing,
            used when no extractors are given.
        now: Creation timestamp for the catalog header.
        extractors: Extension -> extractor map to reuse across builds.

    Returns:
        CatalogResult with the catalog text, records and diagnostics.

    Raises:
        ConfigurationError: A file has an unsupported extension, or a
            template extension cannot be imported.
    """
    if extractors is None:
        extractors = get_extractors(template_extensions)
    # Resolve every file before extracting any of them
    dispatched = [
        (filepath, contents, get_extractor(filepath, extractors))
        for filepath, contents in sources
    ]

    extracted: list[StringRecord] = []
    diagnostics: list[Diagnostic] = []

    for filepath, contents, extractor in progress_bar(
        dispatched, desc="Extracting", unit="files"
    ):
        file_result = run_extractor(extractor, filepath, contents)
        extracted.extend(file_result.records)
        diagnostics.extend(file_result.diagnostics)

    conflicts = find_plural_conflicts(extracted)
    for conflict in conflicts:
        report_diagnostic(conflict)
    diagnostics.extend(conflicts)

    records = dedupe_strings(extracted)
    logger.info(
        "  Extracted %d string(s), %d unique, from %d file(s)",
        len(extracted),
        len(records),
        len(sources),
    )

    return CatalogResult(
        text=render_catalog(records, now),
        records=records,
        diagnostics=diagnostics,
        file_count=len(sources),
    )
