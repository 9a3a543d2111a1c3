"""Extractor record type and the per-file extraction pipeline.

An extractor is a bundle of three callables for one source kind:
parse the text, locate call nodes, turn one call node into a record.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from potgen.exceptions import CallValidationError, ParseError
from potgen.logging import logger
from potgen.models import Diagnostic, ExtractionResult, StringRecord

# Marker messages shared by both source kinds
EMPTY_CALL = "Empty gettext call"
NON_LITERAL = "Cannot localize non-literal"
UNKNOWN_MARKER = "Unknown type of localization"
UNPAIRED_SURROGATE = "Unpaired surrogate in string literal"


@dataclass(frozen=True)
class Extractor:
    """Extraction pipeline for one source kind."""

    name: str
    extensions: frozenset[str]

    # text -> tree, raises ParseError
    parse: Callable[[str], Any]
    # tree -> call nodes in document order
    find_calls: Callable[[Any], Iterable[Any]]
    # (call node, filepath) -> record, None for non-marker calls,
    # raises CallValidationError
    make_record: Callable[[Any, str], StringRecord | None]


def join_surrogates(text: str, line: int | None = None) -> str:
    """Combine surrogate pairs left by escape decoding into code points.

    Raises:
        CallValidationError: text holds an unpaired surrogate, which cannot
            be written as UTF-8.
    """
    try:
        return text.encode("utf-16", "surrogatepass").decode("utf-16")
    except UnicodeDecodeError as e:
        raise CallValidationError(UNPAIRED_SURROGATE, line=line) from e


def report_diagnostic(diagnostic: Diagnostic) -> None:
    """Surface a diagnostic to the operator through the package logger."""
    if diagnostic.severity == "fatal":
        logger.error("%s", diagnostic)
    else:
        logger.warning("%s", diagnostic)


def run_extractor(extractor: Extractor, filepath: str, contents: str) -> ExtractionResult:
    """Extract every marked string from one file's contents.

    A parse failure drops the whole file (fatal diagnostic, no records).
    A bad marker call drops only that call.

    Args:
        extractor: Pipeline for the file's source kind.
        filepath: Path recorded in locations and diagnostics.
        contents: The file text.

    Returns:
        ExtractionResult with records in document order.
    """
    result = ExtractionResult(filepath=filepath)

    try:
        tree = extractor.parse(contents)
    except ParseError as e:
        diagnostic = Diagnostic(
            filepath=filepath,
            line=e.line,
            column=e.column,
            message=f"Error while parsing: {e.message}",
            severity="fatal",
            kind="parse",
        )
        report_diagnostic(diagnostic)
        result.diagnostics.append(diagnostic)
        return result

    for node in extractor.find_calls(tree):
        try:
            record = extractor.make_record(node, filepath)
        except CallValidationError as e:
            diagnostic = Diagnostic(
                filepath=filepath,
                line=e.line,
                message=e.message,
                severity="warning",
                kind="validation",
            )
            report_diagnostic(diagnostic)
            result.diagnostics.append(diagnostic)
            continue

        if record is not None:
            result.records.append(record)

    logger.debug(
        "  %s: %d string(s) via %s extractor",
        filepath,
        len(result.records),
        extractor.name,
    )
    return result
