"""Per-source-kind extractors, dispatched by file extension.

Components:
    - Extractor: parse / find_calls / make_record bundle for one source kind
    - template: Jinja/Nunjucks-style templates, markers ``_`` and ``_plural``
    - script: JavaScript via tree-sitter, markers ``gettext`` and ``ngettext``
"""

from collections.abc import Sequence
from pathlib import PurePath

from potgen.exceptions import ConfigurationError
from potgen.extractors.base import Extractor, report_diagnostic, run_extractor
from potgen.extractors.script import SCRIPT_EXTRACTOR
from potgen.extractors.template import make_template_extractor
from potgen.models import ExtractionResult


def get_extractors(template_extensions: Sequence[str] = ()) -> dict[str, Extractor]:
    """Map every supported file extension to its extractor."""
    extension_to_extractor: dict[str, Extractor] = {}
    for extractor in (make_template_extractor(template_extensions), SCRIPT_EXTRACTOR):
        for extension in extractor.extensions:
            extension_to_extractor[extension] = extractor
    return extension_to_extractor


def get_extractor(
    filepath: str,
    extractors: dict[str, Extractor] | None = None,
) -> Extractor:
    """Select the extractor for a file by its extension.

    Raises:
        ConfigurationError: No extractor handles the extension.
    """
    if extractors is None:
        extractors = get_extractors()
    extension = PurePath(filepath).suffix.lower()
    extractor = extractors.get(extension)
    if extractor is None:
        raise ConfigurationError(
            f"No extraction method defined for extension {extension or '(none)'} ({filepath})"
        )
    return extractor


def extract_strings(
    filepath: str,
    contents: str,
    extractors: dict[str, Extractor] | None = None,
) -> ExtractionResult:
    """Extract marked strings from one file's contents."""
    return run_extractor(get_extractor(filepath, extractors), filepath, contents)


__all__ = [
    "Extractor",
    "extract_strings",
    "get_extractor",
    "get_extractors",
    "report_diagnostic",
    "run_extractor",
]
