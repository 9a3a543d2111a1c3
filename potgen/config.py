"""Run configuration: output targets and their source globs.

A config file is JSON::

    {
      "targets": {
        "locale/templates/messages.pot": ["templates/**/*.html", "static/js/**/*.js"]
      },
      "template_extensions": ["jinja2.ext.do"],
      "strict": false
    }

Source patterns are resolved relative to the config file's directory.
"""

import json
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from potgen.exceptions import ConfigurationError
from potgen.logging import logger


class ExtractConfig(BaseModel):
    """Validated contents of a config file."""

    targets: dict[str, list[str]] = Field(
        description="Output catalog path -> source paths or glob patterns"
    )
    template_extensions: list[str] = Field(
        default_factory=list,
        description="Jinja extension import paths enabling extra template tags",
    )
    strict: bool = Field(
        default=False,
        description="Refuse to write a catalog whose extraction reported problems",
    )


def load_config(path: Path) -> ExtractConfig:
    """Load and validate a config file.

    Raises:
        ConfigurationError: The file is missing, not JSON, or has the wrong shape.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigurationError(f"Cannot read config {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in config {path}: {e}") from e

    try:
        return ExtractConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid config {path}: {e}") from e


def _is_pattern(value: str) -> bool:
    return any(ch in value for ch in "*?[")


def expand_sources(patterns: list[str], base_dir: Path) -> list[str]:
    """Expand source patterns into file paths.

    Each pattern's matches are sorted; pattern order is kept and repeated
    files are dropped. Paths are returned as given in the config (relative
    to base_dir when the pattern was relative).
    """
    sources: list[str] = []
    seen: set[str] = set()

    for pattern in patterns:
        if _is_pattern(pattern):
            matches = sorted(
                p.relative_to(base_dir).as_posix() if not Path(pattern).is_absolute() else str(p)
                for p in _glob(base_dir, pattern)
                if p.is_file()
            )
        else:
            matches = [pattern]

        if not matches:
            logger.warning("  Pattern matched no files: %s", pattern)

        for match in matches:
            if match not in seen:
                seen.add(match)
                sources.append(match)

    return sources


def _glob(base_dir: Path, pattern: str) -> list[Path]:
    if Path(pattern).is_absolute():
        anchor = Path(Path(pattern).anchor)
        return list(anchor.glob(str(Path(pattern).relative_to(anchor))))
    return list(base_dir.glob(pattern))
