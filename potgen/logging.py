"""Logging configuration for potgen.

Logs to stderr so catalog text piped to stdout stays clean.
Provides tqdm progress bars for long extraction batches.
"""

import logging
import os
import sys
import time
from collections.abc import Generator, Iterable
from contextlib import contextmanager
from typing import Any, TypeVar

from tqdm import tqdm

# Progress bars are disabled when:
# - POTGEN_DISABLE_PROGRESS=1 is set
# - stderr is not a TTY (CI, redirected output)
_DISABLE_PROGRESS = (
    os.getenv("POTGEN_DISABLE_PROGRESS", "").lower() in ("1", "true", "yes")
    or not sys.stderr.isatty()
)

T = TypeVar("T")

logger = logging.getLogger("potgen")
logger.setLevel(os.getenv("POTGEN_LOG_LEVEL", "INFO").upper())

# Only add handler if not already configured
if not logger.handlers:
    handler = logging.StreamHandler(sys.stderr)
    formatter = logging.Formatter(
        "[potgen] %(asctime)s %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def set_verbose(verbose: bool) -> None:
    """Switch the package logger between INFO and DEBUG."""
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


@contextmanager
def log_operation(
    operation: str,
    details: dict[str, Any] | None = None,
) -> Generator[None, None, None]:
    """Context manager for logging operation start/end with timing.

    Args:
        operation: Name of the operation.
        details: Optional details dict to include in start message.

    Example:
        with log_operation("extract", {"dest": "locale/messages.pot"}):
            build_catalog(sources)
    """
    details_str = ""
    if details:
        details_str = " " + " ".join(f"{k}={v}" for k, v in details.items())

    logger.info("▶ Starting %s%s", operation, details_str)

    start = time.perf_counter()

    try:
        yield
    except Exception as e:
        elapsed = time.perf_counter() - start
        logger.error("✗ %s failed after %.2fs: %s", operation, elapsed, e)
        raise
    else:
        elapsed = time.perf_counter() - start
        logger.info("✓ Completed %s in %.2fs", operation, elapsed)


def progress_bar(
    iterable: Iterable[T],
    desc: str | None = None,
    unit: str = "it",
) -> Iterable[T]:
    """Wrap an iterable with a progress bar.

    Progress is shown on stderr and is switched off when stderr is not a TTY.

    Args:
        iterable: The iterable to wrap.
        desc: Description shown before the progress bar.
        unit: Unit name for the items (e.g., "files").

    Returns:
        Wrapped iterable that shows progress.
    """
    if _DISABLE_PROGRESS:
        return iterable

    return tqdm(
        iterable,
        desc=f"  {desc}" if desc else None,
        unit=unit,
        file=sys.stderr,
        ncols=80,
        leave=False,
        bar_format="{l_bar}{bar}| {n_fmt}/{total_fmt} [{elapsed}<{remaining}, {rate_fmt}]",
    )
