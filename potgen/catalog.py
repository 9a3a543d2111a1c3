"""Serialize string records as a portable-object template (.pot)."""

import re
from collections.abc import Iterable
from datetime import datetime

from potgen.models import StringRecord

HEADER_TEMPLATE = "\n".join([
    'msgid ""',
    'msgstr ""',
    '"Project-Id-Version: PACKAGE VERSION\\n"',
    '"Report-Msgid-Bugs-To: \\n"',
    '"POT-Creation-Date: {creation_date}\\n"',
    '"PO-Revision-Date: YEAR-MO-DA HO:MI+ZONE\\n"',
    '"Last-Translator: Automatically generated\\n"',
    '"Language-Team: none\\n"',
    '"Language: \\n"',
    '"MIME-Version: 1.0\\n"',
    '"Content-Type: text/plain; charset=UTF-8\\n"',
    '"Content-Transfer-Encoding: 8bit\\n"',
    '"X-Generator: Translate Toolkit 1.6.0\\n"',
    '"Plural-Forms: nplurals=2; plural=(n != 1);\\n"',
]) + "\n\n"

CREATION_DATE_FORMAT = "%Y-%m-%d %H:%M%z"

_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "\t": "\\t"}
_UNESCAPES = {v: k for k, v in _ESCAPES.items()}

_ESCAPE_RE = re.compile(r'[\\"\n\r\t]')
_UNESCAPE_RE = re.compile(r'\\[\\"nrt]')


def escape_po(text: str) -> str:
    """Escape text for use inside a double-quoted PO string."""
    return _ESCAPE_RE.sub(lambda m: _ESCAPES[m.group(0)], text)


def unescape_po(text: str) -> str:
    """Reverse escape_po."""
    return _UNESCAPE_RE.sub(lambda m: _UNESCAPES[m.group(0)], text)


def quote(text: str) -> str:
    return f'"{escape_po(text)}"'


def build_header(now: datetime | None = None) -> str:
    """Render the fixed catalog header, ending with one blank line.

    Args:
        now: Creation timestamp; defaults to the current local time.
    """
    if now is None:
        now = datetime.now().astimezone()
    return HEADER_TEMPLATE.format(creation_date=now.strftime(CREATION_DATE_FORMAT))


def render_record(record: StringRecord) -> str:
    """Render one catalog entry (no trailing newline)."""
    parts = [f"#: {location}" for location in record.locations]
    parts.append(f"msgid {quote(record.msgid)}")

    if record.is_plural:
        parts.extend([
            f"msgid_plural {quote(record.msgid_plural)}",
            'msgstr[0] ""',
            'msgstr[1] ""',
        ])
    else:
        parts.append('msgstr ""')

    return "\n".join(parts)


def render_catalog(records: Iterable[StringRecord], now: datetime | None = None) -> str:
    """Render the complete catalog text.

    Args:
        records: Deduplicated records in catalog order.
        now: Creation timestamp for the header.

    Returns:
        Header followed by blank-line separated entries.
    """
    return build_header(now) + "\n\n".join(render_record(record) for record in records)
