"""Merge string records that share a msgid."""

from collections.abc import Iterable

from potgen.models import Diagnostic, StringRecord


def dedupe_strings(records: Iterable[StringRecord]) -> list[StringRecord]:
    """Merge records with equal msgid, keeping first-seen order.

    Locations of later records are appended to the first record's
    locations. The first record's msgid_plural is kept even if a later
    record disagrees (see find_plural_conflicts).

    Args:
        records: Records in processing order (file order, then document order).

    Returns:
        One record per msgid, in order of first occurrence.
    """
    seen: dict[str, StringRecord] = {}
    for record in records:
        existing = seen.get(record.msgid)
        if existing is None:
            seen[record.msgid] = record
        else:
            seen[record.msgid] = existing.model_copy(
                update={"locations": [*existing.locations, *record.locations]}
            )
    return list(seen.values())


def find_plural_conflicts(records: Iterable[StringRecord]) -> list[Diagnostic]:
    """Report records whose plural form disagrees with the first one seen.

    Args:
        records: Records in processing order, before deduplication.

    Returns:
        One warning per disagreeing record, located at its first call site.
    """
    first_plural: dict[str, str | None] = {}
    conflicts: list[Diagnostic] = []

    for record in records:
        if record.msgid not in first_plural:
            first_plural[record.msgid] = record.msgid_plural
            continue

        expected = first_plural[record.msgid]
        if record.msgid_plural == expected:
            continue

        location = record.locations[0] if record.locations else None
        conflicts.append(
            Diagnostic(
                filepath=location.filepath if location else "",
                line=location.lineno if location else None,
                message=(
                    f"msgid {record.msgid!r} has plural {record.msgid_plural!r}, "
                    f"keeping first-seen plural {expected!r}"
                ),
                severity="warning",
                kind="conflict",
            )
        )

    return conflicts
