"""
app/services/record_merger.py

Reconciles incoming report records against the persisted record set.
"""

from __future__ import annotations

from datetime import datetime
from typing import Mapping, Sequence

from app.domain.report_records import (
    RECORD_ID_FIELD,
    PersistedRecord,
    format_timestamp,
    utc_now_iso,
)


class MissingRecordIdError(ValueError):
    """
    Raised when an incoming record has no usable ``id``.
    """


def has_record_id(record: Mapping[str, str]) -> bool:
    return bool(str(record.get(RECORD_ID_FIELD) or "").strip())


def merge_report_records(
    existing_records: Sequence[PersistedRecord],
    incoming_records: Sequence[Mapping[str, str]],
    imported_at: datetime | str | None = None,
) -> list[PersistedRecord]:
    """
    Merge ``incoming_records`` into ``existing_records`` keyed by ``id``.

    Existing records keep their order and receive updates in place; unseen
    ids are appended in incoming order with empty history. Every changed
    field of a matched record gets one history entry stamped ``imported_at``
    (now when omitted). Neither input sequence is mutated.

    Raises:
        MissingRecordIdError: If any incoming record has a blank ``id``.
    """

    if isinstance(imported_at, datetime):
        changed_at = format_timestamp(imported_at)
    else:
        changed_at = imported_at or utc_now_iso()

    merged: dict[str, PersistedRecord] = {}
    for record in existing_records or ():
        merged[record.id] = record.copy()

    for position, incoming in enumerate(incoming_records):
        if not has_record_id(incoming):
            raise MissingRecordIdError(
                f"Incoming record at position {position} has no id; records without an id cannot be merged."
            )
        record_id = incoming[RECORD_ID_FIELD]
        current = merged.get(record_id)
        if current is None:
            merged[record_id] = PersistedRecord(fields=dict(incoming), history={})
            continue
        merged[record_id] = current.apply_update(incoming, changed_at)

    return list(merged.values())


def count_history_entries(records: Sequence[PersistedRecord]) -> int:
    return sum(len(entries) for record in records for entries in record.history.values())
