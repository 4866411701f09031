"""
app/domain/report_records.py

Domain models used by the report import and merge flow.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping

NormalizedRecord = dict[str, str]

RECORD_ID_FIELD = "id"
HISTORY_FIELD = "history"


def format_timestamp(value: datetime) -> str:
    """
    Render a datetime as an ISO-8601 UTC string with millisecond precision.
    """

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    rendered = value.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return rendered.replace("+00:00", "Z")


def utc_now_iso() -> str:
    return format_timestamp(datetime.now(timezone.utc))


@dataclass(frozen=True)
class HistoryEntry:
    """
    One observed change of one field on one record.
    """

    from_value: str
    to_value: str
    changed_at: str

    def to_dict(self) -> dict[str, str]:
        return {"from": self.from_value, "to": self.to_value, "changedAt": self.changed_at}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> HistoryEntry:
        return cls(
            from_value=_as_text(payload.get("from")),
            to_value=_as_text(payload.get("to")),
            changed_at=_as_text(payload.get("changedAt")),
        )


@dataclass
class PersistedRecord:
    """
    Normalized record fields plus the append-only history of each field.
    """

    fields: dict[str, str]
    history: dict[str, list[HistoryEntry]] = field(default_factory=dict)

    @property
    def id(self) -> str:
        return self.fields.get(RECORD_ID_FIELD, "")

    def get(self, key: str, default: str = "") -> str:
        return self.fields.get(key, default)

    def copy(self) -> PersistedRecord:
        return PersistedRecord(
            fields=dict(self.fields),
            history={name: list(entries) for name, entries in self.history.items()},
        )

    def apply_update(self, incoming: Mapping[str, str], changed_at: str) -> PersistedRecord:
        """
        Return a copy with the keys present in ``incoming`` applied.

        Every changed field gets one history entry. Keys absent from
        ``incoming`` keep their current value and history.
        """

        updated = self.copy()
        for name, value in incoming.items():
            if name == RECORD_ID_FIELD or name == HISTORY_FIELD:
                continue
            previous = self.fields.get(name, "")
            if previous == value:
                continue
            updated.history.setdefault(name, []).append(
                HistoryEntry(from_value=previous, to_value=value, changed_at=changed_at)
            )
            updated.fields[name] = value
        return updated

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = dict(self.fields)
        payload[HISTORY_FIELD] = {
            name: [entry.to_dict() for entry in entries]
            for name, entries in self.history.items()
        }
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> PersistedRecord:
        fields = {
            str(key): _as_text(value)
            for key, value in payload.items()
            if key != HISTORY_FIELD
        }
        raw_history = payload.get(HISTORY_FIELD)
        history: dict[str, list[HistoryEntry]] = {}
        if isinstance(raw_history, Mapping):
            for name, entries in raw_history.items():
                if not isinstance(entries, list):
                    continue
                history[str(name)] = [
                    HistoryEntry.from_dict(entry)
                    for entry in entries
                    if isinstance(entry, Mapping)
                ]
        return cls(fields=fields, history=history)


@dataclass
class ReportStore:
    """
    Everything persisted for one report type.
    """

    records: list[PersistedRecord] = field(default_factory=list)
    last_imported_at: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "records": [record.to_dict() for record in self.records],
            "lastImportedAt": self.last_imported_at,
        }

    @classmethod
    def from_dict(cls, payload: Any) -> ReportStore:
        if not isinstance(payload, Mapping):
            return cls()
        raw_records = payload.get("records")
        records = (
            [PersistedRecord.from_dict(item) for item in raw_records if isinstance(item, Mapping)]
            if isinstance(raw_records, list)
            else []
        )
        last_imported_at = payload.get("lastImportedAt")
        return cls(
            records=records,
            last_imported_at=str(last_imported_at) if last_imported_at else None,
        )


@dataclass(frozen=True)
class RowValidationError:
    """
    One CSV row validation error detail.
    """

    row_number: int
    message: str
    column: str | None = None
    value: str | None = None


@dataclass(frozen=True)
class ReportImportSummary:
    """
    End-of-run import summary.
    """

    report_type: str
    rows_parsed: int
    rows_skipped: int
    records_added: int
    records_updated: int
    history_entries_added: int
    total_records: int
    last_imported_at: str
    validation_errors: list[RowValidationError] = field(default_factory=list)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)
