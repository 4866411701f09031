"""
app/repositories/report_store_repository.py

Persistence helpers for per-report-type record stores.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from app.domain.report_records import ReportStore, format_timestamp
from app.mappers.schema_mapper import REPORT_TYPES, UnknownReportTypeError
from db.base import as_utc
from db.models.report_store import ReportStoreRecord


class ReportStoreRepository:
    """
    Reads and writes one ReportStore per report type.

    The caller owns the transaction: ``save`` only flushes.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, report_type: str) -> ReportStore:
        """
        Return the stored records for ``report_type``; empty when never imported.
        """

        row = self._get_row(report_type)
        if row is None:
            return ReportStore()

        store = ReportStore.from_dict({"records": row.records_json})
        last_imported_at = as_utc(row.last_imported_at)
        store.last_imported_at = format_timestamp(last_imported_at) if last_imported_at else None
        return store

    def save(self, report_type: str, store: ReportStore) -> None:
        """
        Replace the stored record set for ``report_type`` with ``store``.
        """

        row = self._get_row(report_type)
        payload = store.to_dict()["records"]
        last_imported_at = _parse_iso(store.last_imported_at)
        if row is None:
            row = ReportStoreRecord(
                report_type=report_type,
                records_json=payload,
                last_imported_at=last_imported_at,
            )
            self._session.add(row)
        else:
            row.records_json = payload
            row.last_imported_at = last_imported_at

        self._session.flush()

    def _get_row(self, report_type: str) -> ReportStoreRecord | None:
        if report_type not in REPORT_TYPES:
            raise UnknownReportTypeError(report_type)
        return self._session.get(ReportStoreRecord, report_type)


def _parse_iso(value: str | None) -> datetime | None:
    if not value:
        return None
    normalized = value[:-1] + "+00:00" if value.endswith("Z") else value
    return as_utc(datetime.fromisoformat(normalized))
