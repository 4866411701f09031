"""
db/models/report_store.py

One row per report type holding the merged record set and its history.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, JSONDocument, TimestampMixin


class ReportStoreRecord(Base, TimestampMixin):
    __tablename__ = "report_stores"

    report_type: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        comment="incidents, support-tickets, jiras, product-requests, implementation-requests",
    )
    records_json: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONDocument,
        nullable=False,
        default=list,
        comment="Persisted records, each with its per-field history",
    )
    last_imported_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<ReportStoreRecord report_type={self.report_type!r} records={len(self.records_json or [])}>"
