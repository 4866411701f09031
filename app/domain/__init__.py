"""
app/domain package marker.
"""

from app.domain.report_records import (
    HistoryEntry,
    NormalizedRecord,
    PersistedRecord,
    ReportImportSummary,
    ReportStore,
    RowValidationError,
)

__all__ = [
    "HistoryEntry",
    "NormalizedRecord",
    "PersistedRecord",
    "ReportImportSummary",
    "ReportStore",
    "RowValidationError",
]
