"""
app/services package marker.
"""

from app.services.record_merger import MissingRecordIdError, merge_report_records
from app.services.report_import_service import (
    ReportDecodeError,
    ReportImportError,
    ReportImportService,
    ReportPersistenceError,
    get_report_import_service,
)

__all__ = [
    "MissingRecordIdError",
    "merge_report_records",
    "ReportDecodeError",
    "ReportImportError",
    "ReportImportService",
    "ReportPersistenceError",
    "get_report_import_service",
]
