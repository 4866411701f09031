"""
app/mappers package marker.
"""

from app.mappers.schema_mapper import (
    REPORT_SCHEMAS,
    REPORT_TYPES,
    ReportSchema,
    ReportSchemaMapper,
    ReportType,
    UnknownReportTypeError,
    get_report_schema,
)

__all__ = [
    "REPORT_SCHEMAS",
    "REPORT_TYPES",
    "ReportSchema",
    "ReportSchemaMapper",
    "ReportType",
    "UnknownReportTypeError",
    "get_report_schema",
]
