"""
app/schemas/report_import.py

Response schemas for report import endpoints.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ReportValidationErrorResponse(BaseModel):
    """
    API response model for one row-level validation error.
    """

    row_number: int = Field(..., ge=1)
    message: str
    column: str | None = None
    value: str | None = None


class ReportImportSummaryResponse(BaseModel):
    """
    API response model for one report import.
    """

    report_type: str
    rows_parsed: int = Field(..., ge=0)
    rows_skipped: int = Field(..., ge=0)
    records_added: int = Field(..., ge=0)
    records_updated: int = Field(..., ge=0)
    history_entries_added: int = Field(..., ge=0)
    total_records: int = Field(..., ge=0)
    last_imported_at: str
    validation_errors: list[ReportValidationErrorResponse] = Field(default_factory=list)


class ReportStoreResponse(BaseModel):
    """
    Stored records of one report type in their persisted wire shape.
    """

    report_type: str
    records: list[dict[str, Any]] = Field(default_factory=list)
    last_imported_at: str | None = Field(default=None, serialization_alias="lastImportedAt")
