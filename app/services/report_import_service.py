"""
app/services/report_import_service.py

Service layer for report CSV import orchestration.

One import call is one read-merge-write of the report type's store:

    1. Resolve the report schema (unknown type fails fast).
    2. Parse and map the CSV; a header mismatch rejects the whole file
       before the store is read.
    3. Skip rows without an id, capturing one validation error per row.
    4. Merge into the stored records and commit, or roll back on failure.

Two callers importing the same report type concurrently can lose one
update; deployments are expected to have a single writer.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from functools import lru_cache

from fastapi import UploadFile
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import get_report_import_settings
from app.domain.report_records import (
    RECORD_ID_FIELD,
    NormalizedRecord,
    ReportImportSummary,
    ReportStore,
    RowValidationError,
    format_timestamp,
)
from app.logging_utils import log_event
from app.mappers.schema_mapper import ReportSchemaMapper, get_report_schema
from app.repositories.report_store_repository import ReportStoreRepository
from app.services.record_merger import count_history_entries, has_record_id, merge_report_records
from app.validators.mapping_validator import SchemaMismatchError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ReportImportError(RuntimeError):
    """
    Base class for import failures outside schema validation.
    """


class ReportDecodeError(ReportImportError):
    """
    Raised when an uploaded report is not valid UTF-8 text.
    """


class ReportPersistenceError(ReportImportError):
    """
    Raised when the merged record set cannot be persisted.
    """


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class ReportImportService:
    """
    Coordinates CSV parsing, schema mapping, merge, and persistence.
    """

    def __init__(
        self,
        *,
        max_validation_errors: int,
        log_validation_errors: bool,
        mapper: ReportSchemaMapper | None = None,
    ) -> None:
        self._max_validation_errors = max(1, max_validation_errors)
        self._log_validation_errors = log_validation_errors
        self._mapper = mapper or ReportSchemaMapper()

    def import_upload(
        self,
        *,
        report_type: str,
        upload_file: UploadFile,
        db: Session,
        imported_at: datetime | None = None,
    ) -> ReportImportSummary:
        """
        Decode an uploaded CSV file and import it.
        """

        raw_file = upload_file.file
        raw_file.seek(0)
        try:
            csv_text = raw_file.read().decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ReportDecodeError("CSV must be UTF-8 encoded.") from exc

        return self.import_csv(
            report_type=report_type,
            csv_text=csv_text,
            db=db,
            imported_at=imported_at,
        )

    def import_csv(
        self,
        *,
        report_type: str,
        csv_text: str,
        db: Session,
        imported_at: datetime | None = None,
    ) -> ReportImportSummary:
        """
        Parse ``csv_text`` as ``report_type`` and merge it into the stored records.

        Raises:
            UnknownReportTypeError: ``report_type`` is not a known report type.
            SchemaMismatchError: a required header is missing; nothing is written.
            ReportPersistenceError: the merged store could not be committed.
        """

        schema = get_report_schema(report_type)
        timestamp = format_timestamp(imported_at or datetime.now(timezone.utc))

        try:
            parsed, row_numbers = self._mapper.parse_with_row_numbers(csv_text, schema)
        except SchemaMismatchError as exc:
            log_event(
                logger,
                logging.WARNING,
                "report_import_rejected",
                report_type=report_type,
                missing_headers=exc.missing_headers,
            )
            raise

        captured_errors: list[RowValidationError] = []
        incoming: list[NormalizedRecord] = []
        for row_number, record in zip(row_numbers, parsed):
            if not has_record_id(record):
                self._record_error(
                    captured_errors,
                    RowValidationError(
                        row_number=row_number,
                        column=RECORD_ID_FIELD,
                        message="Row has no record id and was skipped.",
                        value=record.get(RECORD_ID_FIELD),
                    ),
                )
                continue
            incoming.append(record)

        repository = ReportStoreRepository(db)
        try:
            existing = repository.get(report_type)
            merged = merge_report_records(existing.records, incoming, timestamp)
            repository.save(
                report_type,
                ReportStore(records=merged, last_imported_at=timestamp),
            )
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise ReportPersistenceError(
                f"Failed to persist merged records for report type '{report_type}'."
            ) from exc

        existing_ids = {record.id for record in existing.records}
        incoming_ids = {record[RECORD_ID_FIELD] for record in incoming}
        before_by_id = {record.id: record for record in existing.records}
        records_updated = sum(
            1
            for record in merged
            if record.id in existing_ids and record.history != before_by_id[record.id].history
        )

        summary = ReportImportSummary(
            report_type=report_type,
            rows_parsed=len(parsed),
            rows_skipped=len(parsed) - len(incoming),
            records_added=len(incoming_ids - existing_ids),
            records_updated=records_updated,
            history_entries_added=count_history_entries(merged) - count_history_entries(existing.records),
            total_records=len(merged),
            last_imported_at=timestamp,
            validation_errors=captured_errors,
        )
        log_event(
            logger,
            logging.INFO,
            "report_import_completed",
            report_type=report_type,
            rows_parsed=summary.rows_parsed,
            rows_skipped=summary.rows_skipped,
            records_added=summary.records_added,
            records_updated=summary.records_updated,
            history_entries_added=summary.history_entries_added,
            total_records=summary.total_records,
        )
        return summary

    def get_report_store(self, *, report_type: str, db: Session) -> ReportStore:
        """
        Return the persisted store for ``report_type`` (empty if never imported).
        """

        get_report_schema(report_type)
        return ReportStoreRepository(db).get(report_type)

    def _record_error(
        self,
        captured_errors: list[RowValidationError],
        error: RowValidationError,
    ) -> None:
        if self._log_validation_errors:
            logger.warning(
                "Report validation error row=%s column=%s message=%s value=%r",
                error.row_number,
                error.column,
                error.message,
                error.value,
            )

        if len(captured_errors) < self._max_validation_errors:
            captured_errors.append(error)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_report_import_service() -> ReportImportService:
    """
    Build and cache the import service with env-driven settings.
    """
    settings = get_report_import_settings()
    return ReportImportService(
        max_validation_errors=settings.max_validation_errors,
        log_validation_errors=settings.log_validation_errors,
    )
