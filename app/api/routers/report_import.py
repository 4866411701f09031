"""
app/api/routers/report_import.py

Report CSV import HTTP endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_csv_upload
from app.mappers.schema_mapper import UnknownReportTypeError
from app.schemas.report_import import (
    ReportImportSummaryResponse,
    ReportStoreResponse,
    ReportValidationErrorResponse,
)
from app.services.report_import_service import (
    ReportDecodeError,
    ReportImportService,
    ReportPersistenceError,
    get_report_import_service,
)
from app.validators.mapping_validator import SchemaMismatchError
from db.session import get_db

router = APIRouter(prefix="/reports", tags=["reports"])


@router.post("/{report_type}/import", response_model=ReportImportSummaryResponse)
def import_report(
    report_type: str,
    file: UploadFile = Depends(get_csv_upload),
    db: Session = Depends(get_db),
    import_service: ReportImportService = Depends(get_report_import_service),
) -> ReportImportSummaryResponse:
    """
    Import one exported report CSV and merge it into the stored records.
    """

    try:
        summary = import_service.import_upload(
            report_type=report_type,
            upload_file=file,
            db=db,
        )
    except UnknownReportTypeError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    except SchemaMismatchError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=exc.to_dict(),
        ) from exc
    except ReportDecodeError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except ReportPersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to persist imported records.",
        ) from exc
    finally:
        file.file.close()

    return ReportImportSummaryResponse(
        report_type=summary.report_type,
        rows_parsed=summary.rows_parsed,
        rows_skipped=summary.rows_skipped,
        records_added=summary.records_added,
        records_updated=summary.records_updated,
        history_entries_added=summary.history_entries_added,
        total_records=summary.total_records,
        last_imported_at=summary.last_imported_at,
        validation_errors=[
            ReportValidationErrorResponse(
                row_number=error.row_number,
                column=error.column,
                message=error.message,
                value=error.value,
            )
            for error in summary.validation_errors
        ],
    )


@router.get("/{report_type}", response_model=ReportStoreResponse)
def get_report(
    report_type: str,
    db: Session = Depends(get_db),
    import_service: ReportImportService = Depends(get_report_import_service),
) -> ReportStoreResponse:
    """
    Return the stored records of one report type.
    """

    try:
        store = import_service.get_report_store(report_type=report_type, db=db)
    except UnknownReportTypeError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc

    payload = store.to_dict()
    return ReportStoreResponse(
        report_type=report_type,
        records=payload["records"],
        last_imported_at=payload["lastImportedAt"],
    )
