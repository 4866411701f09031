"""
app/api/dependencies.py

Shared FastAPI dependencies for report uploads.
"""

from __future__ import annotations

from fastapi import File, HTTPException, UploadFile, status

# Support-tool exports are often served as text/plain or Excel's CSV type.
REPORT_CONTENT_TYPES = {
    "text/csv",
    "application/csv",
    "text/plain",
    "application/vnd.ms-excel",
}


def get_csv_upload(file: UploadFile = File(...)) -> UploadFile:
    """
    Accept an uploaded report export when its extension or MIME type is CSV-like.
    """

    filename = (file.filename or "").strip().lower()
    content_type = (file.content_type or "").split(";", 1)[0].strip().lower()

    if not filename.endswith(".csv") and content_type not in REPORT_CONTENT_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only CSV report exports are allowed.",
        )

    return file
