"""
app/schemas package marker.
"""

from app.schemas.client_health import CategoryScoreResponse, ClientHealthResponse
from app.schemas.clients import ClientCreateRequest, ClientResponse
from app.schemas.report_import import (
    ReportImportSummaryResponse,
    ReportStoreResponse,
    ReportValidationErrorResponse,
)

__all__ = [
    "CategoryScoreResponse",
    "ClientCreateRequest",
    "ClientHealthResponse",
    "ClientResponse",
    "ReportImportSummaryResponse",
    "ReportStoreResponse",
    "ReportValidationErrorResponse",
]
