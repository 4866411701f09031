"""
app/repositories package marker.
"""

from app.repositories.client_repository import ClientRepository
from app.repositories.report_store_repository import ReportStoreRepository

__all__ = [
    "ClientRepository",
    "ReportStoreRepository",
]
