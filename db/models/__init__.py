"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.client import Client
from db.models.report_store import ReportStoreRecord

__all__ = [
    "Client",
    "ReportStoreRecord",
]
