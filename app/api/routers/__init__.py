"""
app/api/routers package marker.
"""

from app.api.routers.client_health import router as client_health_router
from app.api.routers.client_router import router as client_router
from app.api.routers.report_import import router as report_import_router

__all__ = [
    "client_health_router",
    "client_router",
    "report_import_router",
]
