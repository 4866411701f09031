"""
health/orchestrator.py

Orchestrates client health evaluation by coordinating the report store
and client repositories with the category scorers and rollup. Contains no
scoring logic of its own.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.orm import Session

from app.domain.report_records import NormalizedRecord
from app.mappers.schema_mapper import ReportType
from app.repositories.client_repository import ClientRepository
from app.repositories.report_store_repository import ReportStoreRepository
from db.models.client import Client
from health.base import ScoreResult
from health.config import ScoringConfig, get_scoring_config
from health.rollup import rollup_client_status, weighted_total
from health.scoring import compute_client_scores

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Category sources
# ---------------------------------------------------------------------------

CATEGORY_REPORT_TYPES: dict[str, tuple[str, ...]] = {
    "tickets": (ReportType.SUPPORT_TICKETS,),
    "incidents": (ReportType.INCIDENTS,),
    "jiras": (ReportType.JIRAS,),
    "requests": (ReportType.PRODUCT_REQUESTS, ReportType.IMPLEMENTATION_REQUESTS),
}


@dataclass(frozen=True)
class ClientHealthReport:
    client_id: uuid.UUID
    client_name: str
    status: str
    scores: dict[str, ScoreResult]
    weighted_total: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "client_id": str(self.client_id),
            "client_name": self.client_name,
            "status": self.status,
            "scores": {category: result.to_dict() for category, result in self.scores.items()},
            "weighted_total": self.weighted_total,
        }


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


class ClientHealthOrchestrator:
    """Evaluates client health from the persisted report stores.

    Accepts a SQLAlchemy Session at construction time; it only reads, so
    the caller keeps control of the transaction. Each evaluate call loads
    every report store once.
    """

    def __init__(self, session: Session, config: ScoringConfig | None = None) -> None:
        self._session = session
        self._config = config or get_scoring_config()
        self._clients = ClientRepository(session)
        self._stores = ReportStoreRepository(session)

    def evaluate_client(self, client_id: uuid.UUID, now: datetime | None = None) -> ClientHealthReport | None:
        """Score one client, or return None if it does not exist."""
        client = self._clients.get(client_id)
        if client is None:
            return None
        return self._evaluate(client, self._load_records_by_category(), now or datetime.now(timezone.utc))

    def evaluate_all(self, now: datetime | None = None) -> list[ClientHealthReport]:
        """Score every active client, ordered by name."""
        records_by_category = self._load_records_by_category()
        current_time = now or datetime.now(timezone.utc)
        return [
            self._evaluate(client, records_by_category, current_time)
            for client in self._clients.list_active()
        ]

    def _load_records_by_category(self) -> dict[str, list[NormalizedRecord]]:
        records_by_category: dict[str, list[NormalizedRecord]] = {}
        for category, report_types in CATEGORY_REPORT_TYPES.items():
            records: list[NormalizedRecord] = []
            for report_type in report_types:
                store = self._stores.get(report_type)
                records.extend(record.fields for record in store.records)
            records_by_category[category] = records
        return records_by_category

    def _evaluate(
        self,
        client: Client,
        records_by_category: dict[str, list[NormalizedRecord]],
        now: datetime,
    ) -> ClientHealthReport:
        scores = compute_client_scores(client, records_by_category, self._config, now)
        status = rollup_client_status(scores, self._config)
        total = weighted_total(scores, self._config)

        logger.info(
            "Evaluated client health client=%s status=%s categories=%s",
            client.name,
            status,
            {category: result.status for category, result in scores.items()},
        )
        return ClientHealthReport(
            client_id=client.id,
            client_name=client.name,
            status=status,
            scores=scores,
            weighted_total=total,
        )
