"""
app/schemas/client_health.py

Response schemas for client health endpoints.
"""

from __future__ import annotations

import uuid

from pydantic import BaseModel, Field

from health.orchestrator import ClientHealthReport


class CategoryScoreResponse(BaseModel):
    status: str
    score: float | None = None
    reason: str
    counts: dict[str, int] = Field(default_factory=dict)


class ClientHealthResponse(BaseModel):
    """
    API response model for one client's rolled-up health.
    """

    client_id: uuid.UUID
    client_name: str
    status: str
    weighted_total: float
    scores: dict[str, CategoryScoreResponse] = Field(default_factory=dict)

    @classmethod
    def from_report(cls, report: ClientHealthReport) -> ClientHealthResponse:
        return cls(
            client_id=report.client_id,
            client_name=report.client_name,
            status=report.status,
            weighted_total=report.weighted_total,
            scores={
                category: CategoryScoreResponse(**result.to_dict())
                for category, result in report.scores.items()
            },
        )
