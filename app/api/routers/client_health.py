"""
app/api/routers/client_health.py

Client health endpoints backed by the persisted report stores.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.schemas.client_health import ClientHealthResponse
from db.session import get_db
from health.config import ScoringConfig, get_scoring_config
from health.orchestrator import ClientHealthOrchestrator

router = APIRouter(prefix="/clients", tags=["client-health"])


@router.get("/health", response_model=list[ClientHealthResponse])
def list_client_health(
    db: Session = Depends(get_db),
    config: ScoringConfig = Depends(get_scoring_config),
) -> list[ClientHealthResponse]:
    """
    Rolled-up health of every active client.
    """
    reports = ClientHealthOrchestrator(db, config).evaluate_all()
    return [ClientHealthResponse.from_report(report) for report in reports]


@router.get("/{client_id}/health", response_model=ClientHealthResponse)
def get_client_health(
    client_id: uuid.UUID,
    db: Session = Depends(get_db),
    config: ScoringConfig = Depends(get_scoring_config),
) -> ClientHealthResponse:
    report = ClientHealthOrchestrator(db, config).evaluate_client(client_id)
    if report is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Client {client_id} not found.",
        )
    return ClientHealthResponse.from_report(report)
