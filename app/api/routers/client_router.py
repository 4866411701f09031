"""
app/api/routers/client_router.py

Client directory endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.repositories.client_repository import ClientRepository
from app.schemas.clients import ClientCreateRequest, ClientResponse
from db.session import get_db

router = APIRouter(prefix="/clients", tags=["clients"])


@router.post(
    "",
    response_model=ClientResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_client(
    body: ClientCreateRequest,
    db: Session = Depends(get_db),
) -> ClientResponse:
    """
    Create a new client record.

    Raises HTTP 409 if a client with the same name already exists.
    """
    try:
        client = ClientRepository(db).create(name=body.name, aliases=body.aliases)
        db.commit()
        db.refresh(client)
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"A client with name {body.name!r} already exists.",
        )
    return ClientResponse.model_validate(client)


@router.get("", response_model=list[ClientResponse])
def list_clients(db: Session = Depends(get_db)) -> list[ClientResponse]:
    return [ClientResponse.model_validate(client) for client in ClientRepository(db).list_active()]
