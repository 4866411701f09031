"""
app/repositories/client_repository.py

Persistence helpers for the client directory.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from db.models.client import Client


class ClientRepository:
    """
    Repository for client directory lookups and inserts.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, client_id: uuid.UUID) -> Client | None:
        return self._session.get(Client, client_id)

    def list_active(self) -> list[Client]:
        stmt = select(Client).where(Client.is_active.is_(True)).order_by(Client.name)
        return list(self._session.execute(stmt).scalars().all())

    def create(self, *, name: str, aliases: Sequence[str] = ()) -> Client:
        """
        Insert a client; blank and duplicate aliases are dropped.
        """

        cleaned: list[str] = []
        for alias in aliases:
            stripped = alias.strip()
            if stripped and stripped not in cleaned:
                cleaned.append(stripped)

        client = Client(name=name.strip(), aliases=cleaned, is_active=True)
        self._session.add(client)
        self._session.flush()
        return client
