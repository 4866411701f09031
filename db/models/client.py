"""
db/models/client.py

Client model: one customer organization tracked on the health dashboard.
Report records are attributed to a client by matching their organization
field against the client's name and aliases.
"""

import uuid

from sqlalchemy import Boolean, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, JSONDocument, TimestampMixin


class Client(Base, TimestampMixin):
    """
    Represents a client organization in the directory.

    aliases lists alternate organization names used by external exporters
    (e.g. a legal entity name in the ticketing tool, a project name in JIRA).
    """

    __tablename__ = "clients"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
    )

    aliases: Mapped[list[str]] = mapped_column(
        JSONDocument,
        nullable=False,
        default=list,
        comment="Alternate organization names matched case-insensitively",
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        comment="Soft-disable a client without deletion",
    )

    __table_args__ = (
        Index("ix_clients_is_active", "is_active"),
    )

    def __repr__(self) -> str:
        return f"<Client id={self.id} name={self.name!r} aliases={self.aliases!r}>"
