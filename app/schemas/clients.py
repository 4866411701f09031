"""
app/schemas/clients.py

Request and response schemas for the client directory.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class ClientCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    aliases: list[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("name must not be blank")
        return stripped


class ClientResponse(BaseModel):
    id: uuid.UUID
    name: str
    aliases: list[str]
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}
