"""
health/matcher.py

Client-to-record matching on the organization field.

A record's organization may list several clients separated by commas. The
record matches when any listed name equals the client's name or one of its
aliases, ignoring case and surrounding whitespace. There is no fuzzy matching.
"""

from __future__ import annotations

from typing import Iterable, Protocol, Sequence

from app.domain.report_records import NormalizedRecord
from health.normalizer import RecordNormalizer

ORGANIZATION_FIELD = "organization"

_normalizer = RecordNormalizer()


class ClientLike(Protocol):
    name: str
    aliases: Sequence[str] | None


def client_candidate_names(client: ClientLike) -> set[str]:
    """Normalized, non-blank name and aliases of ``client``."""
    names = [client.name, *(client.aliases or [])]
    return {
        normalized
        for normalized in (_normalizer.normalize_text(name) for name in names)
        if normalized
    }


def matches_client(record_organization: str | None, client: ClientLike) -> bool:
    if not record_organization:
        return False

    candidates = client_candidate_names(client)
    if not candidates:
        return False

    for organization in record_organization.split(","):
        normalized = _normalizer.normalize_text(organization)
        if normalized and normalized in candidates:
            return True
    return False


def filter_client_records(
    records: Iterable[NormalizedRecord],
    client: ClientLike,
) -> list[NormalizedRecord]:
    """Records whose organization matches ``client``, in input order."""
    return [
        record
        for record in records
        if matches_client(record.get(ORGANIZATION_FIELD, ""), client)
    ]
