from __future__ import annotations

from datetime import datetime, timezone

import pytest

from health.normalizer import RecordNormalizer

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def n() -> RecordNormalizer:
    return RecordNormalizer()


@pytest.mark.parametrize(
    "value",
    [
        "2026-10-08 12:00",
        "2026-10-08T12:00:00Z",
        "2026-10-08T14:00:00+02:00",
        "2026-10-08",
        "10/08/2026",
        "2026/10/08",
    ],
)
def test_parse_date_accepts_export_formats(n: RecordNormalizer, value: str) -> None:
    parsed = n.parse_date(value)

    assert parsed is not None
    assert parsed.tzinfo is not None
    assert parsed.date() == datetime(2026, 10, 8).date()


@pytest.mark.parametrize("value", ["", "   ", None, "yesterday", "2026-13-45"])
def test_parse_date_returns_none_for_unusable_values(n: RecordNormalizer, value) -> None:
    assert n.parse_date(value) is None


def test_age_in_days_floors_partial_days(n: RecordNormalizer) -> None:
    assert n.age_in_days("2026-10-10 18:00", NOW) == 7
    assert n.age_in_days("2026-10-18 11:00", NOW) == 0
    assert n.age_in_days("garbage", NOW) is None


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("P1", "critical"),
        ("Critical", "critical"),
        ("p2 - urgent", "high"),
        ("HIGH", "high"),
        ("Medium", "medium"),
        ("p4", "low"),
        ("Normal", "normal"),
        ("", ""),
    ],
)
def test_normalize_priority(n: RecordNormalizer, value: str, expected: str) -> None:
    assert n.normalize_priority(value) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("P1 - Critical", "p1"),
        ("Sev P2", "p2"),
        ("medium", "p3"),
        ("Low", "p4"),
        ("Normal", ""),
        ("", ""),
    ],
)
def test_normalize_incident_severity(n: RecordNormalizer, value: str, expected: str) -> None:
    assert n.normalize_incident_severity(value) == expected


def test_is_open_status(n: RecordNormalizer) -> None:
    closed = ("Solved", "Closed")

    assert n.is_open_status("Open", closed)
    assert n.is_open_status("", closed)
    assert n.is_open_status("Escalated", closed)
    assert not n.is_open_status(" SOLVED ", closed)


def test_age_in_days_accepts_naive_reference_time(n: RecordNormalizer) -> None:
    assert n.age_in_days("2026-10-10 18:00", NOW.replace(tzinfo=None)) == 7
