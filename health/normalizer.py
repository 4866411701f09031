"""
health/normalizer.py

Deterministic text, date and status normalization for health scoring inputs.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable

from db.base import as_utc


SECONDS_PER_DAY = 86400

# Export formats seen in support-tool CSVs, tried after ISO-8601.
_FALLBACK_DATE_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y",
)

_PRIORITY_LEVELS: tuple[tuple[str, str, str], ...] = (
    ("p1", "critical", "critical"),
    ("p2", "high", "high"),
    ("p3", "medium", "medium"),
    ("p4", "low", "low"),
)

_SEVERITY_LEVELS: tuple[tuple[str, str, str], ...] = (
    ("p1", "critical", "p1"),
    ("p2", "high", "p2"),
    ("p3", "medium", "p3"),
    ("p4", "low", "p4"),
)


class RecordNormalizer:
    """Provides stateless normalization methods for normalized report records.

    All methods are deterministic given their inputs; ``now`` is always
    passed explicitly so callers control the clock.
    """

    def normalize_text(self, value: object) -> str:
        """Return ``value`` as trimmed lower-case text ("" for None)."""
        if value is None:
            return ""
        return str(value).strip().lower()

    def parse_date(self, value: str | None) -> datetime | None:
        """Parse an exported timestamp.

        ISO-8601 is tried first (a trailing ``Z`` is accepted), then the
        common export formats. Naive values are taken as UTC.

        Returns:
            An aware datetime, or None if ``value`` is blank or unparseable.
        """
        if not value:
            return None
        text = value.strip()
        if not text:
            return None

        parsed: datetime | None = None
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            for date_format in _FALLBACK_DATE_FORMATS:
                try:
                    parsed = datetime.strptime(text, date_format)
                    break
                except ValueError:
                    continue

        if parsed is None:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed

    def age_in_days(self, value: str | None, now: datetime) -> int | None:
        """Whole days elapsed between ``value`` and ``now`` (floored); a naive ``now`` is UTC.

        Returns:
            The age in days, or None if the date cannot be parsed.
        """
        parsed = self.parse_date(value)
        if parsed is None:
            return None
        return int((as_utc(now) - parsed).total_seconds() // SECONDS_PER_DAY)

    def is_open_status(self, status: str | None, closed_statuses: Iterable[str]) -> bool:
        """Classify a raw status text.

        A blank status is open. A match in ``closed_statuses`` is closed.
        Anything else, including statuses missing from the open list, is open.
        """
        normalized = self.normalize_text(status)
        if not normalized:
            return True
        if any(self.normalize_text(item) == normalized for item in closed_statuses):
            return False
        # Unknown statuses count as open.
        return True

    def normalize_priority(self, value: str | None) -> str:
        """Map a priority label to critical/high/medium/low.

        ``p1..p4`` prefixes and the level words are recognized; any other
        non-blank text is returned normalized.
        """
        normalized = self.normalize_text(value)
        if not normalized:
            return ""
        for prefix, word, level in _PRIORITY_LEVELS:
            if normalized.startswith(prefix) or word in normalized:
                return level
        return normalized

    def normalize_incident_severity(self, value: str | None) -> str:
        """Map an incident severity label to ``p1``..``p4``, or "" if unknown."""
        normalized = self.normalize_text(value)
        if not normalized:
            return ""
        for token, word, level in _SEVERITY_LEVELS:
            if token in normalized or word in normalized:
                return level
        return ""

    def cap(self, value: int, limit: int) -> int:
        """Clamp a bucket count to ``limit``."""
        return min(value, limit)
