"""
health/base.py

Abstract base for per-category health scorers.

Every category follows the same evaluation: select records, count buckets,
apply hard-Red rules, collect Amber reasons, then compute a capped weighted
score and classify it by the configured bands. Subclasses supply only the
record selection, the bucket counts, the point weights and the rule tables.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, ClassVar, Mapping, Sequence

from app.domain.report_records import NormalizedRecord
from db.base import as_utc
from health.config import ScoringConfig
from health.normalizer import RecordNormalizer

STATUS_RED = "Red"
STATUS_AMBER = "Amber"
STATUS_GREEN = "Green"

OPEN_COUNT = "open_count"

HARD_RED_SCORE = 100

NO_DATA_REASON = "No data"
RED_BAND_REASON = "Red: score threshold"
AMBER_BAND_REASON = "Amber: score threshold"
GREEN_REASON = "Green: within thresholds"


@dataclass(frozen=True)
class ScoreResult:
    """Outcome of scoring one category for one client.

    ``score`` is None only for results supplied from outside the scorers
    that carry a status alone.
    """

    status: str
    score: float | None
    reason: str
    counts: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "score": self.score,
            "reason": self.reason,
            "counts": dict(self.counts),
        }


@dataclass(frozen=True)
class ThresholdRule:
    """Fires when ``bucket`` reaches ``threshold``; a threshold of 0 disables it."""

    bucket: str
    threshold: int
    reason: str

    def fires(self, counts: Mapping[str, int]) -> bool:
        return self.threshold > 0 and counts.get(self.bucket, 0) >= self.threshold


class BaseCategoryScorer(ABC):
    """Template for category scorers.

    Subclasses declare ``CATEGORY`` and ``BUCKET_POINTS`` and implement the
    selection, counting and rule hooks. ``compute`` is shared.
    """

    CATEGORY: ClassVar[str]
    BUCKET_POINTS: ClassVar[Mapping[str, int]]

    def __init__(self) -> None:
        self._normalizer = RecordNormalizer()

    def compute(
        self,
        records: Sequence[NormalizedRecord],
        config: ScoringConfig,
        now: datetime | None = None,
    ) -> ScoreResult:
        """Score the records already matched to one client.

        Args:
            records: Matched records for this category.
            config: Scoring configuration.
            now: Reference time for ages; defaults to the current UTC time.
                A naive value is taken as UTC.

        Returns:
            A ScoreResult. An empty ``records`` yields Green "No data".
        """
        if not records:
            return ScoreResult(status=STATUS_GREEN, score=0, reason=NO_DATA_REASON)

        current_time = as_utc(now) or datetime.now(timezone.utc)
        selected = self.select_records(records, config, current_time)
        counts = self.count_buckets(selected, config, current_time)
        counts[OPEN_COUNT] = len(selected)

        red_reasons = [rule.reason for rule in self.red_rules(config) if rule.fires(counts)]
        if red_reasons:
            return ScoreResult(
                status=STATUS_RED,
                score=HARD_RED_SCORE,
                reason=red_reasons[0],
                counts=counts,
            )

        amber_reasons = [rule.reason for rule in self.amber_rules(config) if rule.fires(counts)]
        score = self.weighted_score(counts, config.caps.per_bucket)

        if amber_reasons:
            return ScoreResult(status=STATUS_AMBER, score=score, reason=amber_reasons[0], counts=counts)

        bands = config.scoring_bands
        if score >= bands.red:
            return ScoreResult(status=STATUS_RED, score=score, reason=RED_BAND_REASON, counts=counts)
        if score >= bands.amber:
            return ScoreResult(status=STATUS_AMBER, score=score, reason=AMBER_BAND_REASON, counts=counts)
        return ScoreResult(status=STATUS_GREEN, score=score, reason=GREEN_REASON, counts=counts)

    def weighted_score(self, counts: Mapping[str, int], per_bucket_cap: int) -> int:
        n = self._normalizer
        return sum(
            points * n.cap(counts.get(bucket, 0), per_bucket_cap)
            for bucket, points in self.BUCKET_POINTS.items()
        )

    def count_age_buckets(self, ages: Sequence[int | None]) -> dict[str, int]:
        """Tally ages into the over_7d/over_30d/over_60d buckets; None is skipped."""
        known = [age for age in ages if age is not None]
        return {
            "over_7d": sum(1 for age in known if age > 7),
            "over_30d": sum(1 for age in known if age > 30),
            "over_60d": sum(1 for age in known if age > 60),
        }

    def is_open(self, record: NormalizedRecord, config: ScoringConfig) -> bool:
        mapping = getattr(config.status_mapping, self.CATEGORY)
        return self._normalizer.is_open_status(record.get("ticketStatus"), mapping.closed)

    def select_records(
        self,
        records: Sequence[NormalizedRecord],
        config: ScoringConfig,
        now: datetime,
    ) -> list[NormalizedRecord]:
        """Records that contribute to the counts; open records by default."""
        return [record for record in records if self.is_open(record, config)]

    @abstractmethod
    def count_buckets(
        self,
        records: Sequence[NormalizedRecord],
        config: ScoringConfig,
        now: datetime,
    ) -> dict[str, int]:
        raise NotImplementedError("Subclasses must implement count_buckets()")

    @abstractmethod
    def red_rules(self, config: ScoringConfig) -> list[ThresholdRule]:
        raise NotImplementedError("Subclasses must implement red_rules()")

    @abstractmethod
    def amber_rules(self, config: ScoringConfig) -> list[ThresholdRule]:
        raise NotImplementedError("Subclasses must implement amber_rules()")
