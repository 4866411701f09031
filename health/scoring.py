"""
health/scoring.py

Category scorers for tickets, incidents, jiras and requests.
Each one implements BaseCategoryScorer with its own buckets and rules.
"""

from __future__ import annotations

from datetime import datetime
from typing import Mapping, Sequence

from app.domain.report_records import NormalizedRecord
from health.base import BaseCategoryScorer, ScoreResult, ThresholdRule
from health.config import CATEGORIES, ScoringConfig
from health.matcher import ClientLike, filter_client_records


class TicketsScorer(BaseCategoryScorer):
    """Support tickets: age, high priority and critical criticality."""

    CATEGORY = "tickets"
    BUCKET_POINTS = {
        "over_7d": 2,
        "over_30d": 4,
        "over_60d": 6,
        "high_open": 4,
        "critical_open": 6,
    }

    def count_buckets(
        self,
        records: Sequence[NormalizedRecord],
        config: ScoringConfig,
        now: datetime,
    ) -> dict[str, int]:
        n = self._normalizer
        counts = self.count_age_buckets([n.age_in_days(record.get("requested"), now) for record in records])
        counts["high_open"] = sum(1 for record in records if n.normalize_priority(record.get("priority")) == "high")
        counts["critical_open"] = 0
        if config.use_fields.tickets.criticality:
            counts["critical_open"] = sum(
                1 for record in records if n.normalize_priority(record.get("criticality")) == "critical"
            )
        return counts

    def red_rules(self, config: ScoringConfig) -> list[ThresholdRule]:
        red = config.thresholds.tickets.red
        return [
            ThresholdRule("critical_open", red.critical_open, "Red: critical ticket open"),
            ThresholdRule("over_60d", red.over_60d, "Red: ticket >60d"),
        ]

    def amber_rules(self, config: ScoringConfig) -> list[ThresholdRule]:
        amber = config.thresholds.tickets.amber
        return [
            ThresholdRule("over_30d", amber.over_30d, "Amber: ticket >30d"),
            ThresholdRule("over_7d", amber.over_7d, "Amber: tickets >7d"),
            ThresholdRule("high_open", amber.high_open, "Amber: high priority open"),
        ]


class IncidentsScorer(BaseCategoryScorer):
    """Incidents: severity buckets and ages inside a recent window."""

    CATEGORY = "incidents"
    BUCKET_POINTS = {
        "over_7d": 4,
        "over_30d": 7,
        "over_60d": 9,
        "p1_count": 10,
        "p2_count": 7,
        "p3_count": 5,
        "p4_count": 3,
    }

    def _incident_date(self, record: NormalizedRecord) -> str:
        return record.get("requested") or record.get("reportedAt", "")

    def select_records(
        self,
        records: Sequence[NormalizedRecord],
        config: ScoringConfig,
        now: datetime,
    ) -> list[NormalizedRecord]:
        settings = config.incidents
        selected: list[NormalizedRecord] = []
        for record in records:
            if settings.count_open_only and not self.is_open(record, config):
                continue
            if settings.window_days:
                age = self._normalizer.age_in_days(self._incident_date(record), now)
                if age is not None and age > settings.window_days:
                    continue
            selected.append(record)
        return selected

    def count_buckets(
        self,
        records: Sequence[NormalizedRecord],
        config: ScoringConfig,
        now: datetime,
    ) -> dict[str, int]:
        n = self._normalizer
        counts = self.count_age_buckets([n.age_in_days(self._incident_date(record), now) for record in records])

        severities = {"p1": 0, "p2": 0, "p3": 0, "p4": 0}
        if config.use_fields.incidents.severity:
            for record in records:
                severity = n.normalize_incident_severity(record.get("priority"))
                if severity:
                    severities[severity] += 1
        counts.update({f"{level}_count": total for level, total in severities.items()})
        return counts

    def red_rules(self, config: ScoringConfig) -> list[ThresholdRule]:
        settings = config.incidents
        return [
            ThresholdRule("p1_count", settings.priority_thresholds.red.p1_count, "Red: P1 incidents"),
            ThresholdRule("over_60d", settings.age_thresholds.red.over_60d, "Red: incidents >60d"),
        ]

    def amber_rules(self, config: ScoringConfig) -> list[ThresholdRule]:
        settings = config.incidents
        return [
            ThresholdRule("p2_count", settings.priority_thresholds.amber.p2_count, "Amber: P2 incidents"),
            ThresholdRule("over_7d", settings.age_thresholds.amber.over_7d, "Amber: incidents >7d"),
            ThresholdRule("over_30d", settings.age_thresholds.amber.over_30d, "Amber: incidents >30d"),
        ]


class JirasScorer(BaseCategoryScorer):
    """Jira issues: open age plus aged critical and high priority issues."""

    CATEGORY = "jiras"
    BUCKET_POINTS = {
        "over_7d": 3,
        "critical_over_14d": 7,
        "high_over_30d": 4,
    }

    def count_buckets(
        self,
        records: Sequence[NormalizedRecord],
        config: ScoringConfig,
        now: datetime,
    ) -> dict[str, int]:
        n = self._normalizer
        counts = {"over_7d": 0, "critical_over_14d": 0, "high_over_30d": 0}
        for record in records:
            age = n.age_in_days(record.get("requested"), now)
            if age is None:
                continue
            if age > 7:
                counts["over_7d"] += 1
            if not config.use_fields.jiras.priority:
                continue
            priority = n.normalize_priority(record.get("priority"))
            if priority == "critical" and age > 14:
                counts["critical_over_14d"] += 1
            elif priority == "high" and age > 30:
                counts["high_over_30d"] += 1
        return counts

    def red_rules(self, config: ScoringConfig) -> list[ThresholdRule]:
        red = config.thresholds.jiras.red
        return [ThresholdRule("critical_over_14d", red.critical_over_14d, "Red: critical >14d")]

    def amber_rules(self, config: ScoringConfig) -> list[ThresholdRule]:
        amber = config.thresholds.jiras.amber
        return [
            ThresholdRule("high_over_30d", amber.high_over_30d, "Amber: high >30d"),
            ThresholdRule("over_7d", amber.over_7d, "Amber: open >7d"),
        ]


class RequestsScorer(BaseCategoryScorer):
    """Product and implementation requests: open age only."""

    CATEGORY = "requests"
    BUCKET_POINTS = {
        "over_7d": 2,
        "over_30d": 4,
        "over_60d": 6,
    }

    def count_buckets(
        self,
        records: Sequence[NormalizedRecord],
        config: ScoringConfig,
        now: datetime,
    ) -> dict[str, int]:
        n = self._normalizer
        return self.count_age_buckets(
            [
                n.age_in_days(
                    record.get("requested") or record.get("createdAt") or record.get("reportedAt"),
                    now,
                )
                for record in records
            ]
        )

    def red_rules(self, config: ScoringConfig) -> list[ThresholdRule]:
        red = config.thresholds.requests.red
        return [ThresholdRule("over_60d", red.over_60d, "Red: requests >60d")]

    def amber_rules(self, config: ScoringConfig) -> list[ThresholdRule]:
        amber = config.thresholds.requests.amber
        return [
            ThresholdRule("over_30d", amber.over_30d, "Amber: requests >30d"),
            ThresholdRule("over_7d", amber.over_7d, "Amber: requests >7d"),
        ]


CATEGORY_SCORERS: dict[str, BaseCategoryScorer] = {
    "tickets": TicketsScorer(),
    "incidents": IncidentsScorer(),
    "jiras": JirasScorer(),
    "requests": RequestsScorer(),
}


def compute_tickets_score(
    records: Sequence[NormalizedRecord],
    config: ScoringConfig,
    now: datetime | None = None,
) -> ScoreResult:
    return CATEGORY_SCORERS["tickets"].compute(records, config, now)


def compute_incidents_score(
    records: Sequence[NormalizedRecord],
    config: ScoringConfig,
    now: datetime | None = None,
) -> ScoreResult:
    return CATEGORY_SCORERS["incidents"].compute(records, config, now)


def compute_jiras_score(
    records: Sequence[NormalizedRecord],
    config: ScoringConfig,
    now: datetime | None = None,
) -> ScoreResult:
    return CATEGORY_SCORERS["jiras"].compute(records, config, now)


def compute_requests_score(
    records: Sequence[NormalizedRecord],
    config: ScoringConfig,
    now: datetime | None = None,
) -> ScoreResult:
    return CATEGORY_SCORERS["requests"].compute(records, config, now)


def compute_client_scores(
    client: ClientLike,
    records_by_category: Mapping[str, Sequence[NormalizedRecord]],
    config: ScoringConfig,
    now: datetime | None = None,
) -> dict[str, ScoreResult]:
    """Match each category's records to ``client`` and score all four categories.

    Categories absent from ``records_by_category`` score as "No data".
    """
    return {
        category: CATEGORY_SCORERS[category].compute(
            filter_client_records(records_by_category.get(category, ()), client),
            config,
            now,
        )
        for category in CATEGORIES
    }
