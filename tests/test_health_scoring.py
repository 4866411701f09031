"""
tests/test_health_scoring.py

Pytest unit tests for the category scorers.

All tests pin ``now`` so record ages are deterministic.

Coverage
--------
- No-data results for every category
- Hard-Red rules short-circuit with score 100
- Amber rules keep the computed score
- Score bands when no rule fires, including per-bucket caps
- Status mapping (closed, unknown, blank)
- Field toggles (criticality, severity, jira priority)
- Incident window and open-only switches
- Date fallbacks and unparseable dates
- Client scoring across categories
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

import pytest

from health.config import DEFAULT_SCORING_CONFIG, build_scoring_config
from health.scoring import (
    compute_client_scores,
    compute_incidents_score,
    compute_jiras_score,
    compute_requests_score,
    compute_tickets_score,
)

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def days_ago(days: int) -> str:
    return (NOW - timedelta(days=days)).strftime("%Y-%m-%d %H:%M")


def ticket(**overrides: str) -> dict[str, str]:
    record = {
        "id": "T-1",
        "ticketStatus": "Open",
        "organization": "D360",
        "priority": "Low",
        "criticality": "",
        "requested": days_ago(1),
    }
    record.update(overrides)
    return record


def incident(**overrides: str) -> dict[str, str]:
    record = {
        "id": "I-1",
        "ticketStatus": "Open",
        "organization": "D360",
        "priority": "P4 - Low",
        "requested": days_ago(2),
    }
    record.update(overrides)
    return record


def jira(**overrides: str) -> dict[str, str]:
    record = {
        "id": "J-1",
        "ticketStatus": "In Progress",
        "organization": "D360",
        "priority": "Medium",
        "requested": days_ago(1),
    }
    record.update(overrides)
    return record


def request(**overrides: str) -> dict[str, str]:
    record = {
        "id": "R-1",
        "ticketStatus": "Open",
        "organization": "D360",
        "requested": days_ago(1),
    }
    record.update(overrides)
    return record


# ---------------------------------------------------------------------------
# No data
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "scorer",
    [compute_tickets_score, compute_incidents_score, compute_jiras_score, compute_requests_score],
)
def test_no_records_is_green_no_data(scorer) -> None:
    result = scorer([], DEFAULT_SCORING_CONFIG, NOW)

    assert result.status == "Green"
    assert result.score == 0
    assert result.reason == "No data"
    assert result.counts == {}


# ---------------------------------------------------------------------------
# Tickets
# ---------------------------------------------------------------------------


class TestTicketsScore:
    def test_critical_open_ticket_is_hard_red(self) -> None:
        record = ticket(criticality="Critical", priority="High")

        result = compute_tickets_score([record], DEFAULT_SCORING_CONFIG, NOW)

        assert result.status == "Red"
        assert result.score == 100
        assert result.reason == "Red: critical ticket open"
        assert result.counts["critical_open"] == 1
        assert result.counts["open_count"] == 1

    def test_ticket_older_than_sixty_days_is_red(self) -> None:
        result = compute_tickets_score([ticket(requested=days_ago(61))], DEFAULT_SCORING_CONFIG, NOW)

        assert result.status == "Red"
        assert result.reason == "Red: ticket >60d"

    def test_naive_reference_time_is_taken_as_utc(self) -> None:
        naive_now = NOW.replace(tzinfo=None)

        result = compute_tickets_score([ticket(requested=days_ago(61))], DEFAULT_SCORING_CONFIG, naive_now)

        assert result == compute_tickets_score([ticket(requested=days_ago(61))], DEFAULT_SCORING_CONFIG, NOW)
        assert result.reason == "Red: ticket >60d"

    def test_amber_rule_keeps_numeric_score(self) -> None:
        result = compute_tickets_score([ticket(requested=days_ago(40))], DEFAULT_SCORING_CONFIG, NOW)

        assert result.status == "Amber"
        assert result.reason == "Amber: ticket >30d"
        # over_7d (2) + over_30d (4)
        assert result.score == 6

    def test_two_high_priority_tickets_are_amber(self) -> None:
        records = [ticket(id=str(i), priority="High") for i in range(2)]

        result = compute_tickets_score(records, DEFAULT_SCORING_CONFIG, NOW)

        assert result.status == "Amber"
        assert result.reason == "Amber: high priority open"
        assert result.score == 8

    def test_closed_tickets_are_not_counted(self) -> None:
        records = [ticket(ticketStatus="Solved", requested=days_ago(90), criticality="Critical")]

        result = compute_tickets_score(records, DEFAULT_SCORING_CONFIG, NOW)

        assert result.status == "Green"
        assert result.reason == "Green: within thresholds"
        assert result.score == 0
        assert result.counts["open_count"] == 0

    def test_unknown_and_blank_statuses_count_as_open(self) -> None:
        records = [ticket(id="1", ticketStatus="Escalated"), ticket(id="2", ticketStatus="")]

        result = compute_tickets_score(records, DEFAULT_SCORING_CONFIG, NOW)

        assert result.counts["open_count"] == 2

    def test_closed_status_match_ignores_case(self) -> None:
        result = compute_tickets_score([ticket(ticketStatus="  closed ")], DEFAULT_SCORING_CONFIG, NOW)

        assert result.counts["open_count"] == 0

    def test_criticality_toggle_off_ignores_critical_field(self) -> None:
        config = build_scoring_config({"useFields": {"tickets": {"criticality": False}}})

        result = compute_tickets_score([ticket(criticality="Critical")], config, NOW)

        assert result.status == "Green"
        assert result.counts["critical_open"] == 0

    def test_score_bands_apply_when_no_rule_fires_and_buckets_are_capped(self) -> None:
        config = build_scoring_config(
            {
                "thresholds": {
                    "tickets": {
                        "red": {"criticalOpen": 0, "over60d": 0},
                        "amber": {"over30d": 0, "over7d": 0, "highOpen": 0},
                    }
                }
            }
        )
        records = [ticket(id=str(i), priority="High", requested=days_ago(40)) for i in range(8)]

        result = compute_tickets_score(records, config, NOW)

        # 2*5 + 4*5 + 4*5 with every bucket capped at 5
        assert result.score == 50
        assert result.status == "Amber"
        assert result.reason == "Amber: score threshold"
        assert result.counts["over_7d"] == 8

    def test_red_score_band(self) -> None:
        config = build_scoring_config(
            {
                "thresholds": {"tickets": {"red": {"over60d": 0}, "amber": {"over30d": 0, "over7d": 0}}},
                "scoringBands": {"red": 40},
            }
        )
        records = [ticket(id=str(i), requested=days_ago(70)) for i in range(4)]

        result = compute_tickets_score(records, config, NOW)

        # (2 + 4 + 6) * 4
        assert result.score == 48
        assert result.status == "Red"
        assert result.reason == "Red: score threshold"

    def test_unparseable_dates_contribute_no_age(self) -> None:
        result = compute_tickets_score([ticket(requested="not a date")], DEFAULT_SCORING_CONFIG, NOW)

        assert result.status == "Green"
        assert result.counts["over_7d"] == 0
        assert result.counts["open_count"] == 1


# ---------------------------------------------------------------------------
# Incidents
# ---------------------------------------------------------------------------


class TestIncidentsScore:
    def test_p1_incident_is_hard_red(self) -> None:
        result = compute_incidents_score([incident(priority="P1 - Critical")], DEFAULT_SCORING_CONFIG, NOW)

        assert result.status == "Red"
        assert result.score == 100
        assert result.reason == "Red: P1 incidents"
        assert result.counts["p1_count"] == 1

    def test_p2_incident_is_amber(self) -> None:
        result = compute_incidents_score([incident(priority="Sev P2")], DEFAULT_SCORING_CONFIG, NOW)

        assert result.status == "Amber"
        assert result.reason == "Amber: P2 incidents"
        assert result.score == 7

    def test_incidents_outside_window_are_excluded(self) -> None:
        result = compute_incidents_score(
            [incident(priority="P1", requested=days_ago(45))],
            DEFAULT_SCORING_CONFIG,
            NOW,
        )

        assert result.status == "Green"
        assert result.counts["open_count"] == 0

    def test_disabled_window_allows_old_incidents(self) -> None:
        config = build_scoring_config({"incidents": {"windowDays": 0}})

        result = compute_incidents_score([incident(requested=days_ago(90))], config, NOW)

        assert result.status == "Red"
        assert result.reason == "Red: incidents >60d"

    def test_closed_incidents_count_when_open_only_is_off(self) -> None:
        config = build_scoring_config({"incidents": {"countOpenOnly": False}})
        record = incident(ticketStatus="Resolved", priority="P1")

        assert compute_incidents_score([record], DEFAULT_SCORING_CONFIG, NOW).status == "Green"
        assert compute_incidents_score([record], config, NOW).status == "Red"

    def test_severity_toggle_off_skips_severity_buckets(self) -> None:
        config = build_scoring_config({"useFields": {"incidents": {"severity": False}}})

        result = compute_incidents_score([incident(priority="P1")], config, NOW)

        assert result.status == "Green"
        assert result.counts["p1_count"] == 0

    def test_reported_at_is_used_when_requested_is_blank(self) -> None:
        record = incident(requested="", reportedAt=days_ago(10))

        result = compute_incidents_score([record], DEFAULT_SCORING_CONFIG, NOW)

        assert result.counts["over_7d"] == 1
        # over_7d (4) + p4 (3)
        assert result.score == 7
        assert result.status == "Green"

    def test_two_week_old_incidents_are_amber(self) -> None:
        records = [incident(id=str(i), requested=days_ago(10)) for i in range(2)]

        result = compute_incidents_score(records, DEFAULT_SCORING_CONFIG, NOW)

        assert result.status == "Amber"
        assert result.reason == "Amber: incidents >7d"


# ---------------------------------------------------------------------------
# Jiras
# ---------------------------------------------------------------------------


class TestJirasScore:
    def test_aged_critical_issue_is_red(self) -> None:
        result = compute_jiras_score([jira(priority="Critical", requested=days_ago(20))], DEFAULT_SCORING_CONFIG, NOW)

        assert result.status == "Red"
        assert result.reason == "Red: critical >14d"

    def test_aged_high_issue_is_amber(self) -> None:
        result = compute_jiras_score([jira(priority="High", requested=days_ago(40))], DEFAULT_SCORING_CONFIG, NOW)

        assert result.status == "Amber"
        assert result.reason == "Amber: high >30d"
        # over_7d (3) + high_over_30d (4)
        assert result.score == 7

    def test_priority_toggle_off_skips_priority_buckets(self) -> None:
        config = build_scoring_config({"useFields": {"jiras": {"priority": False}}})

        result = compute_jiras_score([jira(priority="Critical", requested=days_ago(20))], config, NOW)

        assert result.status == "Green"
        assert result.counts["critical_over_14d"] == 0
        assert result.score == 3

    def test_done_issues_are_closed(self) -> None:
        result = compute_jiras_score([jira(ticketStatus="Done", priority="Critical", requested=days_ago(20))], DEFAULT_SCORING_CONFIG, NOW)

        assert result.counts["open_count"] == 0
        assert result.status == "Green"


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class TestRequestsScore:
    def test_old_request_is_red(self) -> None:
        result = compute_requests_score([request(requested=days_ago(70))], DEFAULT_SCORING_CONFIG, NOW)

        assert result.status == "Red"
        assert result.reason == "Red: requests >60d"

    def test_created_at_is_used_when_requested_is_blank(self) -> None:
        result = compute_requests_score([request(requested="", createdAt=days_ago(35))], DEFAULT_SCORING_CONFIG, NOW)

        assert result.status == "Amber"
        assert result.reason == "Amber: requests >30d"

    def test_delivered_requests_are_closed(self) -> None:
        result = compute_requests_score([request(ticketStatus="Delivered", requested=days_ago(70))], DEFAULT_SCORING_CONFIG, NOW)

        assert result.status == "Green"
        assert result.counts == {"over_7d": 0, "over_30d": 0, "over_60d": 0, "open_count": 0}


# ---------------------------------------------------------------------------
# Client scoring
# ---------------------------------------------------------------------------


@dataclass
class _Client:
    name: str
    aliases: list[str] = field(default_factory=list)


def test_compute_client_scores_matches_records_per_category() -> None:
    client = _Client(name="D360", aliases=["Data 360 Inc"])
    records_by_category = {
        "tickets": [ticket(criticality="Critical"), ticket(id="T-2", organization="Globex", requested=days_ago(90))],
        "incidents": [incident(organization="Data 360 Inc", priority="P2")],
        "jiras": [jira(organization="Globex", priority="Critical", requested=days_ago(30))],
    }

    scores = compute_client_scores(client, records_by_category, DEFAULT_SCORING_CONFIG, NOW)

    assert set(scores) == {"tickets", "incidents", "jiras", "requests"}
    assert scores["tickets"].status == "Red"
    assert scores["tickets"].counts["open_count"] == 1
    assert scores["incidents"].status == "Amber"
    assert scores["jiras"].reason == "No data"
    assert scores["requests"].reason == "No data"
