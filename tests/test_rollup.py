from __future__ import annotations

import pytest

from health.base import ScoreResult
from health.config import DEFAULT_SCORING_CONFIG, build_scoring_config
from health.rollup import rollup_client_status, weighted_total

WEIGHTED = build_scoring_config({"rollupMode": "weighted"})


def _scores(tickets: float | None, status: str = "Green") -> dict[str, ScoreResult]:
    return {
        "tickets": ScoreResult(status=status, score=tickets, reason=""),
        "incidents": ScoreResult(status="Green", score=0, reason=""),
        "jiras": ScoreResult(status="Green", score=0, reason=""),
        "requests": ScoreResult(status="Green", score=0, reason=""),
    }


class TestWorstRollup:
    def test_any_red_is_red(self) -> None:
        scores = _scores(100, status="Red")

        assert rollup_client_status(scores, DEFAULT_SCORING_CONFIG) == "Red"

    def test_amber_without_red_is_amber(self) -> None:
        assert rollup_client_status(_scores(10, status="Amber"), DEFAULT_SCORING_CONFIG) == "Amber"

    def test_all_green_is_green(self) -> None:
        assert rollup_client_status(_scores(0), DEFAULT_SCORING_CONFIG) == "Green"

    def test_disabled_cards_are_ignored(self) -> None:
        config = build_scoring_config({"enabledCards": {"tickets": False}})

        assert rollup_client_status(_scores(100, status="Red"), config) == "Green"

    def test_no_enabled_cards_is_green(self) -> None:
        config = build_scoring_config(
            {"enabledCards": {"tickets": False, "incidents": False, "jiras": False, "requests": False}}
        )

        assert rollup_client_status(_scores(100, status="Red"), config) == "Green"


class TestWeightedRollup:
    def test_total_of_twelve_is_green(self) -> None:
        scores = _scores(40)

        assert weighted_total(scores, WEIGHTED) == pytest.approx(12.0)
        assert rollup_client_status(scores, WEIGHTED) == "Green"

    def test_total_of_seventy_five_is_red(self) -> None:
        scores = _scores(250)

        assert weighted_total(scores, WEIGHTED) == pytest.approx(75.0)
        assert rollup_client_status(scores, WEIGHTED) == "Red"

    def test_amber_band(self) -> None:
        assert rollup_client_status(_scores(150), WEIGHTED) == "Amber"

    def test_status_stands_in_for_missing_score(self) -> None:
        scores = _scores(None, status="Red")

        # Red counts as 100: 0.3 * 100
        assert weighted_total(scores, WEIGHTED) == pytest.approx(30.0)
        assert rollup_client_status(scores, WEIGHTED) == "Green"

    def test_disabled_cards_do_not_contribute(self) -> None:
        config = build_scoring_config({"rollupMode": "weighted", "enabledCards": {"tickets": False}})

        assert weighted_total(_scores(250), config) == 0
        assert rollup_client_status(_scores(250), config) == "Green"

    def test_unknown_category_has_zero_weight(self) -> None:
        scores = {"escalations": ScoreResult(status="Red", score=100, reason="")}

        assert rollup_client_status(scores, WEIGHTED) == "Green"
