"""
health/rollup.py

Combines per-category results into one client status.
"""

from __future__ import annotations

from typing import Mapping

from health.base import STATUS_AMBER, STATUS_GREEN, STATUS_RED, ScoreResult
from health.config import ROLLUP_WEIGHTED, ScoringConfig

# Stand-in scores for results that carry a status but no numeric score.
STATUS_FALLBACK_SCORES: dict[str, float] = {
    STATUS_RED: 100.0,
    STATUS_AMBER: 55.0,
    STATUS_GREEN: 0.0,
}


def _enabled_scores(scores: Mapping[str, ScoreResult], config: ScoringConfig) -> dict[str, ScoreResult]:
    return {
        category: result
        for category, result in scores.items()
        if getattr(config.enabled_cards, category, False)
    }


def rollup_worst(scores: Mapping[str, ScoreResult], config: ScoringConfig) -> str:
    statuses = {result.status for result in _enabled_scores(scores, config).values()}
    if STATUS_RED in statuses:
        return STATUS_RED
    if STATUS_AMBER in statuses:
        return STATUS_AMBER
    return STATUS_GREEN


def weighted_total(scores: Mapping[str, ScoreResult], config: ScoringConfig) -> float:
    """Sum of weight x score over enabled categories; unknown weights count as 0."""
    total = 0.0
    for category, result in _enabled_scores(scores, config).items():
        weight = getattr(config.weights, category, 0.0)
        score = result.score if result.score is not None else STATUS_FALLBACK_SCORES.get(result.status, 0.0)
        total += weight * score
    return total


def rollup_weighted(scores: Mapping[str, ScoreResult], config: ScoringConfig) -> str:
    if not _enabled_scores(scores, config):
        return STATUS_GREEN

    total = weighted_total(scores, config)
    if total >= config.scoring_bands.red:
        return STATUS_RED
    if total >= config.scoring_bands.amber:
        return STATUS_AMBER
    return STATUS_GREEN


def rollup_client_status(scores: Mapping[str, ScoreResult], config: ScoringConfig) -> str:
    """Client status under ``config.rollup_mode`` ("worst" unless "weighted")."""
    if config.rollup_mode == ROLLUP_WEIGHTED:
        return rollup_weighted(scores, config)
    return rollup_worst(scores, config)
