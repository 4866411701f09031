"""
health/config.py

Typed scoring configuration with documented defaults.

External configuration arrives as nested JSON (camelCase keys, every branch
optional). build_scoring_config() fills it over DEFAULT_SCORING_CONFIG one
dataclass level at a time, so a partial override of a nested branch keeps
the defaults of its siblings.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields, is_dataclass, replace
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

from app.config import get_scoring_settings

logger = logging.getLogger(__name__)

CATEGORIES: tuple[str, ...] = ("tickets", "incidents", "jiras", "requests")

ROLLUP_WORST = "worst"
ROLLUP_WEIGHTED = "weighted"


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CardToggles:
    tickets: bool = True
    incidents: bool = True
    jiras: bool = True
    requests: bool = True


@dataclass(frozen=True)
class CategoryWeights:
    tickets: float = 0.3
    incidents: float = 0.3
    jiras: float = 0.2
    requests: float = 0.2


@dataclass(frozen=True)
class StatusMapping:
    """
    Raw status texts classified as open or closed (case-insensitive).
    """

    open: tuple[str, ...] = ()
    closed: tuple[str, ...] = ()


@dataclass(frozen=True)
class StatusMappings:
    tickets: StatusMapping = StatusMapping(
        open=("New", "Open", "Pending", "On-hold"),
        closed=("Solved", "Closed"),
    )
    incidents: StatusMapping = StatusMapping(
        open=("Open", "Awaiting RCA"),
        closed=("Resolved", "Closed"),
    )
    jiras: StatusMapping = StatusMapping(
        open=("To Do", "In Progress", "Proposal"),
        closed=("Done", "Closed"),
    )
    requests: StatusMapping = StatusMapping(
        open=("Open",),
        closed=("Closed", "Delivered"),
    )


@dataclass(frozen=True)
class TicketFields:
    criticality: bool = True


@dataclass(frozen=True)
class IncidentFields:
    severity: bool = True


@dataclass(frozen=True)
class JiraFields:
    priority: bool = True


@dataclass(frozen=True)
class FieldToggles:
    tickets: TicketFields = TicketFields()
    incidents: IncidentFields = IncidentFields()
    jiras: JiraFields = JiraFields()


@dataclass(frozen=True)
class TicketRedThresholds:
    critical_open: int = 1
    over_60d: int = 1


@dataclass(frozen=True)
class TicketAmberThresholds:
    over_30d: int = 1
    over_7d: int = 3
    high_open: int = 2


@dataclass(frozen=True)
class TicketThresholds:
    red: TicketRedThresholds = TicketRedThresholds()
    amber: TicketAmberThresholds = TicketAmberThresholds()


@dataclass(frozen=True)
class JiraRedThresholds:
    critical_over_14d: int = 1


@dataclass(frozen=True)
class JiraAmberThresholds:
    high_over_30d: int = 1
    over_7d: int = 5


@dataclass(frozen=True)
class JiraThresholds:
    red: JiraRedThresholds = JiraRedThresholds()
    amber: JiraAmberThresholds = JiraAmberThresholds()


@dataclass(frozen=True)
class RequestRedThresholds:
    over_60d: int = 1


@dataclass(frozen=True)
class RequestAmberThresholds:
    over_30d: int = 1
    over_7d: int = 3


@dataclass(frozen=True)
class RequestThresholds:
    red: RequestRedThresholds = RequestRedThresholds()
    amber: RequestAmberThresholds = RequestAmberThresholds()


@dataclass(frozen=True)
class Thresholds:
    tickets: TicketThresholds = TicketThresholds()
    jiras: JiraThresholds = JiraThresholds()
    requests: RequestThresholds = RequestThresholds()


@dataclass(frozen=True)
class IncidentPriorityRed:
    p1_count: int = 1


@dataclass(frozen=True)
class IncidentPriorityAmber:
    p2_count: int = 1


@dataclass(frozen=True)
class IncidentPriorityThresholds:
    red: IncidentPriorityRed = IncidentPriorityRed()
    amber: IncidentPriorityAmber = IncidentPriorityAmber()


@dataclass(frozen=True)
class IncidentAgeRed:
    over_60d: int = 1


@dataclass(frozen=True)
class IncidentAgeAmber:
    over_30d: int = 1
    over_7d: int = 2


@dataclass(frozen=True)
class IncidentAgeThresholds:
    red: IncidentAgeRed = IncidentAgeRed()
    amber: IncidentAgeAmber = IncidentAgeAmber()


@dataclass(frozen=True)
class IncidentSettings:
    """
    Incident-specific overrides. window_days 0 disables the window.
    """

    window_days: int = 30
    count_open_only: bool = True
    priority_thresholds: IncidentPriorityThresholds = IncidentPriorityThresholds()
    age_thresholds: IncidentAgeThresholds = IncidentAgeThresholds()


@dataclass(frozen=True)
class ScoringBands:
    red: float = 70.0
    amber: float = 35.0


@dataclass(frozen=True)
class Caps:
    per_bucket: int = 5


@dataclass(frozen=True)
class ScoringConfig:
    enabled_cards: CardToggles = CardToggles()
    rollup_mode: str = field(
        default=ROLLUP_WORST,
        metadata={"choices": (ROLLUP_WORST, ROLLUP_WEIGHTED)},
    )
    weights: CategoryWeights = CategoryWeights()
    status_mapping: StatusMappings = StatusMappings()
    use_fields: FieldToggles = FieldToggles()
    thresholds: Thresholds = Thresholds()
    incidents: IncidentSettings = IncidentSettings()
    scoring_bands: ScoringBands = ScoringBands()
    caps: Caps = Caps()


DEFAULT_SCORING_CONFIG = ScoringConfig()


# ---------------------------------------------------------------------------
# Default-fill
# ---------------------------------------------------------------------------

_MISSING = object()


def build_scoring_config(overrides: Mapping[str, Any] | None = None) -> ScoringConfig:
    """
    Fill ``overrides`` over the documented defaults. Never raises.

    Keys may be camelCase or snake_case. Unknown keys are ignored; values
    of the wrong type fall back to the default for that field.
    """

    if not overrides:
        return DEFAULT_SCORING_CONFIG
    return _fill_defaults(DEFAULT_SCORING_CONFIG, overrides, path="")


def _fill_defaults(default: Any, override: Any, *, path: str) -> Any:
    if not isinstance(override, Mapping):
        if override is not None:
            logger.warning(
                "Scoring config branch %r must be an object; using defaults (got %r)",
                path or "<root>",
                override,
            )
        return default

    known_keys: set[str] = set()
    updates: dict[str, Any] = {}
    for spec in fields(default):
        field_path = f"{path}.{spec.name}" if path else spec.name
        camel_name = _camel_case(spec.name)
        known_keys.update({spec.name, camel_name})

        raw = override.get(camel_name, override.get(spec.name, _MISSING))
        if raw is _MISSING:
            continue

        current = getattr(default, spec.name)
        if is_dataclass(current):
            updates[spec.name] = _fill_defaults(current, raw, path=field_path)
        else:
            updates[spec.name] = _coerce(
                current,
                raw,
                path=field_path,
                choices=spec.metadata.get("choices"),
            )

    unknown = [key for key in override if key not in known_keys]
    if unknown:
        logger.debug("Ignoring unknown scoring config keys under %r: %s", path or "<root>", unknown)

    return replace(default, **updates) if updates else default


def _coerce(current: Any, raw: Any, *, path: str, choices: tuple[str, ...] | None) -> Any:
    if isinstance(current, bool):
        if isinstance(raw, bool):
            return raw
    elif isinstance(current, int):
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            return max(0, int(raw))
    elif isinstance(current, float):
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            return float(raw)
    elif isinstance(current, str):
        if isinstance(raw, str) and (choices is None or raw.strip().lower() in choices):
            return raw.strip().lower() if choices else raw
    elif isinstance(current, tuple):
        if isinstance(raw, (list, tuple)) and all(isinstance(item, str) for item in raw):
            return tuple(item.strip() for item in raw if item.strip())

    logger.warning("Invalid scoring config value at %r: %r; using default %r", path, raw, current)
    return current


def _camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def load_scoring_config(path: str | Path) -> ScoringConfig:
    """
    Load a JSON scoring config file and fill it over the defaults.
    """

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Scoring config file not found: {config_path}")

    try:
        raw_data = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid scoring config JSON in {config_path}: {exc}") from exc

    if not isinstance(raw_data, dict):
        raise ValueError("Invalid scoring config: top-level value must be an object.")
    return build_scoring_config(raw_data)


@lru_cache(maxsize=1)
def get_scoring_config() -> ScoringConfig:
    """
    Return the cached scoring config from SCORING_CONFIG_PATH, or the defaults.
    """

    settings = get_scoring_settings()
    if settings.config_path is None:
        return DEFAULT_SCORING_CONFIG
    return load_scoring_config(settings.config_path)
