"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


@dataclass(frozen=True)
class ReportImportSettings:
    """
    Runtime settings for report CSV imports.
    """

    max_validation_errors: int = 500
    log_validation_errors: bool = True


@dataclass(frozen=True)
class ScoringSettings:
    """
    Location of the JSON scoring configuration; None means built-in defaults.
    """

    config_path: str | None = None


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "INFO"


@lru_cache(maxsize=1)
def get_report_import_settings() -> ReportImportSettings:
    """
    Return cached report import settings from environment variables.
    """

    return ReportImportSettings(
        max_validation_errors=max(1, _get_int_env("REPORT_IMPORT_MAX_VALIDATION_ERRORS", 500)),
        log_validation_errors=_get_bool_env("REPORT_IMPORT_LOG_VALIDATION_ERRORS", True),
    )


@lru_cache(maxsize=1)
def get_scoring_settings() -> ScoringSettings:
    """
    Return cached scoring settings from environment variables.
    """

    return ScoringSettings(config_path=_get_optional_str_env("SCORING_CONFIG_PATH"))


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    return LoggingSettings(level=_get_str_env("LOG_LEVEL", "INFO").upper())
