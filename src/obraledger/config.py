"""Runtime settings read from the environment."""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from obraledger.database.factories import DB_PATH_ENV_VAR
from obraledger.domain.errors import ValidationError

LOG_LEVEL_ENV_VAR = "OBRALEDGER_LOG_LEVEL"
LOG_FILE_ENV_VAR = "OBRALEDGER_LOG_FILE"
CHART_ENV_VAR = "OBRALEDGER_CHART"

DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    """Application settings.

    ``database_path`` and ``chart_path`` are None when unset; the database
    then falls back to ~/.obraledger/obraledger.db and the chart to the
    built-in construction chart.
    """

    database_path: Optional[str] = None
    log_level: str = DEFAULT_LOG_LEVEL
    log_file: Optional[str] = None
    chart_path: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "log_level", validate_log_level(self.log_level))

    @property
    def log_level_number(self) -> int:
        return getattr(logging, self.log_level)


def validate_log_level(level: str) -> str:
    """Normalize a log level name.

    Raises:
        ValidationError: If the name is not a standard logging level
    """
    normalized = (level or "").strip().upper()
    if normalized not in LOG_LEVELS:
        raise ValidationError(
            f"Invalid log level '{level}'. Allowed: {', '.join(LOG_LEVELS)}"
        )
    return normalized


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from environment variables."""
    if environ is None:
        environ = os.environ
    return Settings(
        database_path=environ.get(DB_PATH_ENV_VAR) or None,
        log_level=environ.get(LOG_LEVEL_ENV_VAR) or DEFAULT_LOG_LEVEL,
        log_file=environ.get(LOG_FILE_ENV_VAR) or None,
        chart_path=environ.get(CHART_ENV_VAR) or None,
    )
