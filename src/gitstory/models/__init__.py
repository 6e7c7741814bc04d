"""Data models and schemas."""

from gitstory.models.config import ConfigError, ScoringConfig, load_config
from gitstory.models.schemas import (
    Archetype,
    ReportInputs,
    RepositoryRecord,
    TimeOfDay,
    YearReport,
)

__all__ = [
    "Archetype",
    "ConfigError",
    "ReportInputs",
    "RepositoryRecord",
    "ScoringConfig",
    "TimeOfDay",
    "YearReport",
    "load_config",
]
