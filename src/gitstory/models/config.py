"""Scoring configuration with documented defaults."""

import json
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class ConfigError(Exception):
    """Raised when a scoring configuration file cannot be loaded."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid config {path}: {reason}")


class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class LanguageWeights(_Section):
    """Weights for the language diversity scorer."""

    base_weight: float = 1
    recent_activity_bonus: float = 1  # Pushed within the target year
    diversity_threshold: int = 3
    diversity_bonus: float = 0.5  # Per repo beyond the threshold


class RepoWeights(_Section):
    """Weights and caps for the repository quality scorer."""

    stars_log_multiplier: float = 12
    stars_max: float = 35
    forks_log_multiplier: float = 6
    forks_max: float = 20
    recency_points: float = 0  # Disabled by default
    original_work: float = 20
    has_description: float = 2
    description_min_length: int = 10
    has_topics: float = 2
    has_language: float = 3
    watchers_multiplier: float = 0.5
    watchers_max: float = 5
    archived_penalty: float = -20
    size_log_multiplier: float = 3
    size_max: float = 15
    open_issues_log_multiplier: float = 4
    open_issues_max: float = 8
    created_this_year_bonus: float = 10


class ProductivityBuckets(_Section):
    """Hour boundaries for the time-of-day buckets.

    Morning is [morning_start, afternoon_start), Afternoon is
    [afternoon_start, evening_start), Evening is [evening_start,
    late_night_start) and everything else is Late Night.
    """

    default_peak_hour: int = Field(default=14, ge=0, le=23)
    morning_start: int = Field(default=5, ge=0, le=23)
    afternoon_start: int = Field(default=12, ge=0, le=23)
    evening_start: int = Field(default=17, ge=0, le=23)
    late_night_start: int = Field(default=22, ge=0, le=24)


class ArchetypeThresholds(_Section):
    """Thresholds for the archetype decision list."""

    pr_ratio: float = 0.20
    min_prs: int = 20
    review_ratio: float = 0.10
    min_reviews: int = 10
    weekend_ratio: float = 0.35
    pattern_min_commits: int = 50  # Weekend / night / morning patterns
    grid_painter_commits: int = 1200
    consistent_commits: int = 400
    issue_ratio: float = 0.15
    community_followers: int = 500
    community_stars: int = 1000


class ScoringConfig(_Section):
    """All tunable scoring parameters.

    Every field has a default, so ``ScoringConfig()`` gives the standard
    behaviour. Partial overrides are accepted, e.g.
    ``ScoringConfig(repo={"stars_max": 30})``.
    """

    target_year: int = 2025
    timezone: str = "UTC"  # Used to bucket event timestamps into hours
    top_languages: int = Field(default=3, ge=1)
    language: LanguageWeights = Field(default_factory=LanguageWeights)
    repo: RepoWeights = Field(default_factory=RepoWeights)
    productivity: ProductivityBuckets = Field(default_factory=ProductivityBuckets)
    archetype: ArchetypeThresholds = Field(default_factory=ArchetypeThresholds)

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        if value != "UTC":
            try:
                ZoneInfo(value)
            except (ZoneInfoNotFoundError, ValueError) as e:
                raise ValueError(f"Unknown timezone: {value}") from e
        return value


def load_config(path: Path | None = None, **overrides) -> ScoringConfig:
    """Load a scoring configuration.

    Args:
        path: JSON file with (partial) overrides. Defaults are used when None.
        **overrides: Top-level fields applied on top of the file, e.g.
            ``target_year=2024``. None values are ignored.

    Returns:
        Validated ScoringConfig.

    Raises:
        ConfigError: If the file is missing, not JSON, or fails validation.
    """
    data: dict = {}
    if path is not None:
        try:
            data = json.loads(path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(path, str(e)) from e
        if not isinstance(data, dict):
            raise ConfigError(path, "top-level value must be an object")

    data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return ScoringConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(path or Path("<overrides>"), str(e)) from e
