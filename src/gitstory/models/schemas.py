"""Pydantic models for year-in-review data."""

from datetime import date, datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TimeOfDay(str, Enum):
    """Time-of-day buckets for peak activity."""

    MORNING = "Morning"
    AFTERNOON = "Afternoon"
    EVENING = "Evening"
    LATE_NIGHT = "Late Night"


class Archetype(str, Enum):
    """Developer archetype labels."""

    PULL_REQUEST_PRO = "Pull Request Pro"
    REVIEWER = "Reviewer"
    WEEKEND_WARRIOR = "Weekend Warrior"
    NIGHT_OWL = "Night Owl"
    EARLY_BIRD = "Early Bird"
    GRID_PAINTER = "Grid Painter"
    CONSISTENT = "Consistent"
    PLANNER = "Planner"
    COMMUNITY_STAR = "Community Star"
    TINKERER = "Tinkerer"


# --- Input Models ---


class RepositoryRecord(BaseModel):
    """A repository owned by the account, as read from GitHub."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str | None = None
    url: str = ""
    stars: int = 0
    forks: int = 0
    watchers: int = 0
    size: int = 0  # KB, as reported by GitHub
    open_issues: int = 0
    language: str | None = None
    topics: list[str] = Field(default_factory=list)
    is_fork: bool = False
    is_archived: bool = False
    created_at: datetime | None = None
    pushed_at: datetime | None = None

    @field_validator("stars", "forks", "watchers", "size", "open_issues", mode="before")
    @classmethod
    def _none_to_zero(cls, value):
        return 0 if value is None else value

    @field_validator("is_fork", "is_archived", mode="before")
    @classmethod
    def _none_to_false(cls, value):
        return False if value is None else value

    @field_validator("topics", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return [] if value is None else value

    @field_validator("created_at", "pushed_at")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class DailyContribution(BaseModel):
    """Contribution count for one calendar day."""

    model_config = ConfigDict(frozen=True)

    date: date
    count: int = Field(default=0, ge=0)


class ContributionBreakdown(BaseModel):
    """Activity totals for the target year, each sourced independently."""

    model_config = ConfigDict(frozen=True)

    commits: int = Field(default=0, ge=0)
    prs: int = Field(default=0, ge=0)
    issues: int = Field(default=0, ge=0)
    reviews: int = Field(default=0, ge=0)


class CommunityStats(BaseModel):
    """Profile-level community numbers."""

    model_config = ConfigDict(frozen=True)

    followers: int = 0
    following: int = 0
    public_repos: int = 0
    total_stars: int = 0


class ReportInputs(BaseModel):
    """Everything the report is computed from, fully materialized.

    Serializable, so a fetched set of inputs can be saved and replayed.
    """

    username: str
    avatar_url: str = ""
    year: int
    followers: int = 0
    following: int = 0
    public_repos: int = 0
    repositories: list[RepositoryRecord] = Field(default_factory=list)
    contributions: list[DailyContribution] = Field(default_factory=list)
    hour_counts: dict[int, int] = Field(default_factory=dict)
    prs: int = 0
    issues: int = 0
    reviews: int = 0

    @field_validator("followers", "following", "public_repos", "prs", "issues", "reviews", mode="before")
    @classmethod
    def _none_to_zero(cls, value):
        return 0 if value is None else value


# --- Analysis Models ---


class LanguageStat(BaseModel):
    """Accumulated usage weight for one language."""

    name: str
    weight: float = 0.0
    repo_count: int = 0
    recent_count: int = 0  # Repos pushed within the target year


class VelocityPoint(BaseModel):
    """One day of the velocity series."""

    model_config = ConfigDict(frozen=True)

    date: date
    count: int


class ContributionSummary(BaseModel):
    """Aggregates over a year of daily contribution counts."""

    model_config = ConfigDict(frozen=True)

    total_commits: int = 0
    longest_streak: int = 0
    weekday_stats: list[int] = Field(default_factory=lambda: [0] * 7)  # Sunday=0
    busiest_weekday: int = Field(default=0, ge=0, le=6)
    velocity: list[VelocityPoint] = Field(default_factory=list)


class ProductivityProfile(BaseModel):
    """Peak activity hour and its time-of-day bucket."""

    model_config = ConfigDict(frozen=True)

    peak_hour: int = Field(ge=0, le=23)
    time_of_day: TimeOfDay


# --- Report Models ---


class TopLanguage(BaseModel):
    """A ranked language entry in the report."""

    model_config = ConfigDict(frozen=True)

    name: str
    weight: float
    repo_count: int
    recent_count: int = 0
    percentage: int = 0
    color: str = "#A3A3A3"


class TopRepository(BaseModel):
    """The standout repository of the year."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    stars: int = 0
    language: str
    topics: list[str] = Field(default_factory=list)
    url: str = ""
    score: float | None = None  # None for the placeholder


class YearReport(BaseModel):
    """Complete year-in-review report for one account."""

    model_config = ConfigDict(frozen=True)

    username: str
    avatar_url: str = ""
    year: int
    total_commits: int
    longest_streak: int
    busiest_weekday: int = Field(ge=0, le=6)  # Sunday=0
    top_languages: list[TopLanguage]
    top_repo: TopRepository
    velocity: list[VelocityPoint]
    weekday_stats: list[int]
    productivity: ProductivityProfile
    archetype: Archetype
    contribution_breakdown: ContributionBreakdown
    community: CommunityStats
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
