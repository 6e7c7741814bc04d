"""Shared fixtures for gitstory tests."""

from datetime import date, datetime, timedelta, timezone

import pytest

from gitstory.models.schemas import DailyContribution, RepositoryRecord


def make_repo(**overrides) -> RepositoryRecord:
    """A fork with no signals at all, so every score term starts at 0."""
    fields = {
        "name": "repo",
        "is_fork": True,
    }
    fields.update(overrides)
    return RepositoryRecord(**fields)


def make_days(counts: list[int], start: date = date(2025, 1, 1)) -> list[DailyContribution]:
    return [DailyContribution(date=start + timedelta(days=i), count=c) for i, c in enumerate(counts)]


IN_2025 = datetime(2025, 6, 1, tzinfo=timezone.utc)
IN_2024 = datetime(2024, 6, 1, tzinfo=timezone.utc)


@pytest.fixture
def sample_repos() -> list[RepositoryRecord]:
    return [
        RepositoryRecord(
            name="toolkit",
            description="A toolkit for building things quickly",
            url="https://github.com/octo/toolkit",
            stars=120,
            forks=14,
            watchers=8,
            size=2048,
            open_issues=3,
            language="Python",
            topics=["cli"],
            created_at=IN_2024,
            pushed_at=IN_2025,
        ),
        RepositoryRecord(
            name="site",
            description="Personal site",
            stars=2,
            size=300,
            language="TypeScript",
            created_at=IN_2025,
            pushed_at=IN_2025,
        ),
        RepositoryRecord(
            name="upstream-fork",
            stars=5000,
            forks=900,
            language="Go",
            is_fork=True,
            pushed_at=IN_2024,
        ),
        RepositoryRecord(
            name="old-experiment",
            language="Python",
            is_archived=True,
            created_at=IN_2024,
            pushed_at=IN_2024,
        ),
    ]


class StubFetcher:
    """In-memory stand-in for GitHubFetcher."""

    def __init__(
        self,
        user: dict | None = None,
        repos: list[RepositoryRecord] | None = None,
        days: list[DailyContribution] | None = None,
        timestamps: list[datetime] | None = None,
        counts: tuple[int, int, int] = (0, 0, 0),
        error: Exception | None = None,
    ) -> None:
        self.user = user if user is not None else {"login": "octo", "followers": 12, "following": 3}
        self.repos = repos or []
        self.days = days or []
        self.timestamps = timestamps or []
        self.counts = counts
        self.error = error
        self.years: list[int] = []

    async def fetch_user(self, username):
        if self.error is not None:
            raise self.error
        return self.user

    async def fetch_repositories(self, username):
        return self.repos

    async def fetch_contributions(self, username, year):
        self.years.append(year)
        return self.days

    async def fetch_event_timestamps(self, username):
        return self.timestamps

    async def fetch_activity_counts(self, username, year):
        return self.counts
