"""Score calculators for repositories and languages."""

import math
from datetime import datetime, timezone

from gitstory.models.config import ScoringConfig
from gitstory.models.schemas import LanguageStat, RepositoryRecord


def within_year(timestamp: datetime | None, year: int) -> bool:
    """Check whether a timestamp falls inside a calendar year (UTC)."""
    if timestamp is None:
        return False
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    start = datetime(year, 1, 1, tzinfo=timezone.utc)
    end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    return start <= timestamp < end


class Scorer:
    """Scores repositories and weights languages for a target year.

    Repository score (each term capped on its own, then summed):
    - Stars: log10(stars + 1) * 12, max 35
    - Forks: log10(forks + 1) * 6, max 20
    - Recency: fixed bonus if pushed in the target year (off by default)
    - Original work: +20 if not a fork
    - Description (> 10 chars): +2
    - Topics: +2
    - Primary language: +3
    - Watchers: watchers * 0.5, max 5
    - Archived: -20
    - Size: log10(size) * 3, max 15
    - Open issues: log10(issues + 1) * 4, max 8
    - Created in the target year: +10
    """

    def __init__(self, config: ScoringConfig | None = None) -> None:
        self.config = config or ScoringConfig()

    @property
    def year(self) -> int:
        return self.config.target_year

    def score_repo(self, repo: RepositoryRecord) -> float:
        """Calculate the quality score of a single repository.

        Args:
            repo: Repository record.

        Returns:
            Composite score. Can be negative for archived forks.
        """
        weights = self.config.repo
        score = 0.0

        # Popularity (logarithmic so huge repos don't dominate)
        score += min(math.log10(repo.stars + 1) * weights.stars_log_multiplier, weights.stars_max)
        score += min(math.log10(repo.forks + 1) * weights.forks_log_multiplier, weights.forks_max)

        if weights.recency_points > 0 and within_year(repo.pushed_at, self.year):
            score += weights.recency_points

        if not repo.is_fork:
            score += weights.original_work

        if repo.description and len(repo.description.strip()) > weights.description_min_length:
            score += weights.has_description

        if repo.topics:
            score += weights.has_topics

        if repo.language:
            score += weights.has_language

        score += min(repo.watchers * weights.watchers_multiplier, weights.watchers_max)

        if repo.is_archived:
            score += weights.archived_penalty

        if repo.size > 0:
            score += min(math.log10(repo.size) * weights.size_log_multiplier, weights.size_max)

        if repo.open_issues > 0:
            score += min(
                math.log10(repo.open_issues + 1) * weights.open_issues_log_multiplier,
                weights.open_issues_max,
            )

        if within_year(repo.created_at, self.year):
            score += weights.created_this_year_bonus

        return score

    def rank_repos(self, repos: list[RepositoryRecord]) -> list[tuple[RepositoryRecord, float]]:
        """Score all repositories, best first (input order kept on ties)."""
        scored = [(repo, self.score_repo(repo)) for repo in repos]
        return sorted(scored, key=lambda pair: pair[1], reverse=True)

    def select_top_repo(
        self, repos: list[RepositoryRecord]
    ) -> tuple[RepositoryRecord, float] | None:
        """Pick the highest-scoring repository.

        Ties resolve to the first repository in input order.

        Returns:
            (repository, score), or None if there are no repositories.
        """
        best: tuple[RepositoryRecord, float] | None = None
        for repo in repos:
            score = self.score_repo(repo)
            if best is None or score > best[1]:
                best = (repo, score)
        return best

    def calculate_language_scores(self, repos: list[RepositoryRecord]) -> list[LanguageStat]:
        """Accumulate per-language weight across repositories.

        Forks and repositories without a primary language are skipped.
        Each counted repo adds the base weight, plus the recent-activity
        bonus if it was pushed in the target year. Languages used in at
        least ``diversity_threshold`` repos then get ``diversity_bonus``
        per repo beyond the threshold.

        Returns:
            Language stats in order of first sighting.
        """
        weights = self.config.language
        stats: dict[str, LanguageStat] = {}

        for repo in repos:
            if repo.is_fork or not repo.language:
                continue

            stat = stats.get(repo.language)
            if stat is None:
                stat = stats[repo.language] = LanguageStat(name=repo.language)

            stat.repo_count += 1
            stat.weight += weights.base_weight

            if within_year(repo.pushed_at, self.year):
                stat.recent_count += 1
                stat.weight += weights.recent_activity_bonus

        for stat in stats.values():
            if stat.repo_count >= weights.diversity_threshold:
                extra_repos = stat.repo_count - weights.diversity_threshold
                stat.weight += extra_repos * weights.diversity_bonus

        return list(stats.values())

    def top_languages(self, stats: list[LanguageStat], top_n: int | None = None) -> list[LanguageStat]:
        """Select the top languages by weight.

        Sorting is stable, so equal weights keep first-sighting order.
        """
        if top_n is None:
            top_n = self.config.top_languages
        return sorted(stats, key=lambda stat: stat.weight, reverse=True)[:top_n]
