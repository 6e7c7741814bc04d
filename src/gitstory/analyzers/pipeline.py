"""End-to-end report pipeline for an account."""

import asyncio
import json
import logging
from pathlib import Path

from gitstory.analyzers.activity import aggregate_contributions, analyze_productivity, build_hour_histogram
from gitstory.analyzers.archetype import ArchetypeClassifier
from gitstory.analyzers.github import GitHubFetcher
from gitstory.analyzers.scorer import Scorer
from gitstory.models.config import ScoringConfig
from gitstory.models.schemas import (
    CommunityStats,
    ContributionBreakdown,
    LanguageStat,
    ReportInputs,
    RepositoryRecord,
    TopLanguage,
    TopRepository,
    YearReport,
)

logger = logging.getLogger(__name__)

LANGUAGE_COLORS = {
    "TypeScript": "#3178C6",
    "JavaScript": "#F7DF1E",
    "Python": "#3572A5",
    "Java": "#b07219",
    "Go": "#00ADD8",
    "Rust": "#dea584",
    "HTML": "#e34c26",
    "CSS": "#563d7c",
    "C++": "#f34b7d",
    "C#": "#178600",
    "Vue": "#41b883",
    "Swift": "#F05138",
    "Kotlin": "#A97BFF",
    "Jupyter Notebook": "#DA5B0B",
}
DEFAULT_LANGUAGE_COLOR = "#A3A3A3"

PLACEHOLDER_LANGUAGE = TopLanguage(name="Polyglot", weight=0, repo_count=1, percentage=100, color="#FFFFFF")
PLACEHOLDER_REPO = TopRepository(
    name="No Public Repos",
    description="Start coding to write history.",
    stars=0,
    language="N/A",
    topics=[],
    url="",
    score=None,
)


def _to_top_languages(top: list[LanguageStat], all_stats: list[LanguageStat]) -> list[TopLanguage]:
    """Attach display share and colour to the ranked languages."""
    if not top:
        return [PLACEHOLDER_LANGUAGE]

    counted = sum(stat.repo_count for stat in all_stats)
    return [
        TopLanguage(
            name=stat.name,
            weight=stat.weight,
            repo_count=stat.repo_count,
            recent_count=stat.recent_count,
            percentage=round(stat.repo_count / counted * 100) if counted else 0,
            color=LANGUAGE_COLORS.get(stat.name, DEFAULT_LANGUAGE_COLOR),
        )
        for stat in top
    ]


def _to_top_repo(best: tuple[RepositoryRecord, float] | None) -> TopRepository:
    if best is None:
        return PLACEHOLDER_REPO

    repo, score = best
    return TopRepository(
        name=repo.name,
        description=repo.description or "No description provided.",
        stars=repo.stars,
        language=repo.language or "Unknown",
        topics=repo.topics,
        url=repo.url,
        score=round(score, 2),
    )


def assemble_report(inputs: ReportInputs, config: ScoringConfig | None = None) -> YearReport:
    """Build a YearReport from fully materialized inputs.

    Runs the scorers and aggregators, then the archetype classifier on
    their outputs. Performs no I/O.

    Args:
        inputs: Repositories, daily counts, hour histogram and totals.
        config: Scoring configuration. The target year comes from ``inputs``.

    Returns:
        The assembled report.
    """
    config = (config or ScoringConfig()).model_copy(update={"target_year": inputs.year})
    scorer = Scorer(config)

    # Repositories and languages
    language_stats = scorer.calculate_language_scores(inputs.repositories)
    top_languages = _to_top_languages(scorer.top_languages(language_stats), language_stats)
    top_repo = _to_top_repo(scorer.select_top_repo(inputs.repositories))

    # Contributions and productivity
    contributions = aggregate_contributions(inputs.contributions)
    productivity = analyze_productivity(inputs.hour_counts, config.productivity)

    breakdown = ContributionBreakdown(
        commits=contributions.total_commits,
        prs=inputs.prs,
        issues=inputs.issues,
        reviews=inputs.reviews,
    )
    community = CommunityStats(
        followers=inputs.followers,
        following=inputs.following,
        public_repos=inputs.public_repos,
        total_stars=sum(repo.stars for repo in inputs.repositories),
    )

    archetype = ArchetypeClassifier(config.archetype).classify(
        breakdown,
        community,
        contributions.total_commits,
        productivity,
        contributions.weekday_stats,
    )

    return YearReport(
        username=inputs.username,
        avatar_url=inputs.avatar_url,
        year=inputs.year,
        total_commits=contributions.total_commits,
        longest_streak=contributions.longest_streak,
        busiest_weekday=contributions.busiest_weekday,
        top_languages=top_languages,
        top_repo=top_repo,
        velocity=contributions.velocity,
        weekday_stats=contributions.weekday_stats,
        productivity=productivity,
        archetype=archetype,
        contribution_breakdown=breakdown,
        community=community,
    )


class ReportPipeline:
    """Orchestrates fetching and report assembly for one account.

    Pipeline stages:
    1. Fetch the user profile (fails fast on unknown users / rate limits)
    2. Fetch repositories, contributions, events and search counts concurrently
    3. Assemble the report
    4. Save results (optional)
    """

    def __init__(
        self,
        config: ScoringConfig | None = None,
        github: GitHubFetcher | None = None,
        data_dir: Path | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            config: Scoring configuration; its target year is the report year.
            github: GitHub fetcher. Defaults to one using GITHUB_TOKEN* env vars.
            data_dir: Directory to save results. Defaults to ./data.
        """
        self.config = config or ScoringConfig()
        self.github = github or GitHubFetcher()
        self.data_dir = data_dir or Path("data")

    @property
    def year(self) -> int:
        return self.config.target_year

    async def collect_inputs(self, username: str) -> ReportInputs:
        """Fetch everything the report needs.

        Raises:
            UserNotFoundError: If the account does not exist.
            RateLimitError: If the profile request is rate limited.
        """
        user = await self.github.fetch_user(username)
        login = user.get("login") or username

        repos, contributions, timestamps, counts = await asyncio.gather(
            self.github.fetch_repositories(login),
            self.github.fetch_contributions(login, self.year),
            self.github.fetch_event_timestamps(login),
            self.github.fetch_activity_counts(login, self.year),
        )
        prs, issues, reviews = counts
        logger.info(
            f"Collected {login}: {len(repos)} repos, {len(contributions)} days, "
            f"{len(timestamps)} events, {prs} PRs, {issues} issues, {reviews} reviews"
        )

        return ReportInputs(
            username=login,
            avatar_url=user.get("avatar_url") or "",
            year=self.year,
            followers=user.get("followers"),
            following=user.get("following"),
            public_repos=user.get("public_repos"),
            repositories=repos,
            contributions=contributions,
            hour_counts=build_hour_histogram(timestamps, self.config.timezone),
            prs=prs,
            issues=issues,
            reviews=reviews,
        )

    async def build_report(
        self,
        username: str,
        save: bool = False,
        save_inputs: bool = False,
    ) -> YearReport:
        """Run the full pipeline for one account.

        Args:
            username: GitHub login.
            save: Whether to save the report to disk.
            save_inputs: Whether to save the raw inputs for later replay.

        Returns:
            The YearReport.
        """
        inputs = await self.collect_inputs(username)
        if save_inputs:
            self.save_inputs(inputs)

        report = assemble_report(inputs, self.config)
        if save:
            self.save_report(report)
        return report

    def _reports_dir(self) -> Path:
        reports_dir = self.data_dir / "reports"
        reports_dir.mkdir(parents=True, exist_ok=True)
        return reports_dir

    def save_report(self, report: YearReport) -> Path:
        """Save a report to ``data_dir/reports/<user>-<year>.json``."""
        filepath = self._reports_dir() / f"{report.username}-{report.year}.json"
        filepath.write_text(json.dumps(report.model_dump(mode="json"), indent=2))
        logger.info(f"Saved report to {filepath}")
        return filepath

    def save_inputs(self, inputs: ReportInputs) -> Path:
        """Save raw inputs to ``data_dir/reports/<user>-<year>.inputs.json``."""
        filepath = self._reports_dir() / f"{inputs.username}-{inputs.year}.inputs.json"
        filepath.write_text(json.dumps(inputs.model_dump(mode="json"), indent=2))
        return filepath


def load_inputs(path: Path) -> ReportInputs:
    """Load inputs previously written by ``ReportPipeline.save_inputs``."""
    return ReportInputs.model_validate_json(path.read_text())
