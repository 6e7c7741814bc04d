"""Rule-based developer archetype classifier."""

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from gitstory.models.config import ArchetypeThresholds
from gitstory.models.schemas import (
    Archetype,
    CommunityStats,
    ContributionBreakdown,
    ProductivityProfile,
    TimeOfDay,
)


def _ratio(part: float, whole: float) -> float:
    return part / whole if whole > 0 else 0.0


@dataclass(frozen=True)
class ArchetypeSignals:
    """Derived metrics the archetype rules are evaluated against."""

    prs: int
    reviews: int
    total_commits: int
    pr_ratio: float
    review_ratio: float
    issue_ratio: float
    weekend_ratio: float
    time_of_day: TimeOfDay
    followers: int
    total_stars: int

    @classmethod
    def from_inputs(
        cls,
        breakdown: ContributionBreakdown,
        community: CommunityStats,
        total_commits: int,
        productivity: ProductivityProfile,
        weekday_stats: Sequence[int],
    ) -> "ArchetypeSignals":
        total_activity = breakdown.commits + breakdown.prs + breakdown.issues + breakdown.reviews
        weekend = weekday_stats[0] + weekday_stats[6]  # Sun + Sat

        return cls(
            prs=breakdown.prs,
            reviews=breakdown.reviews,
            total_commits=total_commits,
            pr_ratio=_ratio(breakdown.prs, total_activity),
            review_ratio=_ratio(breakdown.reviews, total_activity),
            issue_ratio=_ratio(breakdown.issues, total_activity),
            weekend_ratio=_ratio(weekend, total_commits),
            time_of_day=productivity.time_of_day,
            followers=community.followers,
            total_stars=community.total_stars,
        )


@dataclass(frozen=True)
class ArchetypeRule:
    """A guarded rule: if ``predicate`` holds, the label is ``label``."""

    label: Archetype
    predicate: Callable[[ArchetypeSignals], bool]

    def matches(self, signals: ArchetypeSignals) -> bool:
        return self.predicate(signals)


def build_rules(t: ArchetypeThresholds) -> list[ArchetypeRule]:
    """Build the ordered decision list. Earlier rules win."""
    return [
        ArchetypeRule(
            Archetype.PULL_REQUEST_PRO,
            lambda s: s.pr_ratio > t.pr_ratio and s.prs > t.min_prs,
        ),
        ArchetypeRule(
            Archetype.REVIEWER,
            lambda s: s.review_ratio > t.review_ratio and s.reviews > t.min_reviews,
        ),
        ArchetypeRule(
            Archetype.WEEKEND_WARRIOR,
            lambda s: s.weekend_ratio > t.weekend_ratio and s.total_commits > t.pattern_min_commits,
        ),
        ArchetypeRule(
            Archetype.NIGHT_OWL,
            lambda s: s.time_of_day == TimeOfDay.LATE_NIGHT and s.total_commits > t.pattern_min_commits,
        ),
        ArchetypeRule(
            Archetype.EARLY_BIRD,
            lambda s: s.time_of_day == TimeOfDay.MORNING and s.total_commits > t.pattern_min_commits,
        ),
        ArchetypeRule(Archetype.GRID_PAINTER, lambda s: s.total_commits > t.grid_painter_commits),
        ArchetypeRule(Archetype.CONSISTENT, lambda s: s.total_commits > t.consistent_commits),
        ArchetypeRule(Archetype.PLANNER, lambda s: s.issue_ratio > t.issue_ratio),
        ArchetypeRule(
            Archetype.COMMUNITY_STAR,
            lambda s: s.followers > t.community_followers or s.total_stars > t.community_stars,
        ),
    ]


class ArchetypeClassifier:
    """Assigns exactly one archetype from an ordered list of rules.

    Rules are evaluated in order and the first match wins. If none match,
    ``default`` (Tinkerer) is returned, so every input gets a label.
    """

    default = Archetype.TINKERER

    def __init__(self, thresholds: ArchetypeThresholds | None = None) -> None:
        self.thresholds = thresholds or ArchetypeThresholds()
        self.rules = build_rules(self.thresholds)

    def match(self, signals: ArchetypeSignals) -> ArchetypeRule | None:
        """Return the first matching rule, or None if the default applies."""
        for rule in self.rules:
            if rule.matches(signals):
                return rule
        return None

    def classify_signals(self, signals: ArchetypeSignals) -> Archetype:
        rule = self.match(signals)
        return rule.label if rule else self.default

    def classify(
        self,
        breakdown: ContributionBreakdown,
        community: CommunityStats,
        total_commits: int,
        productivity: ProductivityProfile,
        weekday_stats: Sequence[int],
    ) -> Archetype:
        """Classify an account's year.

        Args:
            breakdown: Commit/PR/issue/review totals.
            community: Follower and star counts.
            total_commits: Total contributions from the daily counts.
            productivity: Peak hour profile.
            weekday_stats: 7-slot histogram, Sunday=0.

        Returns:
            The archetype label.
        """
        signals = ArchetypeSignals.from_inputs(
            breakdown, community, total_commits, productivity, weekday_stats
        )
        return self.classify_signals(signals)
