"""Contribution and time-of-day aggregation."""

from collections import Counter
from collections.abc import Iterable, Mapping
from datetime import date, datetime, timezone, tzinfo
from zoneinfo import ZoneInfo

from gitstory.models.config import ProductivityBuckets
from gitstory.models.schemas import (
    ContributionSummary,
    DailyContribution,
    ProductivityProfile,
    TimeOfDay,
    VelocityPoint,
)


def weekday_index(day: date) -> int:
    """Weekday slot with Sunday=0 ... Saturday=6."""
    return (day.weekday() + 1) % 7


def aggregate_contributions(days: Iterable[DailyContribution]) -> ContributionSummary:
    """Reduce a year of daily counts into totals, streaks and a weekday histogram.

    Days are sorted by date first; input order does not matter. A streak is
    a run of consecutive entries with a non-zero count.

    Args:
        days: Daily contribution counts for the year.

    Returns:
        ContributionSummary. The busiest weekday prefers the lowest index
        on ties, so an empty year reports Sunday.
    """
    ordered = sorted(days, key=lambda day: day.date)

    total = 0
    current_streak = 0
    longest_streak = 0
    weekday_stats = [0] * 7
    velocity = []

    for day in ordered:
        total += day.count
        velocity.append(VelocityPoint(date=day.date, count=day.count))

        if day.count > 0:
            weekday_stats[weekday_index(day.date)] += day.count
            current_streak += 1
            longest_streak = max(longest_streak, current_streak)
        else:
            current_streak = 0

    return ContributionSummary(
        total_commits=total,
        longest_streak=longest_streak,
        weekday_stats=weekday_stats,
        busiest_weekday=weekday_stats.index(max(weekday_stats)),
        velocity=velocity,
    )


def build_hour_histogram(
    timestamps: Iterable[datetime],
    tz: str | tzinfo = "UTC",
) -> dict[int, int]:
    """Count events per hour of day in the given timezone.

    Naive timestamps are taken as UTC.
    """
    if isinstance(tz, str):
        zone = timezone.utc if tz == "UTC" else ZoneInfo(tz)
    else:
        zone = tz
    counts: Counter[int] = Counter()
    for ts in timestamps:
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=timezone.utc)
        counts[ts.astimezone(zone).hour] += 1
    return dict(counts)


def time_of_day(hour: int, buckets: ProductivityBuckets | None = None) -> TimeOfDay:
    """Map an hour (0-23) to its time-of-day bucket."""
    buckets = buckets or ProductivityBuckets()
    if buckets.morning_start <= hour < buckets.afternoon_start:
        return TimeOfDay.MORNING
    if buckets.afternoon_start <= hour < buckets.evening_start:
        return TimeOfDay.AFTERNOON
    if buckets.evening_start <= hour < buckets.late_night_start:
        return TimeOfDay.EVENING
    return TimeOfDay.LATE_NIGHT


def analyze_productivity(
    hour_counts: Mapping[int, int],
    buckets: ProductivityBuckets | None = None,
) -> ProductivityProfile:
    """Find the peak activity hour and its bucket.

    Hours are compared in ascending order and only a strictly higher count
    replaces the current peak, so ties go to the earliest hour. With no
    positive counts the default peak hour (2 PM) is used.
    """
    buckets = buckets or ProductivityBuckets()
    peak_hour = buckets.default_peak_hour
    max_count = 0

    for hour in sorted(hour_counts):
        count = hour_counts[hour]
        if count > max_count:
            max_count = count
            peak_hour = hour

    return ProductivityProfile(peak_hour=peak_hour, time_of_day=time_of_day(peak_hour, buckets))
