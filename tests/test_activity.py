"""Tests for contribution aggregation and productivity analysis."""

from datetime import date, datetime, timedelta, timezone

import pytest

from conftest import make_days
from gitstory.analyzers.activity import (
    aggregate_contributions,
    analyze_productivity,
    build_hour_histogram,
    time_of_day,
    weekday_index,
)
from gitstory.models.config import ProductivityBuckets
from gitstory.models.schemas import DailyContribution, TimeOfDay


class TestWeekdayIndex:
    def test_sunday_is_zero(self):
        assert weekday_index(date(2025, 1, 5)) == 0

    def test_saturday_is_six(self):
        assert weekday_index(date(2025, 1, 4)) == 6

    def test_wednesday(self):
        assert weekday_index(date(2025, 1, 1)) == 3


class TestAggregateContributions:
    def test_longest_streak(self):
        summary = aggregate_contributions(make_days([1, 0, 1, 1, 0, 1, 1, 1]))
        assert summary.longest_streak == 3
        assert summary.total_commits == 6

    def test_all_zero(self):
        summary = aggregate_contributions(make_days([0] * 10))
        assert summary.longest_streak == 0
        assert summary.total_commits == 0
        assert summary.weekday_stats == [0] * 7
        assert summary.busiest_weekday == 0

    def test_empty(self):
        summary = aggregate_contributions([])
        assert summary.total_commits == 0
        assert summary.velocity == []
        assert summary.busiest_weekday == 0

    def test_sorts_before_processing(self):
        days = make_days([1, 0, 1, 1, 0, 1, 1, 1])
        summary = aggregate_contributions(list(reversed(days)))
        assert summary.longest_streak == 3
        assert [p.date for p in summary.velocity] == [d.date for d in days]

    def test_velocity_one_entry_per_day(self):
        days = make_days([3, 0, 5])
        summary = aggregate_contributions(days)
        assert [(p.date, p.count) for p in summary.velocity] == [
            (date(2025, 1, 1), 3),
            (date(2025, 1, 2), 0),
            (date(2025, 1, 3), 5),
        ]

    def test_weekday_histogram(self):
        # Jan 1 2025 is a Wednesday
        summary = aggregate_contributions(make_days([4, 0, 2, 7]))
        assert summary.weekday_stats == [0, 0, 0, 4, 0, 2, 7]
        assert summary.busiest_weekday == 6

    def test_busiest_tie_prefers_sunday(self):
        days = [
            DailyContribution(date=date(2025, 1, 4), count=5),  # Saturday
            DailyContribution(date=date(2025, 1, 5), count=5),  # Sunday
        ]
        summary = aggregate_contributions(days)
        assert summary.weekday_stats == [5, 0, 0, 0, 0, 0, 5]
        assert summary.busiest_weekday == 0

    def test_full_year(self):
        start = date(2025, 1, 1)
        days = [DailyContribution(date=start + timedelta(days=i), count=1) for i in range(365)]
        summary = aggregate_contributions(days)
        assert summary.total_commits == 365
        assert summary.longest_streak == 365
        assert len(summary.velocity) == 365
        assert sum(summary.weekday_stats) == 365

    def test_negative_count_rejected(self):
        with pytest.raises(ValueError):
            DailyContribution(date=date(2025, 1, 1), count=-1)


class TestHourHistogram:
    def test_counts_per_hour(self):
        stamps = [
            datetime(2025, 3, 1, 9, 15, tzinfo=timezone.utc),
            datetime(2025, 3, 2, 9, 45, tzinfo=timezone.utc),
            datetime(2025, 3, 2, 23, 5, tzinfo=timezone.utc),
        ]
        assert build_hour_histogram(stamps) == {9: 2, 23: 1}

    def test_converts_to_timezone(self):
        tokyo = timezone(timedelta(hours=9))
        stamps = [datetime(2025, 3, 1, 23, 30, tzinfo=timezone.utc)]
        assert build_hour_histogram(stamps, tokyo) == {8: 1}

    def test_naive_is_utc(self):
        assert build_hour_histogram([datetime(2025, 3, 1, 4, 0)]) == {4: 1}

    def test_empty(self):
        assert build_hour_histogram([]) == {}


class TestTimeOfDay:
    @pytest.mark.parametrize(
        "hour, expected",
        [
            (0, TimeOfDay.LATE_NIGHT),
            (4, TimeOfDay.LATE_NIGHT),
            (5, TimeOfDay.MORNING),
            (11, TimeOfDay.MORNING),
            (12, TimeOfDay.AFTERNOON),
            (16, TimeOfDay.AFTERNOON),
            (17, TimeOfDay.EVENING),
            (21, TimeOfDay.EVENING),
            (22, TimeOfDay.LATE_NIGHT),
            (23, TimeOfDay.LATE_NIGHT),
        ],
    )
    def test_buckets(self, hour, expected):
        assert time_of_day(hour) == expected

    def test_custom_boundary(self):
        buckets = ProductivityBuckets(late_night_start=21)
        assert time_of_day(21, buckets) == TimeOfDay.LATE_NIGHT


class TestProductivity:
    def test_empty_defaults_to_afternoon(self):
        profile = analyze_productivity({})
        assert profile.peak_hour == 14
        assert profile.time_of_day == TimeOfDay.AFTERNOON

    def test_all_zero_counts_use_default(self):
        assert analyze_productivity({3: 0, 9: 0}).peak_hour == 14

    def test_peak_hour(self):
        profile = analyze_productivity({9: 2, 23: 7, 14: 3})
        assert profile.peak_hour == 23
        assert profile.time_of_day == TimeOfDay.LATE_NIGHT

    def test_tie_goes_to_lowest_hour(self):
        # Insertion order deliberately puts the later hour first
        profile = analyze_productivity({23: 4, 9: 4})
        assert profile.peak_hour == 9
        assert profile.time_of_day == TimeOfDay.MORNING

    def test_evening(self):
        assert analyze_productivity({18: 1}).time_of_day == TimeOfDay.EVENING
