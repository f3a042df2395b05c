from datetime import datetime, timezone as dt_timezone

import pytest

from rest_compliance.exceptions import MalformedDateError, MalformedInputError
from rest_compliance.records import ActivityInterval
from rest_compliance.services.activity_gap_detector import (
    ActivityGapDetectorService,
    activity_window_start,
    find_activity_gaps,
)


def utc(*args):
    return datetime(*args, tzinfo=dt_timezone.utc)


def interval(start, end=None, till_now=False, delete=False):
    return ActivityInterval(start_date=start, end_date=end, till_now=till_now, delete=delete)


@pytest.fixture
def june_first():
    return utc(2024, 6, 1)


class TestFindActivityGaps:
    def test_gap_between_engagements_is_reported(self, june_first):
        history = [
            interval("2024-01-01", "2024-03-01"),
            interval("2024-03-05", till_now=True),
        ]

        gaps = find_activity_gaps(history, 1, june_first)

        assert {"start": "2024-03-01", "end": "2024-03-05"} in gaps
        # The window opens 365 days back, before the first engagement
        assert gaps == [
            {"start": "2023-06-02", "end": "2024-01-01"},
            {"start": "2024-03-01", "end": "2024-03-05"},
        ]

    def test_fully_covered_window_has_no_gaps(self, june_first):
        history = [
            interval("2023-01-01", "2024-01-01"),
            interval("2024-01-02", till_now=True),
        ]

        assert find_activity_gaps(history, 1, june_first) == []

    def test_open_interval_covering_window_has_no_trailing_gap(self):
        history = [interval("2020-01-01", till_now=True)]

        assert find_activity_gaps(history, 4, utc(2024, 1, 1)) == []

    def test_window_older_than_history_reports_leading_gap(self):
        history = [interval("2020-01-01", till_now=True)]

        gaps = find_activity_gaps(history, 10, utc(2024, 1, 1))

        assert gaps == [{"start": "2014-01-03", "end": "2020-01-01"}]

    def test_deleted_interval_does_not_close_gap(self, june_first):
        history = [
            interval("2023-01-01", "2024-01-01"),
            interval("2024-01-01", "2024-03-01", delete=True),
            interval("2024-03-01", till_now=True),
        ]

        gaps = find_activity_gaps(history, 1, june_first)

        assert gaps == [{"start": "2024-01-01", "end": "2024-03-01"}]

    def test_one_day_gap_is_tolerated(self, june_first):
        history = [
            interval("2023-01-01", "2024-03-01"),
            interval("2024-03-02", till_now=True),
        ]

        assert find_activity_gaps(history, 1, june_first) == []

    def test_gap_over_one_day_is_reported(self, june_first):
        history = [
            interval("2023-01-01", "2024-03-01"),
            interval("2024-03-03", till_now=True),
        ]

        assert find_activity_gaps(history, 1, june_first) == [
            {"start": "2024-03-01", "end": "2024-03-03"}
        ]

    def test_trailing_gap_after_last_activity(self, june_first):
        history = [interval("2023-01-01", "2024-05-01")]

        assert find_activity_gaps(history, 1, june_first) == [
            {"start": "2024-05-01", "end": "2024-06-01"}
        ]

    def test_unsorted_overlapping_history(self, june_first):
        history = [
            interval("2024-02-01", till_now=True),
            # Contained in the next interval; must not pull the end back
            interval("2023-08-01", "2023-09-01"),
            interval("2023-01-01", "2024-02-15"),
        ]

        assert find_activity_gaps(history, 1, june_first) == []

    def test_contained_interval_does_not_shorten_coverage(self, june_first):
        history = [
            interval("2023-01-01", "2024-05-01"),
            interval("2023-08-01", "2023-09-01"),
        ]

        assert find_activity_gaps(history, 1, june_first) == [
            {"start": "2024-05-01", "end": "2024-06-01"}
        ]

    def test_interval_ending_before_window_is_ignored(self, june_first):
        history = [interval("2010-01-01", "2012-01-01")]

        assert find_activity_gaps(history, 1, june_first) == [
            {"start": "2023-06-02", "end": "2024-06-01"}
        ]

    def test_empty_history_is_one_gap(self, june_first):
        assert find_activity_gaps([], 1, june_first) == [
            {"start": "2023-06-02", "end": "2024-06-01"}
        ]

    def test_window_uses_fixed_365_day_years(self, june_first):
        # 2024 is a leap year, so a calendar year back would be 2023-06-01
        assert activity_window_start(june_first, 1) == utc(2023, 6, 2)


class TestActivityIntervalValidation:
    def test_end_date_required_unless_open_ended(self):
        with pytest.raises(MalformedInputError):
            ActivityInterval(start_date="2024-01-01")

    def test_deleted_interval_may_omit_end_date(self):
        entry = ActivityInterval(start_date="2024-01-01", delete=True)

        assert entry.end_date is None

    def test_deleted_interval_still_needs_a_valid_start_date(self):
        with pytest.raises(MalformedDateError):
            ActivityInterval(start_date="sometime", end_date="2024-01-01", delete=True)

    def test_flags_must_be_booleans(self):
        with pytest.raises(MalformedInputError):
            ActivityInterval.from_dict(
                {"start_date": "2024-01-01", "end_date": "2024-02-01", "delete": "no"}
            )

    def test_from_dict(self):
        entry = ActivityInterval.from_dict(
            {"start_date": "2024-01-01", "end_date": None, "till_now": True}
        )

        assert entry.till_now
        assert entry.effective_end(utc(2024, 6, 1)) == utc(2024, 6, 1)


class TestActivityGapDetectorService:
    def test_fulfilled_period(self, june_first):
        result = ActivityGapDetectorService().check_activity_period(
            [interval("2020-01-01", till_now=True)], 3, june_first
        )

        assert result["is_fulfilled"] is True
        assert result["has_gaps"] is False
        assert result["gaps"] == []
        assert result["period_years"] == 3
        assert result["window_start"] == "2021-06-02"

    def test_unfulfilled_period(self, june_first):
        result = ActivityGapDetectorService().check_activity_period(
            [interval("2023-01-01", "2024-05-01")], 1, june_first
        )

        assert result["is_fulfilled"] is False
        assert result["gaps"] == [{"start": "2024-05-01", "end": "2024-06-01"}]
