# tests/test_recurrence.py

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from slacker.tasks.effective_date import effective_date
from slacker.tasks.recurrence import matches, weekday_index
from slacker.tasks.task_models import RecurrenceRule, RecurrenceType

START = date(2024, 1, 1)
TWO_WEEKS = [START + timedelta(days=i) for i in range(14)]


def test_weekday_index_is_sunday_based() -> None:
    assert weekday_index(date(2024, 1, 7)) == 0  # Sunday
    assert weekday_index(date(2024, 1, 8)) == 1  # Monday
    assert weekday_index(date(2024, 1, 13)) == 6  # Saturday


def test_daily_matches_every_date() -> None:
    rule = RecurrenceRule(RecurrenceType.DAILY)
    assert all(matches(rule, d) for d in TWO_WEEKS)


@pytest.mark.parametrize("value,expected", [("1", {1}), ("0,6", {0, 6}), ("1,3,5", {1, 3, 5})])
def test_weekly_matches_membership(value: str, expected: set[int]) -> None:
    rule = RecurrenceRule(RecurrenceType.WEEKLY, value)
    for d in TWO_WEEKS:
        assert matches(rule, d) == (weekday_index(d) in expected)


def test_monthly_matches_day_of_month_without_clamping() -> None:
    rule = RecurrenceRule(RecurrenceType.MONTHLY, "15")
    assert matches(rule, date(2024, 3, 15))
    assert not matches(rule, date(2024, 3, 16))

    last = RecurrenceRule(RecurrenceType.MONTHLY, "31")
    assert not any(matches(last, date(2024, 4, day)) for day in range(1, 31))
    assert not matches(last, date(2024, 2, 29))
    assert matches(last, date(2024, 5, 31))


@pytest.mark.parametrize(
    "rule",
    [
        RecurrenceRule(None, None),
        RecurrenceRule(RecurrenceType.WEEKLY, None),
        RecurrenceRule(RecurrenceType.WEEKLY, ""),
        RecurrenceRule(RecurrenceType.WEEKLY, "mon"),
        RecurrenceRule(RecurrenceType.WEEKLY, "7"),
        RecurrenceRule(RecurrenceType.MONTHLY, None),
        RecurrenceRule(RecurrenceType.MONTHLY, "0"),
        RecurrenceRule(RecurrenceType.MONTHLY, "abc"),
    ],
)
def test_malformed_rules_never_match(rule: RecurrenceRule) -> None:
    assert not any(matches(rule, d) for d in TWO_WEEKS)


def test_unknown_stored_type_maps_to_none() -> None:
    assert RecurrenceType.from_db("yearly") is None
    assert RecurrenceType.from_db(None) is None
    assert RecurrenceType.from_db(" Weekly ") == RecurrenceType.WEEKLY


def test_effective_date_without_reset_time_is_calendar_date() -> None:
    for hour in (0, 1, 12, 23):
        now = datetime(2024, 1, 8, hour, 59)
        assert effective_date(None, now) == date(2024, 1, 8)


def test_effective_date_rolls_over_at_reset_time() -> None:
    assert effective_date("03:00", datetime(2024, 1, 8, 2, 59)) == date(2024, 1, 7)
    assert effective_date("03:00", datetime(2024, 1, 8, 3, 0)) == date(2024, 1, 8)
    assert effective_date("03:00", datetime(2024, 1, 8, 23, 0)) == date(2024, 1, 8)


def test_effective_date_crosses_month_and_year() -> None:
    assert effective_date("05:30", datetime(2024, 1, 1, 5, 29)) == date(2023, 12, 31)
    assert effective_date("05:30", datetime(2024, 3, 1, 0, 0)) == date(2024, 2, 29)


def test_effective_date_ignores_malformed_reset_time() -> None:
    now = datetime(2024, 1, 8, 1, 0)
    assert effective_date("25:00", now) == date(2024, 1, 8)
    assert effective_date("soon", now) == date(2024, 1, 8)
