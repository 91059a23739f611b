# src/slacker/tasks/recurrence.py

"""
Recurrence matching.

matches(rule, date) is pure and total: malformed rules degrade to "never matches"
instead of raising, so a single bad row cannot break the day view or the
notification tick.
"""

from __future__ import annotations

from datetime import date

from .task_models import RecurrenceRule, RecurrenceType


def weekday_index(d: date) -> int:
    """Weekday with 0=Sunday .. 6=Saturday (date.weekday() uses 0=Monday)."""
    return (d.weekday() + 1) % 7


def parse_weekdays(value: str | None) -> frozenset[int] | None:
    if not value:
        return None
    days: set[int] = set()
    for part in str(value).split(","):
        part = part.strip()
        if not part:
            continue
        try:
            d = int(part)
        except ValueError:
            return None
        if not 0 <= d <= 6:
            return None
        days.add(d)
    return frozenset(days) or None


def parse_month_day(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        day = int(str(value).strip())
    except ValueError:
        return None
    return day if 1 <= day <= 31 else None


def matches(rule: RecurrenceRule, d: date) -> bool:
    if rule.type == RecurrenceType.DAILY:
        return True

    if rule.type == RecurrenceType.WEEKLY:
        days = parse_weekdays(rule.value)
        return days is not None and weekday_index(d) in days

    if rule.type == RecurrenceType.MONTHLY:
        # No clamping: day 31 simply never matches a 30-day month.
        return parse_month_day(rule.value) == d.day

    return False
