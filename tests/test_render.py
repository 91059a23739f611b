# tests/test_render.py

from __future__ import annotations

from datetime import date

from slacker.cli.render import format_date_label, format_recurrence, format_time_12h
from slacker.tasks.task_models import RecurrenceType, Task


def _task(rtype: RecurrenceType | None, value: str | None) -> Task:
    return Task(id=1, title="t", recurrence_type=rtype, recurrence_value=value, created_at="")


def test_format_time_12h() -> None:
    assert format_time_12h("00:15") == "12:15 AM"
    assert format_time_12h("09:00") == "9:00 AM"
    assert format_time_12h("12:00") == "12:00 PM"
    assert format_time_12h("23:45") == "11:45 PM"
    assert format_time_12h(None) == ""


def test_format_recurrence() -> None:
    assert format_recurrence(_task(RecurrenceType.DAILY, None)) == "Every day"
    assert format_recurrence(_task(RecurrenceType.WEEKLY, "0,1,3")) == "Mon, Wed, Sun"
    assert format_recurrence(_task(RecurrenceType.MONTHLY, "15")) == "Day 15 of month"
    assert format_recurrence(_task(None, "1")) == "-"


def test_format_date_label() -> None:
    today = date(2024, 1, 8)
    assert format_date_label(today, today) == "today"
    assert format_date_label(date(2024, 1, 9), today) == "Tue, Jan 9"
