# src/slacker/tasks/effective_date.py

from __future__ import annotations

from datetime import date, datetime, timedelta

from .task_models import parse_hhmm


def effective_date(reset_time: str | None, now: datetime) -> date:
    """
    Calendar date a completion made at `now` is attributed to.

    Before the task's reset time the task still belongs to the previous day:
    with reset_time="03:00", completing it at 01:00 marks yesterday's instance.
    Missing (or unparsable) reset times mean a plain midnight boundary.
    """
    today = now.date()
    parsed = parse_hhmm(reset_time)
    if parsed is None:
        return today

    reset_minutes = parsed[0] * 60 + parsed[1]
    now_minutes = now.hour * 60 + now.minute
    if now_minutes < reset_minutes:
        return today - timedelta(days=1)
    return today
