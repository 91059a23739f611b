# src/slacker/cli/render.py

"""Plain-text rendering of tasks and day views for the console."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from ..tasks.recurrence import parse_month_day, parse_weekdays
from ..tasks.task_models import RecurrenceType, Task, TaskView, parse_hhmm
from ..tasks.task_views import summarize_views

DAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


def format_time_12h(hhmm: str | None) -> str:
    """"13:05" -> "1:05 PM"; empty string for missing/malformed values."""
    parsed = parse_hhmm(hhmm)
    if parsed is None:
        return ""
    hour, minute = parsed
    ampm = "PM" if hour >= 12 else "AM"
    return f"{hour % 12 or 12}:{minute:02d} {ampm}"


def format_recurrence(task: Task) -> str:
    if task.recurrence_type == RecurrenceType.DAILY:
        return "Every day"
    if task.recurrence_type == RecurrenceType.WEEKLY:
        days = parse_weekdays(task.recurrence_value)
        if not days:
            return "-"
        # Monday-first, like a paper calendar.
        return ", ".join(DAY_NAMES[d] for d in sorted(days, key=lambda d: (d + 6) % 7))
    if task.recurrence_type == RecurrenceType.MONTHLY:
        day = parse_month_day(task.recurrence_value)
        return f"Day {day} of month" if day else "-"
    return "-"


def format_date_label(d: date, today: date) -> str:
    if d == today:
        return "today"
    return d.strftime("%a, %b ") + str(d.day)


def render_task_line(task: Task) -> str:
    parts = [f"#{task.id}", task.title]
    meta = [format_recurrence(task)]
    if task.task_time:
        meta.append(f"at {format_time_12h(task.task_time)}")
    if task.reset_time:
        meta.append(f"resets {format_time_12h(task.reset_time)}")
    return f"{' '.join(parts)}  ({'; '.join(meta)})"


def render_day(views: Sequence[TaskView], target: date, today: date) -> str:
    label = format_date_label(target, today)
    if not views:
        return f"No tasks for {label}"

    done, total = summarize_views(views)
    lines = [f"Tasks for {label} ({target.isoformat()}): {done}/{total} completed"]
    for v in views:
        box = "[x]" if v.completed else "[ ]"
        lines.append(f"  {box} {render_task_line(v.task)}")
    return "\n".join(lines)


def render_task_table(tasks: Sequence[Task]) -> str:
    if not tasks:
        return "No recurring tasks yet. Add one with /add."
    return "\n".join(render_task_line(t) for t in tasks)
