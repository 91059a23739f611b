# src/slacker/tasks/task_views.py

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime

from ..core.ports import TaskRepo
from ..errors import InvalidArgument
from .effective_date import effective_date
from .recurrence import matches
from .task_models import SortMode, TaskView

logger = logging.getLogger(__name__)


def completion_lookup_date(reset_time: str | None, target: date, now: datetime) -> date:
    """
    Date whose completion row decides the "completed" flag for `target`.

    Reset times only disambiguate "today"; past and future dates are looked up as-is.
    """
    if target == now.date():
        return effective_date(reset_time, now)
    return target


def sort_views(views: Iterable[TaskView], mode: str | SortMode = SortMode.DEFAULT) -> list[TaskView]:
    """
    Order a day's task list. All modes are stable.

    - default: incomplete first; within a group timed tasks by time, untimed after
    - alphabetical: by title, case-insensitive
    - reset-time: tasks with a reset time first (ascending), the rest after
    """
    try:
        sort_mode = SortMode(str(mode))
    except ValueError as exc:
        raise InvalidArgument(
            f"sort mode must be one of {', '.join(m.value for m in SortMode)}, got {mode!r}"
        ) from exc

    items = list(views)
    if sort_mode == SortMode.ALPHABETICAL:
        return sorted(items, key=lambda v: v.task.title.casefold())
    if sort_mode == SortMode.RESET_TIME:
        return sorted(
            items,
            key=lambda v: (v.task.reset_time is None, v.task.reset_time or ""),
        )
    return sorted(
        items,
        key=lambda v: (v.completed, v.task.task_time is None, v.task.task_time or ""),
    )


def tasks_for_date(
    repo: TaskRepo,
    target: date,
    now: datetime,
    sort_mode: str | SortMode = SortMode.DEFAULT,
) -> list[TaskView]:
    views: list[TaskView] = []
    for task in repo.list_tasks():
        if not matches(task.rule, target):
            continue
        lookup = completion_lookup_date(task.reset_time, target, now)
        views.append(TaskView(task=task, completed=repo.find_completion(task.id, lookup)))

    logger.debug("Built %d task views for %s", len(views), target)
    return sort_views(views, sort_mode)


def summarize_views(views: Iterable[TaskView]) -> tuple[int, int]:
    """(completed, total) for a day's list."""
    total = 0
    done = 0
    for v in views:
        total += 1
        if v.completed:
            done += 1
    return done, total
