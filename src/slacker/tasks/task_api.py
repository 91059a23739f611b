# src/slacker/tasks/task_api.py

"""
Command surface used by the presentation layer (console commands, tests).

Every function takes the AppState first; storage, clock and locks come from it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date

from ..core.state import AppState
from ..errors import InvalidArgument, NotFound
from .effective_date import effective_date
from .recurrence import parse_weekdays
from .task_models import (
    RecurrenceType,
    SortMode,
    Task,
    TaskView,
    normalize_recurrence,
    normalize_time,
    parse_iso_date,
)
from .task_views import tasks_for_date

logger = logging.getLogger(__name__)

# Monday-first display order used by the "manage" listing.
_WEEKDAY_ORDER = (1, 2, 3, 4, 5, 6, 0)


def get_tasks_for_date(
    state: AppState,
    target: str | date,
    sort_mode: str | SortMode = SortMode.DEFAULT,
) -> list[TaskView]:
    target_date = parse_iso_date(target)
    return tasks_for_date(state.task_store, target_date, state.clock.now(), sort_mode)


def get_all_tasks(state: AppState) -> list[Task]:
    return state.task_store.list_tasks()


def add_task(
    state: AppState,
    title: str,
    recurrence_type: str | RecurrenceType,
    recurrence_value: str | int | Iterable[int] | None = None,
    task_time: str | None = None,
    reset_time: str | None = None,
) -> int:
    clean_title = (title or "").strip()
    if not clean_title:
        raise InvalidArgument("title is required")

    rtype, rvalue = normalize_recurrence(recurrence_type, recurrence_value)
    clean_time = normalize_time(task_time, field="task time")
    clean_reset = normalize_time(reset_time, field="reset time")

    task_id = state.task_store.insert_task(
        title=clean_title,
        recurrence_type=rtype.value,
        recurrence_value=rvalue,
        task_time=clean_time,
        reset_time=clean_reset,
        created_at=state.clock.now().isoformat(),
    )
    logger.info("Added task id=%s %r (%s %s)", task_id, clean_title, rtype.value, rvalue or "")
    return task_id


def _task_id(value: int | str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidArgument(f"task id must be a number, got {value!r}") from exc


def toggle_task(state: AppState, task_id: int | str, requested: str | date | None = None) -> bool:
    """
    Flip the completion of a task for its *current* effective date.

    `requested` is only validated: the completion slot is always today's
    effective date, matching what the day view shows for today.
    Returns the new state (True = completed).
    """
    tid = _task_id(task_id)
    requested_date = parse_iso_date(requested) if requested is not None else None

    with state.toggle_locks.hold(tid):
        task = state.task_store.get_task(tid)
        if task is not None:
            return _flip_completion(state, task, requested_date)

    # Unknown ids must not leave a lock behind.
    state.toggle_locks.discard(tid)
    raise NotFound(f"task {tid} does not exist")


def _flip_completion(state: AppState, task: Task, requested_date: date | None) -> bool:
    now = state.clock.now()
    slot = effective_date(task.reset_time, now)
    if requested_date is not None and requested_date != slot:
        logger.debug(
            "toggle task_id=%s requested %s but effective date is %s",
            task.id,
            requested_date,
            slot,
        )

    if state.task_store.find_completion(task.id, slot):
        state.task_store.delete_completion(task.id, slot)
        logger.info("Task %s unchecked for %s", task.id, slot)
        return False

    if not state.task_store.insert_completion(task.id, slot):
        logger.info("Task %s was already completed for %s", task.id, slot)
    else:
        logger.info("Task %s completed for %s", task.id, slot)
    return True


def delete_task(state: AppState, task_id: int | str) -> None:
    """Delete a task and its completions. Missing ids are a no-op."""
    tid = _task_id(task_id)
    with state.toggle_locks.hold(tid):
        deleted = state.task_store.delete_task(tid)
    state.toggle_locks.discard(tid)
    if deleted:
        logger.info("Deleted task id=%s", tid)
    else:
        logger.debug("delete_task: id=%s already absent", tid)


def suggest_titles(state: AppState, text: str, *, limit: int = 8) -> list[str]:
    """
    Existing titles containing `text` (case-insensitive), for re-adding a task.

    Exact matches are left out, there is nothing left to autocomplete.
    """
    needle = (text or "").strip().casefold()
    if not needle:
        return []

    seen: set[str] = set()
    out: list[str] = []
    for task in state.task_store.list_tasks():
        title = task.title
        folded = title.casefold()
        if title in seen or needle not in folded or folded == needle:
            continue
        seen.add(title)
        out.append(title)
        if len(out) >= max(1, int(limit)):
            break
    return out


def list_tasks_by_weekday(state: AppState) -> list[Task]:
    """All tasks ordered by their first scheduled weekday, Monday first."""

    def first_day(task: Task) -> int:
        if task.recurrence_type != RecurrenceType.WEEKLY:
            return len(_WEEKDAY_ORDER)
        days = parse_weekdays(task.recurrence_value)
        if not days:
            return len(_WEEKDAY_ORDER)
        return min(_WEEKDAY_ORDER.index(d) for d in days)

    return sorted(state.task_store.list_tasks(), key=first_day)
