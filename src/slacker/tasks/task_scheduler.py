# src/slacker/tasks/task_scheduler.py

from __future__ import annotations

"""
Notification scheduler.

A small polling loop that, once per minute (and once at start):
- reads all tasks from the repository,
- decides which ones fire a "due" reminder, a "reset now" alert or a
  "reset in 1 hour" alert for the current HH:MM,
- pools each category into a single notification,
- hands the notifications to an injected Notifier port.

Delivery (console line, desktop toast, ...) belongs to the notifier, not the scheduler.
"""

import asyncio
import contextlib
import logging
import threading
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum

from ..core.ports import Clock, Notifier, TaskRepo
from .effective_date import effective_date
from .recurrence import matches
from .task_models import Task, format_hhmm, parse_hhmm

logger = logging.getLogger(__name__)


class NotificationKind(str, Enum):
    DUE = "due"
    RESET_NOW = "reset_now"
    RESET_SOON = "reset_soon"


@dataclass(slots=True, frozen=True)
class Notification:
    """
    What the scheduler wants to show.

    One Notification per category per tick, however many tasks qualify.
    """

    kind: NotificationKind
    title: str
    body: str
    task_ids: tuple[int, ...] = field(default_factory=tuple)


def one_hour_before(hhmm: str | None) -> str | None:
    """"03:00" -> "02:00", "00:30" -> "23:30"; None for malformed input."""
    parsed = parse_hhmm(hhmm)
    if parsed is None:
        return None
    hour, minute = parsed
    return format_hhmm((hour - 1) % 24, minute)


def _same_time(a: str | None, current: str) -> bool:
    parsed = parse_hhmm(a)
    return parsed is not None and format_hhmm(*parsed) == current


def _pool(kind: NotificationKind, tasks: list[Task]) -> Notification | None:
    if not tasks:
        return None

    ids = tuple(t.id for t in tasks)
    titles = [t.title for t in tasks]
    n = len(tasks)

    if kind == NotificationKind.DUE:
        if n == 1:
            return Notification(kind, "Task due", titles[0], ids)
        return Notification(kind, f"{n} tasks due", "\n".join(titles), ids)

    if kind == NotificationKind.RESET_NOW:
        if n == 1:
            return Notification(kind, "Task has reset", f"{titles[0]} is ready again.", ids)
        return Notification(kind, f"{n} tasks have reset", "\n".join(titles), ids)

    if n == 1:
        return Notification(kind, "Resets in 1 hour", titles[0], ids)
    return Notification(kind, f"{n} tasks reset in 1 hour", "\n".join(titles), ids)


def _reset_day(reset_time: str, today: date) -> date:
    """Calendar day of the next reset that a "1 hour" warning at `today` refers to."""
    parsed = parse_hhmm(reset_time)
    if parsed is not None and parsed[0] == 0:
        # A 00:xx reset is warned about at 23:xx the evening before.
        return today + timedelta(days=1)
    return today


def collect_notifications(repo: TaskRepo, now: datetime) -> list[Notification]:
    """
    Decide what to notify for the minute `now` falls in.

    Categories are independent and may all fire in the same tick:
    - DUE: task_time == now, recurrence matches today, effective date is today,
      not completed for that effective date
    - RESET_NOW: reset_time == now, recurrence matches today
    - RESET_SOON: reset_time - 1h == now (wrapping at midnight), recurrence
      matches the day the reset happens (tomorrow for a 00:xx reset)
    """
    today = now.date()
    current = format_hhmm(now.hour, now.minute)

    due: list[Task] = []
    reset_now: list[Task] = []
    reset_soon: list[Task] = []

    for task in repo.list_tasks():
        scheduled_today = matches(task.rule, today)

        if scheduled_today and task.task_time and _same_time(task.task_time, current):
            slot = effective_date(task.reset_time, now)
            if slot == today and not repo.find_completion(task.id, slot):
                due.append(task)

        if not task.reset_time:
            continue
        if scheduled_today and _same_time(task.reset_time, current):
            reset_now.append(task)
        if one_hour_before(task.reset_time) == current and matches(
            task.rule, _reset_day(task.reset_time, today)
        ):
            reset_soon.append(task)

    out: list[Notification] = []
    for kind, group in (
        (NotificationKind.DUE, due),
        (NotificationKind.RESET_NOW, reset_now),
        (NotificationKind.RESET_SOON, reset_soon),
    ):
        note = _pool(kind, group)
        if note is not None:
            out.append(note)
    return out


def check_and_notify(repo: TaskRepo, notifier: Notifier, now: datetime) -> list[Notification]:
    """Run one tick: collect and deliver. Delivery failures are logged per notification."""
    notes = collect_notifications(repo, now)
    for note in notes:
        try:
            notifier.notify(note.title, note.body)
            logger.info("Notified %s tasks=%s", note.kind.value, list(note.task_ids))
        except Exception:
            logger.exception("notify failed kind=%s", note.kind.value)
    return notes


async def run_notification_scheduler(
        repo: TaskRepo,
        notifier: Notifier,
        clock: Clock,
        *,
        interval_seconds: float = 60.0,
) -> None:
    """
    Simple polling scheduler.

    Checks immediately, then every interval_seconds. A wall-clock minute is
    checked at most once, so a short interval never produces duplicate alerts.
    Minutes missed while the process was suspended are skipped (no backfill).

    To stop the scheduler, cancel the coroutine/task.
    """
    sleep_s = max(0.01, float(interval_seconds))
    last_minute: tuple[int, int, int, int, int] | None = None

    while True:
        now = clock.now()
        minute_key = (now.year, now.month, now.day, now.hour, now.minute)

        if minute_key != last_minute:
            last_minute = minute_key
            try:
                check_and_notify(repo, notifier, now)
            except Exception:
                logger.exception("notification tick failed at %s", now.isoformat())

        await asyncio.sleep(sleep_s)


class NotificationScheduler:
    """
    Owns the scheduler's lifecycle.

    start() runs run_notification_scheduler in a background thread with its own
    event loop (the console REPL keeps the main thread). stop() cancels the
    loop task thread-safely; join() waits for the thread to exit. Stop before
    closing the repository.
    """

    def __init__(
        self,
        repo: TaskRepo,
        notifier: Notifier,
        clock: Clock,
        *,
        interval_seconds: float = 60.0,
    ) -> None:
        self._repo = repo
        self._notifier = notifier
        self._clock = clock
        self._interval = interval_seconds

        self._thread: threading.Thread | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._task: asyncio.Task[None] | None = None
        self._ready = threading.Event()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._ready.clear()

        def runner() -> None:
            loop = asyncio.new_event_loop()
            asyncio.set_event_loop(loop)
            self._loop = loop
            self._task = loop.create_task(
                run_notification_scheduler(
                    self._repo,
                    self._notifier,
                    self._clock,
                    interval_seconds=self._interval,
                )
            )
            self._ready.set()
            try:
                with contextlib.suppress(asyncio.CancelledError):
                    loop.run_until_complete(self._task)
            finally:
                loop.close()
                logger.info("Notification scheduler stopped.")

        self._thread = threading.Thread(target=runner, name="slacker-notify", daemon=True)
        self._thread.start()
        self._ready.wait(timeout=5.0)
        logger.info("Notification scheduler started (interval=%ss).", self._interval)

    def stop(self) -> None:
        loop, task = self._loop, self._task
        if loop is None or task is None:
            return
        try:
            loop.call_soon_threadsafe(task.cancel)
        except RuntimeError:
            # Loop already closed.
            logger.debug("Scheduler loop already closed.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout=timeout)
