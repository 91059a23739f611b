# tests/test_task_scheduler.py

from __future__ import annotations

import asyncio
import time
from datetime import datetime

import pytest

from slacker.core.state import AppState
from slacker.tasks import task_api
from slacker.tasks.task_scheduler import (
    NotificationKind,
    NotificationScheduler,
    check_and_notify,
    collect_notifications,
    one_hour_before,
    run_notification_scheduler,
)

from .fakes import FakeNotifier, FixedClock


def _kinds(state: AppState, now: datetime) -> dict[NotificationKind, tuple[str, str]]:
    return {n.kind: (n.title, n.body) for n in collect_notifications(state.task_store, now)}


def test_one_hour_before_wraps_midnight() -> None:
    assert one_hour_before("10:00") == "09:00"
    assert one_hour_before("00:30") == "23:30"
    assert one_hour_before("bad") is None


def test_two_resets_at_same_minute_are_pooled(state: AppState, notifier: FakeNotifier) -> None:
    task_api.add_task(state, "Dishes", "daily", reset_time="10:00")
    task_api.add_task(state, "Laundry", "daily", reset_time="10:00")

    notes = check_and_notify(state.task_store, notifier, datetime(2024, 1, 8, 10, 0))

    assert len(notes) == 1
    assert notes[0].kind == NotificationKind.RESET_NOW
    assert len(notifier.sent) == 1
    assert notifier.sent[0].title == "2 tasks have reset"
    assert "Dishes" in notifier.sent[0].body
    assert "Laundry" in notifier.sent[0].body


def test_due_reminder_single_and_pooled(state: AppState) -> None:
    task_api.add_task(state, "Vitamins", "daily", task_time="09:00")
    assert _kinds(state, datetime(2024, 1, 8, 9, 0)) == {
        NotificationKind.DUE: ("Task due", "Vitamins"),
    }

    task_api.add_task(state, "Stretch", "weekly", "1", task_time="09:00")
    kinds = _kinds(state, datetime(2024, 1, 8, 9, 0))
    assert kinds[NotificationKind.DUE] == ("2 tasks due", "Vitamins\nStretch")

    # Tuesday: the weekly task is not scheduled.
    assert _kinds(state, datetime(2024, 1, 9, 9, 0)) == {
        NotificationKind.DUE: ("Task due", "Vitamins"),
    }
    assert _kinds(state, datetime(2024, 1, 8, 9, 1)) == {}


def test_due_reminder_skips_completed_tasks(state: AppState, clock: FixedClock) -> None:
    tid = task_api.add_task(state, "Vitamins", "daily", task_time="09:00")
    clock.set(datetime(2024, 1, 8, 8, 0))
    task_api.toggle_task(state, tid, "2024-01-08")

    assert _kinds(state, datetime(2024, 1, 8, 9, 0)) == {}


def test_due_reminder_waits_for_reset(state: AppState) -> None:
    # Before 10:00 the task still belongs to yesterday: no reminder at 09:00.
    task_api.add_task(state, "Journal", "daily", task_time="09:00", reset_time="10:00")
    kinds = _kinds(state, datetime(2024, 1, 8, 9, 0))
    assert NotificationKind.DUE not in kinds
    assert kinds[NotificationKind.RESET_SOON] == ("Resets in 1 hour", "Journal")


def test_all_categories_fire_in_one_tick(state: AppState) -> None:
    task_api.add_task(state, "Due", "daily", task_time="06:00")
    task_api.add_task(state, "Now", "daily", reset_time="06:00")
    task_api.add_task(state, "Soon", "daily", reset_time="07:00")

    notes = collect_notifications(state.task_store, datetime(2024, 1, 8, 6, 0))
    assert [n.kind for n in notes] == [
        NotificationKind.DUE,
        NotificationKind.RESET_NOW,
        NotificationKind.RESET_SOON,
    ]
    assert notes[1].body == "Now is ready again."


def test_reset_alerts_respect_recurrence(state: AppState) -> None:
    task_api.add_task(state, "Sunday chores", "weekly", "0", reset_time="10:00")
    assert _kinds(state, datetime(2024, 1, 8, 10, 0)) == {}
    assert NotificationKind.RESET_NOW in _kinds(state, datetime(2024, 1, 7, 10, 0))


def test_reset_soon_wraps_to_previous_evening(state: AppState) -> None:
    task_api.add_task(state, "Late", "daily", reset_time="00:30")
    assert _kinds(state, datetime(2024, 1, 8, 23, 30)) == {
        NotificationKind.RESET_SOON: ("Resets in 1 hour", "Late"),
    }


def test_reset_soon_before_midnight_follows_next_days_rule(state: AppState) -> None:
    # Sunday 23:30 warns about Monday's 00:30 reset, not Sunday's.
    task_api.add_task(state, "MondayOnly", "weekly", "1", reset_time="00:30")
    task_api.add_task(state, "SundayOnly", "weekly", "0", reset_time="00:30")

    assert _kinds(state, datetime(2024, 1, 7, 23, 30)) == {
        NotificationKind.RESET_SOON: ("Resets in 1 hour", "MondayOnly"),
    }
    assert _kinds(state, datetime(2024, 1, 8, 0, 30)) == {
        NotificationKind.RESET_NOW: ("Task has reset", "MondayOnly is ready again."),
    }


@pytest.mark.asyncio
async def test_scheduler_notifies_once_per_minute(
    state: AppState, clock: FixedClock, notifier: FakeNotifier
) -> None:
    task_api.add_task(state, "Vitamins", "daily", task_time="09:00")
    clock.set(datetime(2024, 1, 8, 9, 0, 5))

    runner = asyncio.create_task(
        run_notification_scheduler(state.task_store, notifier, clock, interval_seconds=0.01)
    )

    await asyncio.sleep(0.05)
    assert len(notifier.sent) == 1

    # Next minute: nothing qualifies, nothing new is sent.
    clock.set(datetime(2024, 1, 8, 9, 1))
    await asyncio.sleep(0.05)

    runner.cancel()
    with pytest.raises(asyncio.CancelledError):
        await runner

    assert [n.title for n in notifier.sent] == ["Task due"]


def test_background_scheduler_start_stop(
    state: AppState, clock: FixedClock, notifier: FakeNotifier
) -> None:
    task_api.add_task(state, "Dishes", "daily", reset_time="12:00")
    clock.set(datetime(2024, 1, 8, 12, 0))

    scheduler = NotificationScheduler(state.task_store, notifier, clock, interval_seconds=0.01)
    scheduler.start()
    try:
        deadline = time.monotonic() + 5.0
        while not notifier.sent and time.monotonic() < deadline:
            time.sleep(0.01)
        assert scheduler.running
    finally:
        scheduler.stop()
        scheduler.join(timeout=5.0)

    assert not scheduler.running
    assert [n.title for n in notifier.sent] == ["Task has reset"]
