# tests/conftest.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from slacker.core.state import AppState
from slacker.tasks.task_store import TaskStore

from .fakes import FakeNotifier, FixedClock

# 2024-01-08 is a Monday.
MONDAY_NOON = datetime(2024, 1, 8, 12, 0)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="Slacker",
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "slacker.sqlite3",
        log_dir=tmp_path,
        notifications_enabled=False,
        notify_interval_seconds=0.01,
        default_sort_mode="default",
        suggest_limit=8,
    )


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock(MONDAY_NOON)


@pytest.fixture()
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture()
def store(settings: SimpleNamespace) -> TaskStore:
    return TaskStore(settings.tasks_db_path)


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    clock: FixedClock,
    store: TaskStore,
    notifier: FakeNotifier,
) -> AppState:
    """
    AppState wired with a fixed clock and a fake notifier.

    NOTE: We keep the real SQLite TaskStore here because its correctness
    (cascades, unique completions) is part of what we want to test.
    """
    return AppState(settings=settings, clock=clock, task_store=store, notifier=notifier)
