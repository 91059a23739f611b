# src/slacker/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (clock/store/notifier),
- builds the notification scheduler around the same store.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..connectors.console_connector import ConsoleNotifier
from ..core.clock import SystemClock
from ..core.ports import Clock, Notifier
from ..core.state import AppState
from ..tasks.task_models import SortMode
from ..tasks.task_scheduler import NotificationScheduler
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def _sort_mode(settings) -> SortMode:
    raw = str(getattr(settings, "default_sort_mode", "default"))
    try:
        return SortMode(raw)
    except ValueError:
        logger.warning("Unknown sort mode %r in settings; using default.", raw)
        return SortMode.DEFAULT


def create_initial_state(
    *,
    settings=None,
    clock: Clock | None = None,
    notifier: Notifier | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and the clock/notifier) injectable makes the app easier to
    test and avoids hidden global config reads. If settings is None, falls back
    to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    state = AppState(
        settings=settings,
        clock=clock or SystemClock(),
        task_store=TaskStore(settings.tasks_db_path),
        notifier=notifier or ConsoleNotifier(app_name=getattr(settings, "app_name", "Slacker")),
        sort_mode=_sort_mode(settings),
    )
    return state


def create_scheduler(state: AppState) -> NotificationScheduler:
    interval = float(getattr(state.settings, "notify_interval_seconds", 60.0))
    return NotificationScheduler(
        state.task_store,
        state.notifier,
        state.clock,
        interval_seconds=interval,
    )
