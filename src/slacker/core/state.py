# src/slacker/core/state.py

from __future__ import annotations

import threading
from collections.abc import Hashable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from ..tasks.task_models import SortMode
from .ports import Clock, Notifier, TaskRepo


class KeyedLocks:
    """
    Lazily created per-key locks (one per task id).

    Used to make toggle's check-then-write a critical section without
    serializing unrelated tasks.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[Hashable, threading.Lock] = {}

    def get(self, key: Hashable) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        with self.get(key):
            yield

    def discard(self, key: Hashable) -> None:
        with self._guard:
            self._locks.pop(key, None)

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


@dataclass
class AppState:
    """
    Shared application state (single-user, process-local).

    Contains:
    - settings (Settings or any compatible object)
    - clock, task repository and notifier ports
    - per-task toggle locks
    - console view state (selected date, sort mode)
    """

    settings: Any
    clock: Clock
    task_store: TaskRepo
    notifier: Notifier

    toggle_locks: KeyedLocks = field(default_factory=KeyedLocks)
    lock: threading.RLock = field(default_factory=threading.RLock)

    selected_date: date | None = None
    sort_mode: SortMode = SortMode.DEFAULT

    def today(self) -> date:
        return self.clock.now().date()

    def current_date(self) -> date:
        """Date the console is looking at (defaults to today)."""
        return self.selected_date or self.today()
