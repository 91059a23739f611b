# src/slacker/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage/notification delivery swappable and lets tests inject a
synthetic clock instead of the real wall-clock.
"""

from datetime import date, datetime
from typing import Protocol

from ..tasks.task_models import Task


class Clock(Protocol):
    """Source of the current local wall-clock time (naive datetime)."""

    def now(self) -> datetime: ...


class Notifier(Protocol):
    """
    Notification-delivery port.

    Fire-and-forget: the core decides what and when to notify, the
    implementation decides how (console line, desktop toast, ...).
    """

    def notify(self, title: str, body: str) -> None: ...


class TaskRepo(Protocol):
    # Tasks
    def insert_task(
            self,
            *,
            title: str,
            recurrence_type: str,
            recurrence_value: str | None,
            task_time: str | None,
            reset_time: str | None,
            created_at: str,
    ) -> int: ...

    def list_tasks(self) -> list[Task]: ...
    def get_task(self, task_id: int) -> Task | None: ...
    def delete_task(self, task_id: int) -> bool: ...

    # Completions
    def find_completion(self, task_id: int, completed_date: date) -> bool: ...
    def insert_completion(self, task_id: int, completed_date: date) -> bool: ...
    def delete_completion(self, task_id: int, completed_date: date) -> None: ...
