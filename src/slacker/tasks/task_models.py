# src/slacker/tasks/task_models.py

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from enum import StrEnum

from ..errors import InvalidArgument

_HHMM_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


class RecurrenceType(StrEnum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @classmethod
    def from_db(cls, raw: str | None) -> RecurrenceType | None:
        """Unknown or missing types map to None (such tasks never match a date)."""
        if not raw:
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


class SortMode(StrEnum):
    DEFAULT = "default"
    ALPHABETICAL = "alphabetical"
    RESET_TIME = "reset-time"


@dataclass(slots=True, frozen=True)
class RecurrenceRule:
    """(type, value) pair deciding which calendar dates a task is scheduled on."""

    type: RecurrenceType | None
    value: str | None = None


@dataclass(slots=True)
class Task:
    id: int
    title: str
    recurrence_type: RecurrenceType | None
    recurrence_value: str | None
    created_at: str

    task_time: str | None = None
    reset_time: str | None = None

    @property
    def rule(self) -> RecurrenceRule:
        return RecurrenceRule(self.recurrence_type, self.recurrence_value)


@dataclass(slots=True, frozen=True)
class TaskView:
    task: Task
    completed: bool


# ---- parsing helpers ----


def parse_hhmm(raw: str | None) -> tuple[int, int] | None:
    """
    Parse a 24-hour "HH:MM" string into (hour, minute).

    Returns None for anything malformed; callers that need strictness use
    normalize_time() instead.
    """
    if raw is None:
        return None
    m = _HHMM_RE.match(str(raw).strip())
    if not m:
        return None
    hour, minute = int(m.group(1)), int(m.group(2))
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return None
    return hour, minute


def format_hhmm(hour: int, minute: int) -> str:
    return f"{hour:02d}:{minute:02d}"


def normalize_time(raw: str | None, *, field: str = "time") -> str | None:
    """Validate an optional HH:MM value and return it zero-padded ("9:05" -> "09:05")."""
    if raw is None or str(raw).strip() == "":
        return None
    parsed = parse_hhmm(raw)
    if parsed is None:
        raise InvalidArgument(f"{field} must be HH:MM (24h), got {raw!r}")
    return format_hhmm(*parsed)


def parse_iso_date(raw: str | date, *, field: str = "date") -> date:
    if isinstance(raw, date):
        return raw
    try:
        return date.fromisoformat(str(raw).strip())
    except ValueError as exc:
        raise InvalidArgument(f"{field} must be YYYY-MM-DD, got {raw!r}") from exc


def normalize_recurrence(
    recurrence_type: str | RecurrenceType,
    recurrence_value: str | int | Iterable[int] | None,
) -> tuple[RecurrenceType, str | None]:
    """
    Validate a recurrence rule for a new task and return its stored form.

    weekly  -> sorted, de-duplicated "d,d,..." with 0=Sunday..6=Saturday
    monthly -> "1".."31"
    daily   -> None
    """
    rtype = RecurrenceType.from_db(str(recurrence_type) if recurrence_type else None)
    if rtype is None:
        raise InvalidArgument(
            f"recurrence type must be one of daily/weekly/monthly, got {recurrence_type!r}"
        )

    if rtype == RecurrenceType.DAILY:
        return rtype, None

    if rtype == RecurrenceType.WEEKLY:
        if recurrence_value is None:
            raise InvalidArgument("weekly tasks need at least one weekday")
        if isinstance(recurrence_value, str):
            parts = [p.strip() for p in recurrence_value.split(",") if p.strip()]
        elif isinstance(recurrence_value, int):
            parts = [str(recurrence_value)]
        else:
            parts = [str(p) for p in recurrence_value]
        days: set[int] = set()
        for p in parts:
            try:
                d = int(p)
            except ValueError as exc:
                raise InvalidArgument(f"weekday must be an integer 0-6, got {p!r}") from exc
            if not 0 <= d <= 6:
                raise InvalidArgument(f"weekday must be 0-6 (0=Sunday), got {d}")
            days.add(d)
        if not days:
            raise InvalidArgument("weekly tasks need at least one weekday")
        return rtype, ",".join(str(d) for d in sorted(days))

    # monthly
    try:
        day = int(str(recurrence_value).strip()) if recurrence_value is not None else None
    except ValueError:
        day = None
    if day is None or not 1 <= day <= 31:
        raise InvalidArgument(f"monthly tasks need a day of month 1-31, got {recurrence_value!r}")
    return rtype, str(day)
