# src/slacker/core/clock.py

from __future__ import annotations

from datetime import datetime


class SystemClock:
    """Local wall-clock time, second precision is enough for minute ticks."""

    def now(self) -> datetime:
        return datetime.now().replace(microsecond=0)
