# tests/fakes.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from slacker.core.ports import Notifier


class FixedClock:
    """
    Deterministic Clock for unit tests.

    - now() returns whatever the test set
    - set()/advance() move it explicitly
    """

    def __init__(self, current: datetime) -> None:
        self.current = current

    def now(self) -> datetime:
        return self.current

    def set(self, current: datetime) -> None:
        self.current = current

    def advance(self, **kwargs: float) -> None:
        self.current = self.current + timedelta(**kwargs)


@dataclass(slots=True)
class SentNotification:
    title: str
    body: str


@dataclass
class FakeNotifier(Notifier):
    """
    Fake Notifier used by scheduler tests (safe to call from the scheduler thread).
    """

    sent: list[SentNotification] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def notify(self, title: str, body: str) -> None:
        with self._lock:
            self.sent.append(SentNotification(title=title, body=body))
