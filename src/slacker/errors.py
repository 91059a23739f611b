# src/slacker/errors.py

"""
Error taxonomy shared by the store, the task API and the CLI.

- InvalidArgument: malformed input (date/time strings, empty title, bad recurrence)
- NotFound: an operation referenced a task id that does not exist
- StorageFailure: the underlying SQLite read/write failed (never retried)
"""

from __future__ import annotations


class SlackerError(Exception):
    """Base class for errors surfaced to callers of the task API."""


class InvalidArgument(SlackerError, ValueError):
    pass


class NotFound(SlackerError, LookupError):
    pass


class StorageFailure(SlackerError, RuntimeError):
    pass
