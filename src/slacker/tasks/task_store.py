# src/slacker/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from collections.abc import Iterator
from datetime import date
from pathlib import Path

from ..errors import StorageFailure
from .migrations import migrate
from .task_models import RecurrenceType, Task

logger = logging.getLogger(__name__)


class TaskStore:
    """
    SQLite task + completion store.

    Schema changes go through the versioned steps in migrations.py; the store
    applies pending ones on construction.

    Thread-safety:
    - each method opens its own SQLite connection
    - sqlite3 errors are re-raised as StorageFailure
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        try:
            total = self.count_tasks()
        except StorageFailure:
            total = -1
        logger.info("TaskStore ready db=%s total=%s", self._db_path, total)

    @property
    def db_path(self) -> Path:
        return self._db_path

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA foreign_keys=ON")

    @contextlib.contextmanager
    def _session(self, op: str) -> Iterator[sqlite3.Connection]:
        try:
            conn = self._get_conn()
        except sqlite3.Error as exc:
            raise StorageFailure(f"{op}: cannot open {self._db_path}: {exc}") from exc
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            logger.error("TaskStore %s failed: %s", op, exc)
            raise StorageFailure(f"{op} failed: {exc}") from exc
        finally:
            conn.close()

    def _ensure_schema(self) -> None:
        with self._session("migrate") as conn:
            applied = migrate(conn)
        if applied:
            logger.info("TaskStore schema migrated to version %s", max(applied))

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=int(row["id"]),
            title=str(row["title"] or ""),
            recurrence_type=RecurrenceType.from_db(row["recurrence_type"]),
            recurrence_value=row["recurrence_value"],
            created_at=str(row["created_at"] or ""),
            task_time=row["task_time"] or None,
            reset_time=row["reset_time"] or None,
        )

    # ---- tasks ----

    def count_tasks(self) -> int:
        with self._session("count_tasks") as conn:
            (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
            return int(n)

    def insert_task(
        self,
        *,
        title: str,
        recurrence_type: str,
        recurrence_value: str | None,
        task_time: str | None,
        reset_time: str | None,
        created_at: str,
    ) -> int:
        with self._session("insert_task") as conn:
            cur = conn.execute(
                """
                INSERT INTO tasks(
                    title, task_time, recurrence_type, recurrence_value, reset_time, created_at
                )
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (title, task_time, str(recurrence_type), recurrence_value, reset_time, created_at),
            )
            rowid = cur.lastrowid
            if rowid is None:
                raise StorageFailure("SQLite did not return lastrowid for tasks insert")
            task_id = int(rowid)
        logger.debug(
            "Task added id=%s type=%s value=%s time=%s reset=%s",
            task_id,
            recurrence_type,
            recurrence_value,
            task_time,
            reset_time,
        )
        return task_id

    def list_tasks(self) -> list[Task]:
        with self._session("list_tasks") as conn:
            rows = conn.execute("SELECT * FROM tasks ORDER BY created_at ASC, id ASC").fetchall()
            return [self._row_to_task(r) for r in rows]

    def get_task(self, task_id: int) -> Task | None:
        with self._session("get_task") as conn:
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (int(task_id),)).fetchone()
            return self._row_to_task(row) if row else None

    def delete_task(self, task_id: int) -> bool:
        """Delete a task and its completions. Returns False if it did not exist."""
        with self._session("delete_task") as conn:
            conn.execute("DELETE FROM completions WHERE task_id = ?", (int(task_id),))
            cur = conn.execute("DELETE FROM tasks WHERE id = ?", (int(task_id),))
            deleted = cur.rowcount == 1
        if deleted:
            logger.debug("Task deleted id=%s", task_id)
        return deleted

    # ---- completions ----

    def find_completion(self, task_id: int, completed_date: date) -> bool:
        with self._session("find_completion") as conn:
            row = conn.execute(
                "SELECT 1 FROM completions WHERE task_id = ? AND completed_date = ?",
                (int(task_id), completed_date.isoformat()),
            ).fetchone()
            return row is not None

    def insert_completion(self, task_id: int, completed_date: date) -> bool:
        """
        Record a completion. Returns False when the (task, date) row already
        exists; the UNIQUE constraint makes a racing second insert a no-op.
        """
        with self._session("insert_completion") as conn:
            try:
                conn.execute(
                    "INSERT INTO completions(task_id, completed_date) VALUES (?, ?)",
                    (int(task_id), completed_date.isoformat()),
                )
            except sqlite3.IntegrityError as exc:
                # FK violations (unknown task id) still surface as StorageFailure.
                if "UNIQUE" not in str(exc).upper():
                    raise
                logger.debug(
                    "Completion already present task_id=%s date=%s", task_id, completed_date
                )
                return False
        return True

    def delete_completion(self, task_id: int, completed_date: date) -> None:
        with self._session("delete_completion") as conn:
            conn.execute(
                "DELETE FROM completions WHERE task_id = ? AND completed_date = ?",
                (int(task_id), completed_date.isoformat()),
            )

    def count_completions(self, task_id: int | None = None) -> int:
        with self._session("count_completions") as conn:
            if task_id is None:
                (n,) = conn.execute("SELECT COUNT(*) FROM completions").fetchone()
            else:
                (n,) = conn.execute(
                    "SELECT COUNT(*) FROM completions WHERE task_id = ?", (int(task_id),)
                ).fetchone()
            return int(n)
