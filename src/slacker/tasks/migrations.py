# src/slacker/tasks/migrations.py

"""
Versioned schema migrations for the task database.

Each step is a plain function taking an open connection. Steps are applied in
order, recorded in `schema_migrations`, and written so that running one twice
(or against a database created by an older build without the version table)
is harmless.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Migration:
    version: int
    name: str
    apply: Callable[[sqlite3.Connection], None]


def _columns(conn: sqlite3.Connection, table: str) -> set[str]:
    rows = conn.execute(f"PRAGMA table_info({table})").fetchall()
    return {row[1] for row in rows}


def _table_exists(conn: sqlite3.Connection, table: str) -> bool:
    row = conn.execute(
        "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?", (table,)
    ).fetchone()
    return row is not None


def create_tasks_table(conn: sqlite3.Connection) -> None:
    # Pre-recurrence databases stored one-off todos; their rows cannot be
    # interpreted as recurring tasks, so the old tables are dropped.
    if _table_exists(conn, "tasks") and "recurrence_type" not in _columns(conn, "tasks"):
        logger.warning("Legacy tasks table without recurrence_type found; dropping it.")
        conn.execute("DROP TABLE IF EXISTS completions")
        conn.execute("DROP TABLE tasks")

    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS tasks (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            task_time TEXT,
            recurrence_type TEXT NOT NULL,
            recurrence_value TEXT,
            created_at TEXT NOT NULL
        )
        """
    )


def create_completions_table(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS completions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            task_id INTEGER NOT NULL,
            completed_date TEXT NOT NULL,
            UNIQUE(task_id, completed_date),
            FOREIGN KEY(task_id) REFERENCES tasks(id) ON DELETE CASCADE
        )
        """
    )


def add_reset_time_column(conn: sqlite3.Connection) -> None:
    if "reset_time" in _columns(conn, "tasks"):
        return
    conn.execute("ALTER TABLE tasks ADD COLUMN reset_time TEXT")
    logger.info("Migration: added column tasks.reset_time")


def add_indexes(conn: sqlite3.Connection) -> None:
    conn.execute("CREATE INDEX IF NOT EXISTS idx_tasks_created ON tasks(created_at, id)")
    conn.execute(
        "CREATE INDEX IF NOT EXISTS idx_completions_date ON completions(completed_date)"
    )


MIGRATIONS: tuple[Migration, ...] = (
    Migration(1, "create_tasks_table", create_tasks_table),
    Migration(2, "create_completions_table", create_completions_table),
    Migration(3, "add_reset_time_column", add_reset_time_column),
    Migration(4, "add_indexes", add_indexes),
)


def _ensure_version_table(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS schema_migrations (
            version INTEGER PRIMARY KEY,
            name TEXT NOT NULL,
            applied_at TEXT NOT NULL
        )
        """
    )


def applied_versions(conn: sqlite3.Connection) -> set[int]:
    _ensure_version_table(conn)
    return {int(row[0]) for row in conn.execute("SELECT version FROM schema_migrations")}


def migrate(
    conn: sqlite3.Connection,
    migrations: tuple[Migration, ...] = MIGRATIONS,
) -> list[int]:
    """
    Apply all pending migrations in version order, one transaction per step.

    Returns the versions applied by this call (empty when already up to date).
    """
    done = applied_versions(conn)
    conn.commit()

    applied: list[int] = []
    for mig in sorted(migrations, key=lambda m: m.version):
        if mig.version in done:
            continue
        try:
            mig.apply(conn)
            conn.execute(
                "INSERT INTO schema_migrations(version, name, applied_at) VALUES (?, ?, ?)",
                (mig.version, mig.name, datetime.now().isoformat(timespec="seconds")),
            )
            conn.commit()
        except Exception:
            conn.rollback()
            logger.exception("Migration %s (%s) failed", mig.version, mig.name)
            raise
        logger.info("Applied migration %s: %s", mig.version, mig.name)
        applied.append(mig.version)
    return applied
