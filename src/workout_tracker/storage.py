"""SQLite persistence for users and completed workouts."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timedelta
from pathlib import Path

from workout_tracker.aggregate import daily_totals, records_to_frame
from workout_tracker.config import (
    DEFAULT_TIMEZONE,
    resolve_timezone,
    start_of_day,
    to_reference_frame,
)
from workout_tracker.errors import LedgerOperation, StorageError
from workout_tracker.model import DailyTotal, User, WorkoutRecord

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY,
    username TEXT,
    first_name TEXT,
    last_name TEXT
);

CREATE TABLE IF NOT EXISTS workouts (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    start_time TEXT NOT NULL,
    duration_us INTEGER NOT NULL CHECK (duration_us >= 0),
    FOREIGN KEY(user_id) REFERENCES users(id)
);

CREATE INDEX IF NOT EXISTS idx_workouts_user_start
ON workouts(user_id, start_time);
"""


@contextmanager
def _wrap_errors(operation: LedgerOperation) -> Iterator[None]:
    try:
        yield
    except sqlite3.Error as exc:
        raise StorageError(operation, str(exc)) from exc


class WorkoutLedger:
    """Durable store of completed workouts.

    Start timestamps are stored as naive fixed-width ISO text in the
    reference timezone, so range filters compare correctly and calendar days
    follow that zone. Aware inputs are converted on the way in. Durations are
    stored as integer microseconds.
    """

    def __init__(self, db_path: Path, timezone: str = DEFAULT_TIMEZONE) -> None:
        """Create ledger and ensure schema exists."""
        self._db_path = db_path
        self._tz = resolve_timezone(timezone)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        with _wrap_errors(LedgerOperation.INIT_SCHEMA):
            self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.executescript(SCHEMA_SQL)
            conn.commit()

    def upsert_user(self, user: User) -> None:
        """Insert the user or refresh its display fields."""
        with _wrap_errors(LedgerOperation.UPSERT_USER), self._connect() as conn:
            conn.execute(
                """
                INSERT INTO users(id, username, first_name, last_name)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    username=excluded.username,
                    first_name=excluded.first_name,
                    last_name=excluded.last_name
                """,
                (user.user_id, user.username, user.first_name, user.last_name),
            )
            conn.commit()

    def record_workout(
        self, user_id: int, start: datetime, duration: timedelta
    ) -> int:
        """Append one completed workout.

        Args:
            user_id: Owner; must already exist in ``users``.
            start: Session start; aware values are converted to the reference
                timezone, naive ones are taken as already in it.
            duration: Non-negative session length.

        Returns:
            Generated record id.

        Raises:
            StorageError: If the user is unknown, the duration is negative or
                the store fails.
        """
        with _wrap_errors(LedgerOperation.RECORD_WORKOUT), self._connect() as conn:
            cur = conn.execute(
                """
                INSERT INTO workouts(user_id, start_time, duration_us)
                VALUES (?, ?, ?)
                """,
                (user_id, self._ts(start), _micros(duration)),
            )
            conn.commit()
            return int(cur.lastrowid)

    def total_duration_today(
        self, user_id: int, reference_time: datetime
    ) -> timedelta:
        """Sum of durations started on or after the reference day's midnight."""
        with _wrap_errors(LedgerOperation.TOTAL_TODAY), self._connect() as conn:
            row = conn.execute(
                """
                SELECT COALESCE(SUM(duration_us), 0) AS total_us
                FROM workouts
                WHERE user_id = ? AND start_time >= ?
                """,
                (user_id, self._ts(start_of_day(self._local(reference_time)))),
            ).fetchone()
        return timedelta(microseconds=int(row["total_us"]))

    def workouts_by_day(self, user_id: int) -> list[DailyTotal]:
        """Totals per calendar day for the whole history, ascending by day."""
        with _wrap_errors(LedgerOperation.WORKOUTS_BY_DAY):
            records = self._load_records(user_id)
        return daily_totals(records_to_frame(records))

    def _local(self, value: datetime) -> datetime:
        return to_reference_frame(value, self._tz)

    def _ts(self, value: datetime) -> str:
        return self._local(value).isoformat(timespec="microseconds")

    def _load_records(self, user_id: int) -> list[WorkoutRecord]:
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT id, user_id, start_time, duration_us
                FROM workouts
                WHERE user_id = ?
                ORDER BY start_time
                """,
                (user_id,),
            ).fetchall()
        return [
            WorkoutRecord(
                record_id=int(row["id"]),
                user_id=int(row["user_id"]),
                start_time=datetime.fromisoformat(row["start_time"]),
                duration=timedelta(microseconds=int(row["duration_us"])),
            )
            for row in rows
        ]


def _micros(value: timedelta) -> int:
    return value // timedelta(microseconds=1)
