"""Typed models for users, workout records and daily totals."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta


@dataclass(frozen=True)
class User:
    """Chat user identified by a stable numeric id.

    Display fields are stored as-is and never used for logic.
    """

    user_id: int
    username: str = ""
    first_name: str = ""
    last_name: str = ""


@dataclass(frozen=True)
class WorkoutRecord:
    """One completed workout as stored in the ledger."""

    record_id: int
    user_id: int
    start_time: datetime
    duration: timedelta


@dataclass(frozen=True)
class DailyTotal:
    """Sum of workout durations for one calendar day."""

    day: date
    total: timedelta
