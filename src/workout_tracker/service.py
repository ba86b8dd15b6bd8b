"""Workout lifecycle: inbound user actions mapped to structured outcomes."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol

from workout_tracker.model import DailyTotal, User
from workout_tracker.sessions import SessionTracker
from workout_tracker.storage import WorkoutLedger

CALENDAR_COMMAND = "/calendar"


class Clock(Protocol):
    def now(self) -> datetime: ...


@dataclass(frozen=True)
class Prompt:
    """Unrecognized text; the user should be offered the start button."""


@dataclass(frozen=True)
class Started:
    start: datetime


@dataclass(frozen=True)
class Stopped:
    start: datetime
    session_duration: timedelta
    today_total: timedelta


@dataclass(frozen=True)
class NothingToStop:
    """Stop requested while no workout was running."""


@dataclass(frozen=True)
class Calendar:
    days: list[DailyTotal]


@dataclass(frozen=True)
class NoData:
    """Calendar requested by a user without any recorded workouts."""


Outcome = Prompt | Started | Stopped | NothingToStop | Calendar | NoData


class WorkoutService:
    """Drives the session tracker and the ledger for each inbound action.

    Every handler upserts the user first, so the ledger's foreign key holds
    for the records written afterwards. ``StorageError`` from the ledger is
    propagated unchanged; nothing is retried.
    """

    def __init__(
        self, tracker: SessionTracker, ledger: WorkoutLedger, clock: Clock
    ) -> None:
        self._tracker = tracker
        self._ledger = ledger
        self._clock = clock

    def on_user_message(self, user: User, text: str) -> Outcome:
        if text.strip() == CALENDAR_COMMAND:
            return self.on_calendar_request(user)
        self._ledger.upsert_user(user)
        return Prompt()

    def on_start_workout(self, user: User) -> Started:
        self._ledger.upsert_user(user)
        now = self._clock.now()
        self._tracker.start(user.user_id, now)
        return Started(start=now)

    def on_stop_workout(self, user: User) -> Stopped | NothingToStop:
        """Finish the running workout, record it and read back today's total.

        The session is consumed before the ledger write; if the write fails
        the workout is lost and the error propagates.
        """
        self._ledger.upsert_user(user)
        now = self._clock.now()
        result = self._tracker.stop(user.user_id, now)
        if not result.found or result.start is None or result.duration is None:
            return NothingToStop()

        self._ledger.record_workout(user.user_id, result.start, result.duration)
        total = self._ledger.total_duration_today(user.user_id, now)
        return Stopped(
            start=result.start,
            session_duration=result.duration,
            today_total=total,
        )

    def on_calendar_request(self, user: User) -> Calendar | NoData:
        self._ledger.upsert_user(user)
        days = self._ledger.workouts_by_day(user.user_id)
        if not days:
            return NoData()
        return Calendar(days=days)
