"""End-to-end tests for the workout lifecycle over a real SQLite ledger."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from pathlib import Path

import pytest
from dateutil import tz

from workout_tracker.errors import LedgerOperation, StorageError
from workout_tracker.formatting import format_duration, format_duration_calendar
from workout_tracker.model import DailyTotal, User
from workout_tracker.service import (
    Calendar,
    NoData,
    NothingToStop,
    Prompt,
    Started,
    Stopped,
    WorkoutService,
)
from workout_tracker.sessions import SessionTracker
from workout_tracker.storage import WorkoutLedger

USER = User(user_id=42, username="anna", first_name="Anna", last_name="Ivanova")


class _FixedClock:
    def __init__(self, now: datetime) -> None:
        self.current = now

    def now(self) -> datetime:
        return self.current


@pytest.fixture
def clock() -> _FixedClock:
    return _FixedClock(datetime(2025, 3, 10, 10, 0, 0))


@pytest.fixture
def ledger(tmp_path: Path) -> WorkoutLedger:
    return WorkoutLedger(tmp_path / "ledger.sqlite3")


@pytest.fixture
def service(ledger: WorkoutLedger, clock: _FixedClock) -> WorkoutService:
    return WorkoutService(tracker=SessionTracker(), ledger=ledger, clock=clock)


def test_start_then_stop_records_workout(
    service: WorkoutService, clock: _FixedClock, ledger: WorkoutLedger
) -> None:
    assert service.on_start_workout(USER) == Started(start=clock.current)
    clock.current = datetime(2025, 3, 10, 10, 1, 30)

    outcome = service.on_stop_workout(USER)

    assert isinstance(outcome, Stopped)
    assert outcome.session_duration == timedelta(minutes=1, seconds=30)
    assert outcome.today_total == timedelta(minutes=1, seconds=30)
    assert format_duration(outcome.session_duration) == "1 мин 30 сек"
    assert format_duration_calendar(outcome.today_total) == "1m 30s"
    assert ledger.workouts_by_day(USER.user_id) == [
        DailyTotal(day=date(2025, 3, 10), total=timedelta(seconds=90))
    ]


def test_stop_without_start_leaves_ledger_empty(
    service: WorkoutService, ledger: WorkoutLedger
) -> None:
    assert service.on_stop_workout(USER) == NothingToStop()
    assert ledger.workouts_by_day(USER.user_id) == []


def test_today_total_accumulates_sessions(
    service: WorkoutService, clock: _FixedClock
) -> None:
    service.on_start_workout(USER)
    clock.current += timedelta(seconds=45)
    service.on_stop_workout(USER)

    clock.current += timedelta(minutes=10)
    service.on_start_workout(USER)
    clock.current += timedelta(seconds=90)
    outcome = service.on_stop_workout(USER)

    assert isinstance(outcome, Stopped)
    assert outcome.session_duration == timedelta(seconds=90)
    assert outcome.today_total == timedelta(seconds=135)


def test_calendar_request_and_no_data(
    service: WorkoutService, clock: _FixedClock
) -> None:
    assert service.on_calendar_request(USER) == NoData()

    service.on_start_workout(USER)
    clock.current += timedelta(seconds=45)
    service.on_stop_workout(USER)
    service.on_start_workout(USER)
    clock.current += timedelta(seconds=90)
    service.on_stop_workout(USER)

    outcome = service.on_user_message(USER, "/calendar")
    assert isinstance(outcome, Calendar)
    assert outcome.days == [
        DailyTotal(day=date(2025, 3, 10), total=timedelta(seconds=135))
    ]
    assert format_duration_calendar(outcome.days[0].total) == "2m 15s"


def test_other_text_prompts(service: WorkoutService) -> None:
    assert service.on_user_message(USER, "привет") == Prompt()


def test_failed_write_consumes_session(
    service: WorkoutService,
    ledger: WorkoutLedger,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    service.on_start_workout(USER)

    def _fail(*_args: object) -> int:
        raise StorageError(LedgerOperation.RECORD_WORKOUT, "disk full")

    monkeypatch.setattr(ledger, "record_workout", _fail)

    with pytest.raises(StorageError) as excinfo:
        service.on_stop_workout(USER)
    assert excinfo.value.operation is LedgerOperation.RECORD_WORKOUT

    monkeypatch.undo()
    assert service.on_stop_workout(USER) == NothingToStop()


@pytest.mark.parametrize(
    ("start", "local_day"),
    [
        # Europe/Berlin switches to summer time at 01:00Z.
        (datetime(2026, 3, 29, 0, 50, tzinfo=tz.UTC), date(2026, 3, 29)),
        # Europe/Berlin switches back to winter time at 01:00Z.
        (datetime(2026, 10, 25, 0, 50, tzinfo=tz.UTC), date(2026, 10, 25)),
    ],
)
def test_stop_across_dst_change_records_elapsed_time(
    tmp_path: Path, start: datetime, local_day: date
) -> None:
    clock = _FixedClock(start)
    ledger = WorkoutLedger(tmp_path / "berlin.sqlite3", "Europe/Berlin")
    service = WorkoutService(tracker=SessionTracker(), ledger=ledger, clock=clock)

    service.on_start_workout(USER)
    clock.current = start + timedelta(minutes=20)
    outcome = service.on_stop_workout(USER)

    assert isinstance(outcome, Stopped)
    assert outcome.session_duration == timedelta(minutes=20)
    assert outcome.today_total == timedelta(minutes=20)
    assert ledger.workouts_by_day(USER.user_id) == [
        DailyTotal(day=local_day, total=timedelta(minutes=20))
    ]
