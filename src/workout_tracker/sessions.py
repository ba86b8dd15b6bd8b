"""In-memory tracking of workouts in progress."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timedelta

from dateutil import tz


@dataclass(frozen=True)
class StopResult:
    """Outcome of stopping a user's session.

    ``start`` and ``duration`` are ``None`` when ``found`` is False.
    """

    found: bool
    start: datetime | None = None
    duration: timedelta | None = None


class SessionTracker:
    """Per-user Idle/Active state machine.

    A user is Active while the map holds their start timestamp. State lives
    only in memory and is lost when the process exits. A second ``start``
    replaces the running session's start time (last write wins).
    """

    def __init__(self) -> None:
        self._starts: dict[int, datetime] = {}
        self._lock = threading.Lock()

    def start(self, user_id: int, now: datetime) -> None:
        """Mark the user Active from ``now``."""
        with self._lock:
            self._starts[user_id] = _as_utc(now)

    def stop(self, user_id: int, now: datetime) -> StopResult:
        """End the user's session, returning its start and duration.

        Args:
            user_id: Numeric user id.
            now: Stop timestamp. Aware values are compared as UTC instants.

        Returns:
            StopResult with ``found=False`` if the user was Idle.
        """
        with self._lock:
            start = self._starts.pop(user_id, None)
        if start is None:
            return StopResult(found=False)
        return StopResult(found=True, start=start, duration=_as_utc(now) - start)

    def active_start(self, user_id: int) -> datetime | None:
        with self._lock:
            return self._starts.get(user_id)


def _as_utc(value: datetime) -> datetime:
    # Aware values sharing a tzinfo subtract as wall-clock times; UTC avoids it.
    if value.tzinfo is None:
        return value
    return value.astimezone(tz.UTC)
