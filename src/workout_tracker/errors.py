"""Exception types raised by the workout tracker."""

from __future__ import annotations

from enum import Enum


class LedgerOperation(str, Enum):
    """Ledger operation that can fail against the store."""

    INIT_SCHEMA = "init_schema"
    UPSERT_USER = "upsert_user"
    RECORD_WORKOUT = "record_workout"
    TOTAL_TODAY = "total_duration_today"
    WORKOUTS_BY_DAY = "workouts_by_day"


class WorkoutTrackerError(Exception):
    """Base class for tracker errors."""


class StorageError(WorkoutTrackerError):
    """Durable store failure on a write or a read.

    Attributes:
        operation: Ledger operation that failed.
    """

    def __init__(self, operation: LedgerOperation, message: str) -> None:
        super().__init__(f"{operation.value}: {message}")
        self.operation = operation


class ConfigError(WorkoutTrackerError):
    """Invalid configuration value."""
