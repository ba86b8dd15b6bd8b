"""Configuration loaded from the environment plus the reference clock."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, tzinfo
from pathlib import Path

from dateutil import tz

from workout_tracker.errors import ConfigError

ENV_DB_PATH = "WORKOUT_TRACKER_DB"
ENV_TIMEZONE = "WORKOUT_TRACKER_TZ"
ENV_EXPORT_DIR = "WORKOUT_TRACKER_EXPORT_DIR"

DEFAULT_TIMEZONE = "UTC"


@dataclass(frozen=True)
class TrackerConfig:
    """Runtime configuration."""

    db_path: Path
    timezone: str = DEFAULT_TIMEZONE
    export_dir: Path = Path("exports")


def load_config(
    environ: Mapping[str, str] | None = None,
    *,
    db_path: str | None = None,
    timezone: str | None = None,
    export_dir: str | None = None,
) -> TrackerConfig:
    """Build config from env vars, with explicit arguments taking precedence.

    Args:
        environ: Environment mapping (defaults to ``os.environ``).
        db_path: Override for the SQLite file.
        timezone: Override for the reference clock timezone name.
        export_dir: Override for the export folder.

    Returns:
        Validated configuration.

    Raises:
        ConfigError: If the timezone name is unknown or a path is empty.
    """
    env = os.environ if environ is None else environ

    raw_db = db_path or env.get(ENV_DB_PATH) or "workout_tracker.sqlite3"
    raw_tz = timezone or env.get(ENV_TIMEZONE) or DEFAULT_TIMEZONE
    raw_export = export_dir or env.get(ENV_EXPORT_DIR) or "exports"

    if not raw_db.strip():
        raise ConfigError("Database path must not be empty")
    resolve_timezone(raw_tz)

    return TrackerConfig(
        db_path=Path(raw_db).expanduser(),
        timezone=raw_tz,
        export_dir=Path(raw_export).expanduser(),
    )


def resolve_timezone(name: str) -> tzinfo:
    """Return tzinfo for an IANA name, raising ConfigError when unknown."""
    zone = tz.gettz(name)
    if zone is None:
        raise ConfigError(f"Unknown timezone: {name!r}")
    return zone


def to_reference_frame(value: datetime, zone: tzinfo) -> datetime:
    """Express an instant as naive wall-clock time in ``zone``.

    Naive values are taken as already being in the reference frame.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone(zone).replace(tzinfo=None)


class ReferenceClock:
    """UTC clock paired with the timezone that defines calendar days.

    ``now`` returns aware UTC instants, so durations measured between two
    readings are real elapsed time even across DST changes. ``local``
    converts an instant to the clock's wall-clock frame.
    """

    def __init__(self, timezone: str = DEFAULT_TIMEZONE) -> None:
        self._tz = resolve_timezone(timezone)

    def now(self) -> datetime:
        return datetime.now(tz=tz.UTC)

    def local(self, instant: datetime) -> datetime:
        return to_reference_frame(instant, self._tz)


def start_of_day(reference_time: datetime) -> datetime:
    """Midnight of the reference time's calendar day."""
    return reference_time.replace(hour=0, minute=0, second=0, microsecond=0)
