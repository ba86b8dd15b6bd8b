"""Duration and day labels shown to the user.

The short form is used right after a workout ends; the calendar form is used
per day in the history listing. They round differently on purpose.
"""

from __future__ import annotations

from datetime import date, timedelta

_MICROS_PER_SECOND = 1_000_000


def _total_micros(d: timedelta) -> int:
    return d // timedelta(microseconds=1)


def _rounded_seconds(d: timedelta) -> int:
    """Whole seconds, rounding half away from zero."""
    micros = _total_micros(d)
    sign = -1 if micros < 0 else 1
    seconds, rem = divmod(abs(micros), _MICROS_PER_SECOND)
    if rem * 2 >= _MICROS_PER_SECOND:
        seconds += 1
    return sign * seconds


def _truncated_seconds(d: timedelta) -> int:
    """Whole seconds, truncating toward zero."""
    micros = _total_micros(d)
    sign = -1 if micros < 0 else 1
    return sign * (abs(micros) // _MICROS_PER_SECOND)


def format_duration(d: timedelta) -> str:
    """Short form, e.g. ``"1 мин 30 сек"`` or ``"42 сек"``."""
    minutes, seconds = divmod(_rounded_seconds(d), 60)
    if minutes > 0:
        return f"{minutes} мин {seconds} сек"
    return f"{seconds} сек"


def format_duration_calendar(d: timedelta) -> str:
    """Calendar form, e.g. ``"1h 2m 3s"``, ``"2m 15s"`` or ``"9s"``.

    Args:
        d: Duration to format. Sub-second parts are truncated.

    Returns:
        Compact label with hours and minutes omitted when zero.
    """
    h, rest = divmod(_truncated_seconds(d), 3600)
    m, s = divmod(rest, 60)
    if h > 0:
        return f"{h}h {m}m {s}s"
    if m > 0:
        return f"{m}m {s}s"
    return f"{s}s"


def format_day(day: date) -> str:
    """Day label used in calendar listings (``DD.MM.YYYY``)."""
    return day.strftime("%d.%m.%Y")
