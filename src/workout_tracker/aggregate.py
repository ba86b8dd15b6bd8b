"""Daily aggregation of workout records."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import timedelta

import pandas as pd

from workout_tracker.model import DailyTotal, WorkoutRecord


def records_to_frame(records: Sequence[WorkoutRecord]) -> pd.DataFrame:
    """Convert records to a DataFrame with day and integer microsecond columns."""
    rows = [
        {
            "record_id": r.record_id,
            "start_time": r.start_time,
            "day": r.start_time.date(),
            "duration_us": r.duration // timedelta(microseconds=1),
        }
        for r in records
    ]
    df = pd.DataFrame(rows)
    if df.empty:
        return df
    return df.sort_values("start_time").reset_index(drop=True)


def daily_totals(records: pd.DataFrame) -> list[DailyTotal]:
    """Sum durations per calendar day, ordered by day.

    Durations are summed as integer microseconds so many short workouts do
    not accumulate rounding error.

    Args:
        records: Frame as built by ``records_to_frame``.

    Returns:
        One DailyTotal per day with at least one record, ascending.
    """
    if records.empty:
        return []
    g = records.groupby("day", as_index=False).agg(
        duration_us=("duration_us", "sum"),
    )
    g = g.sort_values("day").reset_index(drop=True)
    return [
        DailyTotal(day=row.day, total=timedelta(microseconds=int(row.duration_us)))
        for row in g.itertuples(index=False)
    ]
