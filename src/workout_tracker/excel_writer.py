"""Export of the workout calendar to a formatted Excel sheet."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from workout_tracker.formatting import format_duration_calendar
from workout_tracker.model import DailyTotal

_WEEKDAYS: tuple[str, ...] = ("пн", "вт", "ср", "чт", "пт", "сб", "вс")
_HEADER_FILL = "DDEBF7"

_HEADER_MAP: dict[str, str] = {
    "weekday": "День",
    "day": "Дата",
    "total": "Время",
    "minutes": "Минуты",
}


@dataclass(frozen=True)
class ExcelLayout:
    """Layout/formatting configuration for the calendar sheet."""

    sheet_name: str = "Календарь тренировок"


def calendar_frame(days: Sequence[DailyTotal]) -> pd.DataFrame:
    """One row per day: weekday, date, formatted total and minutes."""
    rows = [
        {
            "weekday": _WEEKDAYS[d.day.weekday()],
            "day": d.day,
            "total": format_duration_calendar(d.total),
            "minutes": round(d.total.total_seconds() / 60, 2),
        }
        for d in days
    ]
    return pd.DataFrame(rows, columns=list(_HEADER_MAP))


def write_calendar_xlsx(
    days: Sequence[DailyTotal], out_path: Path, layout: ExcelLayout
) -> None:
    """Write the per-day calendar as an XLSX file.

    Args:
        days: Daily totals, ascending by day.
        out_path: Output path for the XLSX file.
        layout: Excel layout parameters.
    """
    out_path.parent.mkdir(parents=True, exist_ok=True)

    export_df = calendar_frame(days).rename(columns=_HEADER_MAP)

    with pd.ExcelWriter(out_path, engine="openpyxl") as writer:
        export_df.to_excel(writer, index=False, sheet_name=layout.sheet_name)
        ws = writer.book[layout.sheet_name]
        _format_sheet(ws)


def _cell_border() -> Border:
    thin = Side(style="thin")
    return Border(left=thin, right=thin, top=thin, bottom=thin)


def _style_header_row(ws: Any) -> None:
    """Bold shaded header, kept visible while scrolling the calendar."""
    border = _cell_border()
    fill = PatternFill(fill_type="solid", start_color=_HEADER_FILL)
    for cell in ws[1]:
        cell.font = Font(bold=True)
        cell.fill = fill
        cell.alignment = Alignment(horizontal="center", vertical="center")
        cell.border = border
    ws.freeze_panes = "A2"


def _style_body_rows(ws: Any) -> None:
    border = _cell_border()
    center = Alignment(horizontal="center", vertical="center")
    for row in ws.iter_rows(min_row=2):
        for cell in row:
            cell.alignment = center
            cell.border = border


def _apply_column_widths(ws: Any) -> None:
    col_index = {str(cell.value): cell.column_letter for cell in ws[1]}
    widths = [("День", 6), ("Дата", 12), ("Время", 14), ("Минуты", 10)]
    for header, width in widths:
        letter = col_index.get(header)
        if letter is not None:
            ws.column_dimensions[letter].width = width


def _apply_number_formats(ws: Any) -> None:
    headers = [str(cell.value) for cell in ws[1]]
    fmt_map = {"Дата": "dd.mm.yyyy", "Минуты": "0.00"}
    for row in ws.iter_rows(min_row=2):
        for header, fmt in fmt_map.items():
            if header in headers:
                row[headers.index(header)].number_format = fmt


def _format_sheet(ws: Any) -> None:
    """Apply borders, widths and number formats to a worksheet."""
    _style_header_row(ws)
    _style_body_rows(ws)
    _apply_column_widths(ws)
    _apply_number_formats(ws)
