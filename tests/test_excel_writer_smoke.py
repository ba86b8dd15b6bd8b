from __future__ import annotations

from datetime import date, timedelta
from pathlib import Path
from typing import cast

from openpyxl import Workbook, load_workbook
from openpyxl.worksheet.worksheet import Worksheet

from workout_tracker.excel_writer import (
    ExcelLayout,
    _format_sheet,
    calendar_frame,
    write_calendar_xlsx,
)
from workout_tracker.model import DailyTotal

DAYS = [
    DailyTotal(day=date(2025, 3, 10), total=timedelta(seconds=135)),
    DailyTotal(day=date(2025, 3, 12), total=timedelta(hours=1, minutes=1, seconds=1)),
]


def test_calendar_frame_columns() -> None:
    df = calendar_frame(DAYS)
    assert list(df.columns) == ["weekday", "day", "total", "minutes"]
    assert list(df["weekday"]) == ["пн", "ср"]
    assert list(df["total"]) == ["2m 15s", "1h 1m 1s"]
    assert df.loc[0, "minutes"] == 2.25


def test_calendar_frame_empty() -> None:
    df = calendar_frame([])
    assert df.empty
    assert list(df.columns) == ["weekday", "day", "total", "minutes"]


def test_write_calendar_xlsx_happy_path_and_formatting(tmp_path: Path) -> None:
    out = tmp_path / "nested" / "out.xlsx"
    write_calendar_xlsx(DAYS, out, ExcelLayout())

    wb = load_workbook(out)
    ws = cast(Worksheet, wb[ExcelLayout().sheet_name])

    headers = [cell.value for cell in ws[1]]
    assert headers == ["День", "Дата", "Время", "Минуты"]
    assert ws.cell(row=2, column=1).value == "пн"
    assert ws.cell(row=2, column=3).value == "2m 15s"
    assert ws.cell(row=3, column=3).value == "1h 1m 1s"

    assert ws.freeze_panes == "A2"
    assert ws.cell(row=1, column=1).fill.fill_type == "solid"
    assert ws.cell(row=2, column=1).fill.fill_type is None
    assert ws.column_dimensions["A"].width == 6
    assert ws.cell(row=2, column=2).number_format == "dd.mm.yyyy"
    assert ws.cell(row=2, column=4).number_format == "0.00"


def test_format_sheet_handles_missing_headers() -> None:
    wb = Workbook()
    ws = cast(Worksheet, wb.active)
    ws.append(["Solo"])
    ws.append([1])

    _format_sheet(ws)

    assert ws.cell(row=1, column=1).font.bold is True
    assert ws.cell(row=2, column=1).alignment.horizontal == "center"
