"""CLI: local chat driver, calendar listing and Excel export."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import TextIO

from loguru import logger

from workout_tracker.chat import (
    START_WORKOUT,
    STOP_WORKOUT,
    ChatFrontend,
    Reply,
    render,
)
from workout_tracker.config import ReferenceClock, TrackerConfig, load_config
from workout_tracker.errors import ConfigError, StorageError
from workout_tracker.excel_writer import ExcelLayout, write_calendar_xlsx
from workout_tracker.model import User
from workout_tracker.service import NoData, WorkoutService
from workout_tracker.sessions import SessionTracker
from workout_tracker.storage import WorkoutLedger

_BUTTON_COMMANDS = {"start": START_WORKOUT, "stop": STOP_WORKOUT}


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argparse namespace.
    """
    parser = argparse.ArgumentParser(
        description="Учёт тренировок: старт/стоп и календарь по дням."
    )
    parser.add_argument("--db", default=None, help="SQLite file path.")
    parser.add_argument("--tz", default=None, help="Reference clock timezone.")

    sub = parser.add_subparsers(dest="command", required=True)
    for name, help_text in (
        ("chat", "Interactive session over stdin (start/stop/text)."),
        ("calendar", "Print per-day workout totals."),
        ("export", "Write per-day workout totals to Excel."),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("--user-id", type=int, required=True)
        cmd.add_argument("--username", default="")
        cmd.add_argument("--first-name", default="")
        cmd.add_argument("--last-name", default="")
        if name == "export":
            cmd.add_argument("--out", default=None, help="Output .xlsx path.")
    return parser.parse_args(argv)


def build_service(config: TrackerConfig) -> WorkoutService:
    return WorkoutService(
        tracker=SessionTracker(),
        ledger=WorkoutLedger(config.db_path, config.timezone),
        clock=ReferenceClock(config.timezone),
    )


def run_chat(
    frontend: ChatFrontend, user: User, stdin: TextIO, stdout: TextIO
) -> None:
    """Read lines until EOF; ``start``/``stop`` act as the buttons."""
    for line in stdin:
        text = line.strip()
        if not text:
            continue
        data = _BUTTON_COMMANDS.get(text.lower())
        if data is not None:
            reply = frontend.handle_callback(user, data)
        else:
            reply = frontend.handle_message(user, text)
        if reply is not None:
            _print_reply(reply, stdout)


def _print_reply(reply: Reply, stdout: TextIO) -> None:
    stdout.write(reply.text.rstrip("\n") + "\n")
    for label, data in reply.buttons:
        command = next(k for k, v in _BUTTON_COMMANDS.items() if v == data)
        stdout.write(f"  [{label}] -> {command}\n")


def _export_path(config: TrackerConfig, user: User, out: str | None) -> Path:
    if out is not None:
        return Path(out).expanduser()
    clock = ReferenceClock(config.timezone)
    ts = clock.local(clock.now()).strftime("%Y-%m-%d_%H-%M-%S")
    return config.export_dir / f"workouts_{user.user_id}_{ts}.xlsx"


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI.

    Returns:
        Exit code (0 on success, 1 on storage failure, 2 on bad config).
    """
    ns = parse_args(argv)
    try:
        config = load_config(db_path=ns.db, timezone=ns.tz)
    except ConfigError as exc:
        logger.error("Invalid configuration: {}", exc)
        return 2

    user = User(
        user_id=ns.user_id,
        username=ns.username,
        first_name=ns.first_name,
        last_name=ns.last_name,
    )
    try:
        service = build_service(config)
        if ns.command == "chat":
            run_chat(ChatFrontend(service), user, sys.stdin, sys.stdout)
        elif ns.command == "calendar":
            _print_reply(render(service.on_calendar_request(user)), sys.stdout)
        else:
            outcome = service.on_calendar_request(user)
            if isinstance(outcome, NoData):
                _print_reply(render(outcome), sys.stdout)
                return 0
            out_path = _export_path(config, user, ns.out)
            write_calendar_xlsx(outcome.days, out_path, ExcelLayout())
            print(f"OK: Output: {out_path}")
    except StorageError as exc:
        logger.error("Storage failure", operation=exc.operation.value, error=str(exc))
        return 1
    return 0
