"""Chat front end: turns service outcomes into texts and buttons."""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from workout_tracker.errors import StorageError
from workout_tracker.formatting import (
    format_day,
    format_duration,
    format_duration_calendar,
)
from workout_tracker.model import User
from workout_tracker.service import (
    CALENDAR_COMMAND,
    Calendar,
    NoData,
    NothingToStop,
    Outcome,
    Prompt,
    Started,
    Stopped,
    WorkoutService,
)

START_WORKOUT = "start_workout"
STOP_WORKOUT = "stop_workout"

START_BUTTON = ("🏋️ Начать тренировку", START_WORKOUT)
STOP_BUTTON = ("✅ Закончить тренировку", STOP_WORKOUT)

PROMPT_TEXT = "Нажми кнопку, чтобы начать тренировку"
STARTED_TEXT = "Тренировка началась!"
NOTHING_TO_STOP_TEXT = "Сначала начни тренировку."
NO_DATA_TEXT = "Нет данных о тренировках."
CALENDAR_HEADER = "Календарь тренировок:\n"
CALENDAR_ERROR_TEXT = "Ошибка при получении данных календаря"
STORAGE_ERROR_TEXT = "Не удалось выполнить операцию. Попробуй позже."


@dataclass(frozen=True)
class Reply:
    """Message to deliver, with inline buttons as ``(label, callback_data)``."""

    text: str
    buttons: list[tuple[str, str]] = field(default_factory=list)


def render(outcome: Outcome) -> Reply:
    """Render a service outcome for the chat."""
    if isinstance(outcome, Prompt):
        return Reply(PROMPT_TEXT, [START_BUTTON])
    if isinstance(outcome, Started):
        return Reply(STARTED_TEXT, [STOP_BUTTON])
    if isinstance(outcome, Stopped):
        text = (
            "Тренировка завершена! Длительность: "
            f"{format_duration(outcome.session_duration)}\n"
            f"Общее время сегодня: {format_duration(outcome.today_total)}"
        )
        return Reply(text)
    if isinstance(outcome, NothingToStop):
        return Reply(NOTHING_TO_STOP_TEXT)
    if isinstance(outcome, NoData):
        return Reply(NO_DATA_TEXT)
    if isinstance(outcome, Calendar):
        return Reply(render_calendar(outcome))
    raise TypeError(f"Unsupported outcome: {outcome!r}")


def render_calendar(outcome: Calendar) -> str:
    lines = [
        f"{format_day(d.day)} — {format_duration_calendar(d.total)}\n"
        for d in outcome.days
    ]
    return CALENDAR_HEADER + "".join(lines)


class ChatFrontend:
    """Dispatches transport input to the service and logs storage failures."""

    def __init__(self, service: WorkoutService) -> None:
        self._service = service

    def handle_message(self, user: User, text: str) -> Reply:
        try:
            outcome = self._service.on_user_message(user, text)
        except StorageError as exc:
            logger.error(
                "Storage failure while handling message",
                user_id=user.user_id,
                operation=exc.operation.value,
                error=str(exc),
            )
            if text.strip() == CALENDAR_COMMAND:
                return Reply(CALENDAR_ERROR_TEXT)
            return Reply(STORAGE_ERROR_TEXT)
        return render(outcome)

    def handle_callback(self, user: User, data: str) -> Reply | None:
        """Handle a button press; unknown callback data is ignored."""
        try:
            if data == START_WORKOUT:
                outcome: Outcome = self._service.on_start_workout(user)
            elif data == STOP_WORKOUT:
                outcome = self._service.on_stop_workout(user)
            else:
                logger.warning(
                    "Ignoring unknown callback", user_id=user.user_id, data=data
                )
                return None
        except StorageError as exc:
            logger.error(
                "Storage failure while handling callback",
                user_id=user.user_id,
                operation=exc.operation.value,
                error=str(exc),
            )
            return Reply(STORAGE_ERROR_TEXT)

        if isinstance(outcome, Stopped):
            logger.info(
                "Workout finished",
                user_id=user.user_id,
                seconds=outcome.session_duration.total_seconds(),
            )
        return render(outcome)
