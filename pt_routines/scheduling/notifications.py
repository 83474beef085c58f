"""Session reminder planning.

Reminders are only planned for sessions inside the planning window
[today, today + planning_window_days]:
- day-before reminder at reminder_day_before_hour (19:00)
- day-of reminder at reminder_day_of_hour (09:00)
Each reminder is dropped if its trigger time is already past.

Delivery belongs to the platform notification service, reached through the
ReminderScheduler protocol. A delivery failure for one reminder is logged
and does not stop the rest.
"""

from collections.abc import Iterable
from datetime import date, datetime, time, timedelta
from typing import Literal, Protocol

from loguru import logger
from pydantic import BaseModel, ConfigDict

from pt_routines.catalog.loader import ExerciseCatalog
from pt_routines.catalog.models import Exercise
from pt_routines.config.settings import settings
from pt_routines.scheduling.sessions import ScheduledSession

ReminderKind = Literal["day-before", "day-of"]


class Reminder(BaseModel):
    """A reminder to hand to the notification service.

    Attributes:
        session_id: Scheduled session the reminder is for
        exercise_id: Exercise of the session
        kind: "day-before" or "day-of"
        title: Notification title
        body: Notification body
        trigger_at: Local time to fire
    """

    model_config = ConfigDict(frozen=True)

    session_id: str
    exercise_id: str
    kind: ReminderKind
    title: str
    body: str
    trigger_at: datetime


class ReminderDeliveryError(RuntimeError):
    """Raised by a ReminderScheduler when the platform rejects a reminder."""

    pass


class ReminderScheduler(Protocol):
    """Platform notification service."""

    def has_permission(self) -> bool: ...

    def cancel_all(self) -> None: ...

    def schedule(self, reminder: Reminder) -> str: ...


def is_within_planning_window(day: date, today: date, window_days: int | None = None) -> bool:
    """Whether a date falls in [today, today + window_days]."""
    window = settings.planning_window_days if window_days is None else window_days
    return today <= day <= today + timedelta(days=window)


def _at(day: date, hour: int, like: datetime) -> datetime:
    return datetime.combine(day, time(hour=hour), tzinfo=like.tzinfo)


def plan_session_reminders(
    session: ScheduledSession,
    exercise: Exercise,
    *,
    now: datetime | None = None,
    window_days: int | None = None,
) -> list[Reminder]:
    """Plan the reminders for one session.

    Args:
        session: Scheduled session
        exercise: Exercise of the session (for the message text)
        now: Current local time (datetime.now() when omitted)
        window_days: Planning window override

    Returns:
        Zero, one or two reminders, in trigger order
    """
    current = now or datetime.now()
    if not is_within_planning_window(session.session_date, current.date(), window_days):
        return []

    reminders: list[Reminder] = []

    day_before = _at(session.session_date - timedelta(days=1), settings.reminder_day_before_hour, current)
    if day_before > current:
        reminders.append(
            Reminder(
                session_id=session.id,
                exercise_id=exercise.id,
                kind="day-before",
                title="PT Session Tomorrow!",
                body=f"Don't forget: {exercise.name} is scheduled for tomorrow.",
                trigger_at=day_before,
            )
        )

    day_of = _at(session.session_date, settings.reminder_day_of_hour, current)
    if day_of > current:
        reminders.append(
            Reminder(
                session_id=session.id,
                exercise_id=exercise.id,
                kind="day-of",
                title="Time for Your PT Session!",
                body=f"{exercise.name} is scheduled for today.",
                trigger_at=day_of,
            )
        )

    return reminders


def plan_reminders(
    sessions: Iterable[ScheduledSession],
    catalog: ExerciseCatalog,
    *,
    now: datetime | None = None,
    window_days: int | None = None,
) -> list[Reminder]:
    """Plan reminders for many sessions; sessions with unknown exercises are skipped."""
    reminders: list[Reminder] = []
    for session in sessions:
        exercise = catalog.get(session.exercise_id)
        if exercise is None:
            logger.warning(
                "Reminder planning: unknown exercise, skipping session",
                session_id=session.id,
                exercise_id=session.exercise_id,
            )
            continue
        reminders.extend(plan_session_reminders(session, exercise, now=now, window_days=window_days))
    return reminders


def reschedule_reminders(
    sessions: Iterable[ScheduledSession],
    catalog: ExerciseCatalog,
    scheduler: ReminderScheduler,
    *,
    now: datetime | None = None,
) -> list[str]:
    """Replace all scheduled reminders with reminders for these sessions.

    Args:
        sessions: Sessions to remind about
        catalog: Exercise catalog
        scheduler: Platform notification service
        now: Current local time

    Returns:
        Ids returned by the scheduler for reminders that were accepted
    """
    scheduler.cancel_all()

    if not scheduler.has_permission():
        logger.info("Reminder scheduling: notification permission not granted, skipping")
        return []

    scheduled_ids: list[str] = []
    for reminder in plan_reminders(sessions, catalog, now=now):
        try:
            scheduled_ids.append(scheduler.schedule(reminder))
        except ReminderDeliveryError as e:
            logger.error(
                "Reminder scheduling failed",
                error=str(e),
                session_id=reminder.session_id,
                kind=reminder.kind,
            )

    logger.debug("Reminder scheduling completed", scheduled_count=len(scheduled_ids))
    return scheduled_ids
