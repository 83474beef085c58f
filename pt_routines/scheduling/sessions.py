"""Week Plan Projection.

When a routine is confirmed with a start date, each slot becomes one
scheduled session dated start_date + day_index. The plan covers seven days
(start .. start + 6).

Plans built from a bare exercise selection are auto-populated instead: each
exercise goes to the least-loaded day that still fits the daily window.
"""

from datetime import UTC, date, datetime, timedelta
from typing import Literal

from loguru import logger
from pydantic import BaseModel, ConfigDict

from pt_routines.catalog.loader import ExerciseCatalog
from pt_routines.config.settings import settings
from pt_routines.planning.duration import DurationConvention, estimate_exercise_minutes
from pt_routines.routines.models import Routine

ScheduleStyle = Literal["auto-populate", "live-logging", "user-schedule"]

# Lower bound of the daily time window for routine-based plans
MIN_DAILY_WINDOW_MINUTES = 15
DAILY_WINDOW_SPREAD_MINUTES = 10
DAYS_IN_WEEK = 7


class ScheduledSession(BaseModel):
    """One exercise scheduled on a calendar date.

    Attributes:
        id: Session identifier ("session-<slot id>" for routine plans)
        exercise_id: Catalog exercise id
        session_date: Calendar date
        created_at: Creation timestamp
    """

    model_config = ConfigDict(frozen=True)

    id: str
    exercise_id: str
    session_date: date
    created_at: datetime


class DailyTimeWindow(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_minutes: int
    max_minutes: int


class WeekPlan(BaseModel):
    """A calendar week of scheduled sessions.

    Attributes:
        id: Plan identifier
        start_date: First day of the week
        end_date: Last day of the week (start + 6)
        schedule_style: How the plan was populated
        routine_id: Source routine, if projected from one
        selected_exercise_ids: Exercises selected for this week
        daily_time_window: Optional per-day minute window
        scheduled_sessions: Sessions in date order
        completed_sessions: Completed session ids
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """

    model_config = ConfigDict(frozen=True)

    id: str
    start_date: date
    end_date: date
    schedule_style: ScheduleStyle
    routine_id: str | None = None
    selected_exercise_ids: tuple[str, ...] = ()
    daily_time_window: DailyTimeWindow | None = None
    scheduled_sessions: tuple[ScheduledSession, ...] = ()
    completed_sessions: tuple[str, ...] = ()
    created_at: datetime
    updated_at: datetime


def project_week_plan(
    routine: Routine,
    start_date: date,
    *,
    now: datetime | None = None,
) -> WeekPlan:
    """Project a routine's slots onto calendar dates.

    Args:
        routine: Confirmed routine
        start_date: Date of day index 0
        now: Optional creation timestamp

    Returns:
        WeekPlan with one session per slot, ordered by (date, order)
    """
    timestamp = now or datetime.now(UTC)

    ordered_slots = sorted(routine.slots, key=lambda s: (s.day_index, s.order))
    sessions = tuple(
        ScheduledSession(
            id=f"session-{slot.id}",
            exercise_id=slot.exercise_id,
            session_date=start_date + timedelta(days=slot.day_index),
            created_at=timestamp,
        )
        for slot in ordered_slots
    )

    return WeekPlan(
        id=f"plan-routine-{routine.id}-{int(timestamp.timestamp() * 1000)}",
        start_date=start_date,
        end_date=start_date + timedelta(days=6),
        schedule_style="user-schedule",
        routine_id=routine.id,
        selected_exercise_ids=routine.exercise_ids,
        daily_time_window=DailyTimeWindow(
            min_minutes=max(MIN_DAILY_WINDOW_MINUTES, routine.max_minutes_per_day - DAILY_WINDOW_SPREAD_MINUTES),
            max_minutes=routine.max_minutes_per_day,
        ),
        scheduled_sessions=sessions,
        completed_sessions=(),
        created_at=timestamp,
        updated_at=timestamp,
    )


def sessions_for_date(plan: WeekPlan, day: date) -> list[ScheduledSession]:
    return [session for session in plan.scheduled_sessions if session.session_date == day]


def auto_populate_week_plan(
    plan: WeekPlan,
    catalog: ExerciseCatalog,
    *,
    convention: DurationConvention | None = None,
    now: datetime | None = None,
) -> WeekPlan:
    """Spread a plan's selected exercises over its seven days.

    Exercises are placed in catalog order. With a daily time window, each one
    goes to the least-loaded day whose total stays within max_minutes, or to
    the least-loaded day overall when none fits; ties go to the earlier day.
    Without a window, exercise i lands on day i % 7.

    Args:
        plan: Plan with selected_exercise_ids set
        catalog: Exercise catalog for durations
        convention: Duration convention (settings default when omitted)
        now: Optional update timestamp

    Returns:
        Copy of the plan with schedule_style "auto-populate" and new sessions
    """
    timestamp = now or datetime.now(UTC)
    convention = convention or settings.duration_convention

    selected = set(plan.selected_exercise_ids)
    exercises = [exercise for exercise in catalog if exercise.id in selected]
    missing = selected - {exercise.id for exercise in exercises}
    if missing:
        logger.warning(
            "Auto-populate: selected exercises not in catalog, skipping",
            plan_id=plan.id,
            missing=sorted(missing),
        )

    day_totals = [0] * DAYS_IN_WEEK
    placements: list[tuple[int, str]] = []
    for index, exercise in enumerate(exercises):
        if plan.daily_time_window is None:
            day_index = index % DAYS_IN_WEEK
        else:
            minutes = estimate_exercise_minutes(exercise, convention)
            fitting = [
                day for day in range(DAYS_IN_WEEK) if day_totals[day] + minutes <= plan.daily_time_window.max_minutes
            ]
            day_index = min(fitting or range(DAYS_IN_WEEK), key=lambda day: day_totals[day])
            day_totals[day_index] += minutes
        placements.append((day_index, exercise.id))

    sessions = tuple(
        ScheduledSession(
            id=f"session-{plan.id}-{index}",
            exercise_id=exercise_id,
            session_date=plan.start_date + timedelta(days=day_index),
            created_at=timestamp,
        )
        for index, (day_index, exercise_id) in enumerate(placements)
    )

    logger.info(
        "Week plan auto-populated",
        plan_id=plan.id,
        session_count=len(sessions),
        windowed=plan.daily_time_window is not None,
        overflow_days=sum(
            1
            for total in day_totals
            if plan.daily_time_window is not None and total > plan.daily_time_window.max_minutes
        ),
    )

    return plan.model_copy(
        update={
            "schedule_style": "auto-populate",
            "scheduled_sessions": tuple(sorted(sessions, key=lambda s: s.session_date)),
            "updated_at": timestamp,
        }
    )
