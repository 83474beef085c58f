"""Routine Assembler.

Turns distributed days into slots and derives every summary field.

Derived fields are ALWAYS recomputed from the slots, never patched:
- exercise_ids: distinct slot exercise ids, first-appearance order
- total_weekly_minutes: sum of slot estimated_minutes (authoritative; early
  stops and fallbacks mean it can differ from the weekly target)
- description: "Auto-generated routine for N days/week, M minutes/week"
"""

import uuid
from collections.abc import Iterable
from datetime import UTC, datetime

from pt_routines.catalog.models import BODY_AREA_LABELS, BodyArea
from pt_routines.planning.distribution import DayPlan
from pt_routines.planning.invariants import MAX_NAME_AREAS
from pt_routines.planning.profile import UserProfile
from pt_routines.routines.models import Routine, RoutineExerciseSlot

DEFAULT_ROUTINE_NAME = "Custom Routine"


def new_routine_id() -> str:
    return f"routine-{uuid.uuid4().hex[:12]}"


def routine_name(target_body_areas: Iterable[BodyArea]) -> str:
    """Name from up to three target areas, e.g. "Neck & Upper Back"."""
    labels = [BODY_AREA_LABELS[area] for area in list(target_body_areas)[:MAX_NAME_AREAS]]
    return " & ".join(labels) or DEFAULT_ROUTINE_NAME


def routine_description(days_per_week: int, total_weekly_minutes: int) -> str:
    return f"Auto-generated routine for {days_per_week} days/week, {total_weekly_minutes} minutes/week"


def build_slots(day_plans: Iterable[DayPlan]) -> list[RoutineExerciseSlot]:
    """Create slots with contiguous per-day order and generation-time minutes."""
    slots: list[RoutineExerciseSlot] = []
    counter = 1
    for plan in day_plans:
        for order, item in enumerate(plan.sequence):
            slots.append(
                RoutineExerciseSlot(
                    id=f"slot-{counter}",
                    exercise_id=item.id,
                    day_index=plan.day_index,
                    order=order,
                    estimated_minutes=item.minutes,
                )
            )
            counter += 1
    return slots


def derive_exercise_ids(slots: Iterable[RoutineExerciseSlot]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(slot.exercise_id for slot in slots))


def derive_total_minutes(slots: Iterable[RoutineExerciseSlot]) -> int:
    return sum(slot.estimated_minutes for slot in slots)


def build_routine(
    profile: UserProfile,
    day_plans: list[DayPlan],
    *,
    routine_id: str | None = None,
    now: datetime | None = None,
) -> Routine:
    """Assemble a complete Routine from distributed days.

    Args:
        profile: Profile used for generation (snapshotted by value)
        day_plans: Distributor output
        routine_id: Optional explicit id (generated when omitted)
        now: Optional timestamp for created/updated (UTC now when omitted)

    Returns:
        Fully consistent Routine
    """
    timestamp = now or datetime.now(UTC)
    slots = build_slots(day_plans)
    total = derive_total_minutes(slots)

    return Routine(
        id=routine_id or new_routine_id(),
        name=routine_name(profile.target_body_areas),
        description=routine_description(profile.days_per_week, total),
        created_at=timestamp,
        updated_at=timestamp,
        profile_snapshot=profile.model_copy(deep=True),
        exercise_ids=derive_exercise_ids(slots),
        slots=tuple(slots),
        days_per_week=profile.days_per_week,
        total_weekly_minutes=total,
        max_minutes_per_day=profile.max_minutes_per_day,
    )


def rederive_routine(
    routine: Routine,
    slots: Iterable[RoutineExerciseSlot],
    *,
    now: datetime | None = None,
) -> Routine:
    """Return a copy of the routine with new slots and re-derived totals."""
    new_slots = tuple(slots)
    total = derive_total_minutes(new_slots)
    return routine.model_copy(
        update={
            "slots": new_slots,
            "exercise_ids": derive_exercise_ids(new_slots),
            "total_weekly_minutes": total,
            "description": routine_description(routine.days_per_week, total),
            "updated_at": now or datetime.now(UTC),
        }
    )
