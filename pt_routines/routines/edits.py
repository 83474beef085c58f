"""Routine edits as pure transforms.

Every edit is ``(Routine, edit) -> Routine``: slots are rebuilt, never
mutated in place, and exercise_ids / total_weekly_minutes / description are
re-derived from the new slots before the result is validated. Applying the
same swap twice yields the same routine as applying it once.

Supported edits:
- swap_slot: replace the exercise in one slot
- swap_day: replace every slot on that day holding the same exercise
- move_slot: move a slot to another day (appended last; source day renumbered)
"""

from datetime import datetime
from typing import Literal

from loguru import logger
from pydantic import BaseModel

from pt_routines.catalog.loader import ExerciseCatalog
from pt_routines.catalog.models import Exercise
from pt_routines.config.settings import settings
from pt_routines.planning.assembler import rederive_routine
from pt_routines.planning.duration import DurationConvention, estimate_exercise_minutes
from pt_routines.planning.eligibility import EligibilityFilter
from pt_routines.planning.errors import RoutineEditError
from pt_routines.planning.invariants import MAX_DAY_INDEX, MIN_DAY_INDEX
from pt_routines.planning.validate import validate_routine
from pt_routines.routines.models import Routine, RoutineExerciseSlot


class RoutineEdit(BaseModel):
    """Structured edit request for a routine.

    Attributes:
        change_type: Type of edit to apply
        slot_id: Slot the edit starts from
        replacement_exercise_id: Replacement exercise (swap_slot / swap_day)
        target_day_index: Destination day (move_slot)
        reason: Optional reason for the edit
    """

    change_type: Literal["swap_slot", "swap_day", "move_slot"]
    slot_id: str

    replacement_exercise_id: str | None = None
    target_day_index: int | None = None

    reason: str | None = None


def validate_routine_edit(edit: RoutineEdit) -> None:
    """Validate edit fields for its change type.

    Raises:
        RoutineEditError: If required fields are missing or out of range
    """
    if edit.change_type in {"swap_slot", "swap_day"} and not edit.replacement_exercise_id:
        raise RoutineEditError(f"{edit.change_type} requires replacement_exercise_id")
    if edit.change_type == "move_slot":
        if edit.target_day_index is None:
            raise RoutineEditError("move_slot requires target_day_index")
        if not MIN_DAY_INDEX <= edit.target_day_index <= MAX_DAY_INDEX:
            raise RoutineEditError(
                f"target_day_index must be between {MIN_DAY_INDEX} and {MAX_DAY_INDEX}, got {edit.target_day_index}"
            )


def _require_slot(routine: Routine, slot_id: str) -> RoutineExerciseSlot:
    slot = routine.get_slot(slot_id)
    if slot is None:
        raise RoutineEditError(f"Slot not found in routine {routine.id}: {slot_id}")
    return slot


def swap_slot(
    routine: Routine,
    slot_id: str,
    replacement: Exercise,
    *,
    convention: DurationConvention | None = None,
    now: datetime | None = None,
) -> Routine:
    """Replace the exercise of a single slot."""
    target = _require_slot(routine, slot_id)
    minutes = estimate_exercise_minutes(replacement, convention or settings.duration_convention)

    slots = [
        slot.model_copy(update={"exercise_id": replacement.id, "estimated_minutes": minutes})
        if slot.id == target.id
        else slot
        for slot in routine.slots
    ]
    updated = rederive_routine(routine, slots, now=now)
    validate_routine(updated)
    return updated


def swap_day(
    routine: Routine,
    slot_id: str,
    replacement: Exercise,
    *,
    convention: DurationConvention | None = None,
    now: datetime | None = None,
) -> Routine:
    """Replace every slot on the slot's day that holds the same exercise."""
    target = _require_slot(routine, slot_id)
    minutes = estimate_exercise_minutes(replacement, convention or settings.duration_convention)

    slots = [
        slot.model_copy(update={"exercise_id": replacement.id, "estimated_minutes": minutes})
        if slot.day_index == target.day_index and slot.exercise_id == target.exercise_id
        else slot
        for slot in routine.slots
    ]
    updated = rederive_routine(routine, slots, now=now)
    validate_routine(updated)
    return updated


def move_slot(
    routine: Routine,
    slot_id: str,
    target_day_index: int,
    *,
    now: datetime | None = None,
) -> Routine:
    """Move a slot to another day, keeping both days' orders contiguous."""
    moved = _require_slot(routine, slot_id)
    if not MIN_DAY_INDEX <= target_day_index <= MAX_DAY_INDEX:
        raise RoutineEditError(f"target_day_index out of range: {target_day_index}")
    if moved.day_index == target_day_index:
        return routine

    new_order = sum(1 for slot in routine.slots if slot.day_index == target_day_index)

    slots: list[RoutineExerciseSlot] = []
    for slot in routine.slots:
        if slot.id == moved.id:
            slots.append(slot.model_copy(update={"day_index": target_day_index, "order": new_order}))
        elif slot.day_index == moved.day_index and slot.order > moved.order:
            slots.append(slot.model_copy(update={"order": slot.order - 1}))
        else:
            slots.append(slot)

    updated = rederive_routine(routine, slots, now=now)
    validate_routine(updated)
    return updated


def apply_edit(
    routine: Routine,
    edit: RoutineEdit,
    catalog: ExerciseCatalog,
    *,
    convention: DurationConvention | None = None,
    now: datetime | None = None,
) -> Routine:
    """Apply a structured edit and return the new routine.

    Raises:
        RoutineEditError: If the edit is invalid for this routine, or a replacement
            exercise is outside the profile snapshot's equipment and intensity
        PlanningInvariantError: If the edited routine fails validation
    """
    validate_routine_edit(edit)

    logger.debug(
        "apply_edit",
        routine_id=routine.id,
        change_type=edit.change_type,
        slot_id=edit.slot_id,
        replacement_exercise_id=edit.replacement_exercise_id,
        target_day_index=edit.target_day_index,
    )

    if edit.change_type == "move_slot":
        # validate_routine_edit guarantees target_day_index is set
        return move_slot(routine, edit.slot_id, edit.target_day_index, now=now)  # type: ignore[arg-type]

    replacement = catalog.get(edit.replacement_exercise_id or "")
    if replacement is None:
        raise RoutineEditError(f"Replacement exercise not found in catalog: {edit.replacement_exercise_id}")
    if not EligibilityFilter.from_profile(routine.profile_snapshot).allows(replacement):
        raise RoutineEditError(
            f"Replacement exercise {replacement.id} does not fit the routine profile (equipment or intensity)"
        )

    if edit.change_type == "swap_day":
        return swap_day(routine, edit.slot_id, replacement, convention=convention, now=now)
    return swap_slot(routine, edit.slot_id, replacement, convention=convention, now=now)
