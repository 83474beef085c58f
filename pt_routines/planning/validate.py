"""Routine Invariant Validator.

Called before any routine is handed to storage, after generation and after
every edit. A routine either passes every check or is rejected whole.
"""

from collections import defaultdict

from pt_routines.planning.errors import PlanningInvariantError
from pt_routines.planning.invariants import MAX_DAY_INDEX, MIN_DAY_INDEX
from pt_routines.routines.models import Routine


def validate_routine(routine: Routine) -> None:
    """Validate derived fields and slot layout of a routine.

    Checks:
    - exercise_ids equals the distinct slot exercise ids, without duplicates
    - total_weekly_minutes equals the sum of slot minutes
    - every day_index is within 0..6
    - each day's orders are exactly 0..n-1
    - slot ids are unique

    Args:
        routine: Routine to validate

    Raises:
        PlanningInvariantError: If any invariant is violated
    """
    errors: list[str] = []

    slot_exercise_ids = {slot.exercise_id for slot in routine.slots}
    if set(routine.exercise_ids) != slot_exercise_ids or len(routine.exercise_ids) != len(slot_exercise_ids):
        errors.append("EXERCISE_IDS_MISMATCH")

    if routine.total_weekly_minutes != sum(slot.estimated_minutes for slot in routine.slots):
        errors.append("TOTAL_MINUTES_MISMATCH")

    if any(not MIN_DAY_INDEX <= slot.day_index <= MAX_DAY_INDEX for slot in routine.slots):
        errors.append("DAY_INDEX_OUT_OF_RANGE")

    orders_by_day: dict[int, list[int]] = defaultdict(list)
    for slot in routine.slots:
        orders_by_day[slot.day_index].append(slot.order)
    for orders in orders_by_day.values():
        if sorted(orders) != list(range(len(orders))):
            errors.append("NON_CONTIGUOUS_ORDER")
            break

    if len({slot.id for slot in routine.slots}) != len(routine.slots):
        errors.append("DUPLICATE_SLOT_ID")

    if errors:
        raise PlanningInvariantError("INVALID_ROUTINE", errors)
