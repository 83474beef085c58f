"""Routine planning error types.

Routine validation raises PlanningInvariantError("INVALID_ROUTINE", details)
with one or more of these detail codes:
- EXERCISE_IDS_MISMATCH: exercise_ids differs from the distinct slot exercises
- TOTAL_MINUTES_MISMATCH: total_weekly_minutes differs from the slot sum
- NON_CONTIGUOUS_ORDER: a day's slot orders are not exactly 0..n-1
- DAY_INDEX_OUT_OF_RANGE: a slot day_index is outside 0..6
- DUPLICATE_SLOT_ID: two slots share an id
"""

from collections.abc import Iterable

NO_ELIGIBLE_EXERCISES_MESSAGE = "No exercises match your profile criteria. Please adjust your preferences."


class PlanningError(Exception):
    """Base exception for all routine planning errors."""

    pass


class NoEligibleExercisesError(PlanningError):
    """Raised when no catalog exercise passes the profile filters.

    The message is user-facing: it asks the user to relax constraints.
    Generation is not retried.

    Attributes:
        target_body_areas: Target areas of the profile that produced no candidates
    """

    def __init__(self, target_body_areas: Iterable[str] = ()) -> None:
        self.target_body_areas = [str(area) for area in target_body_areas]
        super().__init__(NO_ELIGIBLE_EXERCISES_MESSAGE)


class RoutineEditError(PlanningError):
    """Raised when a routine edit cannot be applied (unknown slot, bad day, unknown exercise)."""

    pass


class PlanningInvariantError(RuntimeError):
    """Raised when a routine invariant is violated.

    Attributes:
        code: Error code (e.g., "TOTAL_MINUTES_MISMATCH")
        details: List of error detail strings
    """

    def __init__(self, code: str, details: list[str]):
        self.code = code
        self.details = details
        super().__init__(f"{code}: {details}")
