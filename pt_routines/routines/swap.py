"""Swap Resolver.

Ranks replacement candidates for a placed exercise using the SAME
equipment/intensity eligibility as generation, evaluated against the
routine's profile snapshot (never the live, possibly edited profile).

Ranking: shares a body area (first), minute difference (ascending),
name (ascending). When no candidate shares an area within the time
tolerance, the pool widens to every eligible exercise so a swap always
has options while any eligible exercise exists.
"""

from dataclasses import dataclass

from loguru import logger

from pt_routines.catalog.loader import ExerciseCatalog
from pt_routines.catalog.models import Exercise
from pt_routines.config.settings import settings
from pt_routines.planning.duration import DurationConvention, estimate_exercise_minutes
from pt_routines.planning.eligibility import EligibilityFilter
from pt_routines.planning.profile import UserProfile
from pt_routines.routines.models import RoutineExerciseSlot


@dataclass(frozen=True)
class SwapCandidate:
    """A ranked replacement option.

    Attributes:
        exercise: Replacement exercise
        minutes: Its estimated minutes
        shares_body_area: Whether it shares a body area with the replaced exercise
        minute_difference: |minutes - slot estimated minutes|
    """

    exercise: Exercise
    minutes: int
    shares_body_area: bool
    minute_difference: int


def _rank_key(candidate: SwapCandidate) -> tuple[bool, int, str, str]:
    return (
        not candidate.shares_body_area,
        candidate.minute_difference,
        candidate.exercise.name.casefold(),
        candidate.exercise.id,
    )


def find_swap_candidates(
    slot: RoutineExerciseSlot,
    profile_snapshot: UserProfile,
    catalog: ExerciseCatalog,
    *,
    tolerance_min: int | None = None,
    convention: DurationConvention | None = None,
) -> list[SwapCandidate]:
    """Rank replacement candidates for a slot.

    Args:
        slot: Slot whose exercise is being replaced
        profile_snapshot: Profile snapshot of the owning routine
        catalog: Exercise catalog
        tolerance_min: Max minute difference for like-for-like matches
            (settings.swap_time_tolerance_min when omitted)
        convention: Duration convention (settings default when omitted)

    Returns:
        Ranked candidates; empty only when no other exercise is eligible
    """
    tolerance = settings.swap_time_tolerance_min if tolerance_min is None else tolerance_min
    convention = convention or settings.duration_convention
    eligibility = EligibilityFilter.from_profile(profile_snapshot)

    current = catalog.get(slot.exercise_id)
    current_areas = set(current.body_areas) if current is not None else set()

    eligible: list[SwapCandidate] = []
    for exercise in catalog:
        if exercise.id == slot.exercise_id or not eligibility.allows(exercise):
            continue
        minutes = estimate_exercise_minutes(exercise, convention)
        eligible.append(
            SwapCandidate(
                exercise=exercise,
                minutes=minutes,
                shares_body_area=any(area in current_areas for area in exercise.body_areas),
                minute_difference=abs(minutes - slot.estimated_minutes),
            )
        )

    similar = [c for c in eligible if c.shares_body_area and c.minute_difference <= tolerance]
    if similar:
        return sorted(similar, key=_rank_key)

    logger.info(
        "Swap candidates: no same-area match within tolerance, widening to eligible pool",
        slot_id=slot.id,
        exercise_id=slot.exercise_id,
        tolerance_min=tolerance,
        exercise_known=current is not None,
        eligible_count=len(eligible),
    )
    return sorted(eligible, key=_rank_key)
