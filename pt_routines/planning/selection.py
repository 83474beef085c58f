"""Candidate Selector.

Filters the catalog to eligible exercises, puts pain-management / posture
work first when the profile targets the spine or neck, and greedily collects
a working set sized to the weekly minute target.

Selection order is load-bearing: ties keep catalog order, so identical
inputs always produce the identical working set.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from loguru import logger

from pt_routines.catalog.models import Exercise
from pt_routines.planning.duration import DurationConvention, estimate_exercise_minutes
from pt_routines.planning.eligibility import EligibilityFilter
from pt_routines.planning.errors import NoEligibleExercisesError
from pt_routines.planning.invariants import (
    FALLBACK_MIN_EXERCISES,
    MIN_SELECTED_PER_DAY,
    PRIORITY_BODY_AREAS,
    PRIORITY_GOALS,
    WEEKLY_OVERSHOOT_FACTOR,
)
from pt_routines.planning.profile import UserProfile


@dataclass(frozen=True)
class EstimatedExercise:
    """An exercise paired with the minute estimate used for this run.

    Attributes:
        exercise: Catalog exercise
        minutes: Estimated minutes (captured once, copied onto slots)
    """

    exercise: Exercise
    minutes: int

    @property
    def id(self) -> str:
        return self.exercise.id


@dataclass(frozen=True)
class CandidateSelection:
    """Working set handed to the day distributor.

    Attributes:
        exercises: Selected exercises in priority order
        estimated_total_minutes: Sum of selected minute estimates
        target_weekly_minutes: Weekly target the selection was sized for
        eligible_count: Number of exercises that passed filtering
        used_fallback: Whether the top-N fallback produced the selection
    """

    exercises: tuple[EstimatedExercise, ...]
    estimated_total_minutes: int
    target_weekly_minutes: int
    eligible_count: int
    used_fallback: bool = False


def prioritize_candidates(candidates: list[Exercise], profile: UserProfile) -> list[Exercise]:
    """Stable-sort pain-management / posture exercises first.

    Only applies when the profile targets upper back, neck or lower back;
    otherwise the catalog order is returned unchanged.
    """
    if not any(area in PRIORITY_BODY_AREAS for area in profile.target_body_areas):
        return list(candidates)

    def _rank(exercise: Exercise) -> int:
        return 0 if any(goal in PRIORITY_GOALS for goal in exercise.goals) else 1

    return sorted(candidates, key=_rank)


def select_candidates(
    catalog: Iterable[Exercise],
    profile: UserProfile,
    *,
    convention: DurationConvention = "average",
    eligibility: EligibilityFilter | None = None,
) -> CandidateSelection:
    """Select the working set of exercises for a routine.

    Rules:
    - Only exercises passing body-area, equipment and intensity checks
    - Running minutes never exceed target x WEEKLY_OVERSHOOT_FACTOR
    - Stop once the target is reached AND days x 2 exercises are collected
    - Empty accumulation falls back to the top max(5, days) candidates

    Args:
        catalog: Exercise catalog (iteration order is the tie-break order)
        profile: Profile constraints
        convention: Duration convention for this run
        eligibility: Pre-built filter (built from the profile when omitted)

    Returns:
        CandidateSelection in priority order

    Raises:
        NoEligibleExercisesError: If no exercise passes filtering
    """
    eligibility = eligibility or EligibilityFilter.from_profile(profile)
    candidates = eligibility.filter_candidates(catalog)

    if not candidates:
        logger.info(
            "Candidate selection: no eligible exercises",
            target_body_areas=[str(area) for area in profile.target_body_areas],
            equipment_access=[str(item) for item in profile.equipment_access],
        )
        raise NoEligibleExercisesError(profile.target_body_areas)

    prioritized = prioritize_candidates(candidates, profile)

    target_weekly_minutes = profile.target_weekly_minutes
    max_total_minutes = target_weekly_minutes * WEEKLY_OVERSHOOT_FACTOR
    min_variety = profile.days_per_week * MIN_SELECTED_PER_DAY

    selected: list[EstimatedExercise] = []
    used_ids: set[str] = set()
    estimated_total = 0

    for exercise in prioritized:
        if exercise.id in used_ids:
            continue

        minutes = estimate_exercise_minutes(exercise, convention)
        if estimated_total + minutes <= max_total_minutes:
            selected.append(EstimatedExercise(exercise=exercise, minutes=minutes))
            used_ids.add(exercise.id)
            estimated_total += minutes

        if estimated_total >= target_weekly_minutes and len(selected) >= min_variety:
            break

    used_fallback = False
    if not selected:
        fallback_count = max(FALLBACK_MIN_EXERCISES, profile.days_per_week)
        selected = [
            EstimatedExercise(exercise=exercise, minutes=estimate_exercise_minutes(exercise, convention))
            for exercise in prioritized[:fallback_count]
        ]
        estimated_total = sum(item.minutes for item in selected)
        used_fallback = True
        logger.warning(
            "Candidate selection: budget admitted no exercise, using top candidates",
            fallback_count=len(selected),
            target_weekly_minutes=target_weekly_minutes,
        )

    logger.debug(
        "Candidate selection completed",
        eligible_count=len(candidates),
        selected_count=len(selected),
        estimated_total_minutes=estimated_total,
        target_weekly_minutes=target_weekly_minutes,
    )

    return CandidateSelection(
        exercises=tuple(selected),
        estimated_total_minutes=estimated_total,
        target_weekly_minutes=target_weekly_minutes,
        eligible_count=len(candidates),
        used_fallback=used_fallback,
    )
