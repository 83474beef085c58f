"""Routine Generation - Entry Point.

Profile -> eligibility -> candidate selection -> day distribution ->
assembly -> validation. Pure, synchronous, no I/O: the routine is fully
computed in memory and validated before anyone can persist it.
"""

from collections.abc import Iterable
from datetime import datetime

from loguru import logger

from pt_routines.catalog.models import Exercise
from pt_routines.config.settings import settings
from pt_routines.planning.assembler import build_routine
from pt_routines.planning.distribution import distribute_week
from pt_routines.planning.duration import DurationConvention
from pt_routines.planning.eligibility import EligibilityFilter
from pt_routines.planning.metrics import log_generation_metrics
from pt_routines.planning.profile import UserProfile
from pt_routines.planning.selection import select_candidates
from pt_routines.planning.validate import validate_routine
from pt_routines.routines.models import Routine


def generate_routine(
    profile: UserProfile,
    catalog: Iterable[Exercise],
    *,
    convention: DurationConvention | None = None,
    routine_id: str | None = None,
    now: datetime | None = None,
) -> Routine:
    """Generate a weekly routine for a profile.

    Args:
        profile: Profile constraints (snapshotted into the routine)
        catalog: Exercise catalog, injected by the caller
        convention: Duration convention for the whole run (settings default)
        routine_id: Optional explicit routine id
        now: Optional creation timestamp

    Returns:
        Validated Routine

    Raises:
        NoEligibleExercisesError: If no exercise matches the profile
        PlanningInvariantError: If the assembled routine is inconsistent
    """
    convention = convention or settings.duration_convention
    eligibility = EligibilityFilter.from_profile(profile)

    logger.debug(
        "generate_routine: starting",
        target_body_areas=[str(area) for area in profile.target_body_areas],
        intensity_mode=profile.intensity.mode,
        days_per_week=profile.days_per_week,
        max_minutes_per_day=profile.max_minutes_per_day,
        target_weekly_minutes=profile.target_weekly_minutes,
        convention=convention,
    )

    selection = select_candidates(catalog, profile, convention=convention, eligibility=eligibility)

    day_plans = distribute_week(
        selection.exercises,
        days_per_week=profile.days_per_week,
        max_minutes_per_day=profile.max_minutes_per_day,
        target_weekly_minutes=selection.target_weekly_minutes,
    )

    routine = build_routine(profile, day_plans, routine_id=routine_id, now=now)
    validate_routine(routine)
    log_generation_metrics(routine, selection, day_plans)
    return routine
