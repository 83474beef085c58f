"""Generation Metrics.

Observability for routine generation: one structured record per run.
"""

from loguru import logger

from pt_routines.planning.distribution import DayPlan
from pt_routines.planning.selection import CandidateSelection
from pt_routines.routines.models import Routine


def log_generation_metrics(
    routine: Routine,
    selection: CandidateSelection,
    day_plans: list[DayPlan],
) -> None:
    """Log generation metrics.

    Logs:
    - Training days and slot count
    - Unique exercises used vs. eligible and selected
    - Total minutes vs. weekly target
    - Per-day minutes and fallback days

    Args:
        routine: Generated routine
        selection: Candidate selection used for the run
        day_plans: Distributor output
    """
    fallback_days = [plan.day_index for plan in day_plans if plan.used_fallback]

    logger.info(
        "Routine generation metrics",
        routine_id=routine.id,
        days_per_week=routine.days_per_week,
        slots=len(routine.slots),
        unique_exercises=len(routine.exercise_ids),
        eligible_exercises=selection.eligible_count,
        selected_exercises=len(selection.exercises),
        selector_fallback=selection.used_fallback,
        total_weekly_minutes=routine.total_weekly_minutes,
        target_weekly_minutes=selection.target_weekly_minutes,
        day_minutes={plan.day_index: plan.total_minutes for plan in day_plans},
        fallback_days=fallback_days,
    )
