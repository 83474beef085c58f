"""Routine service.

In-process facade used by the app screens and the CLI. Generation and edits
are computed and validated in memory first; only a routine that passed
validation is handed to the store, so a failure never leaves a partial
write behind.
"""

from datetime import UTC, date, datetime, timedelta

from pt_routines.catalog.loader import ExerciseCatalog
from pt_routines.catalog.models import BodyArea, Equipment
from pt_routines.config.settings import settings
from pt_routines.core.logger import routine_logger
from pt_routines.db.errors import RoutineNotFoundError
from pt_routines.db.repository import RoutineStore
from pt_routines.planning.assembler import DEFAULT_ROUTINE_NAME
from pt_routines.planning.duration import DurationConvention
from pt_routines.planning.errors import RoutineEditError
from pt_routines.planning.generate import generate_routine
from pt_routines.planning.profile import IntensityConstraint, UserProfile
from pt_routines.routines.edits import RoutineEdit, apply_edit
from pt_routines.routines.models import Routine
from pt_routines.routines.swap import SwapCandidate, find_swap_candidates
from pt_routines.scheduling.notifications import ReminderScheduler, reschedule_reminders
from pt_routines.scheduling.sessions import DailyTimeWindow, WeekPlan, auto_populate_week_plan, project_week_plan

CUSTOM_PROFILE_ID = "temp"


class RoutineService:
    """Create, edit, store and schedule routines.

    Args:
        store: Routine store
        catalog: Exercise catalog shared by generation and swaps
        convention: Duration convention (settings default when omitted)
    """

    def __init__(
        self,
        store: RoutineStore,
        catalog: ExerciseCatalog,
        *,
        convention: DurationConvention | None = None,
    ) -> None:
        self.store = store
        self.catalog = catalog
        self.convention: DurationConvention = convention or settings.duration_convention

    def create_routine_from_profile(
        self,
        profile: UserProfile,
        *,
        save: bool = True,
        now: datetime | None = None,
    ) -> Routine:
        """Generate a routine for a profile and optionally store it.

        Raises:
            NoEligibleExercisesError: If no exercise matches the profile
            RoutineSaveError: If storing fails
        """
        routine = generate_routine(profile, self.catalog, convention=self.convention, now=now)
        if save:
            self.store.save_routine(routine)
        routine_logger(routine.id, profile.id).info(
            "Routine created",
            total_weekly_minutes=routine.total_weekly_minutes,
            saved=save,
        )
        return routine

    def create_routine_from_custom_input(
        self,
        *,
        target_body_areas: list[BodyArea],
        intensity: IntensityConstraint | str,
        equipment_access: list[Equipment],
        days_per_week: int,
        max_minutes_per_day: int,
        save: bool = True,
        now: datetime | None = None,
    ) -> Routine:
        """Generate a routine from ad-hoc input without touching the user's profile.

        The weekly budget defaults to days x per-day minutes.
        """
        timestamp = now or datetime.now(UTC)
        profile = UserProfile.model_validate(
            {
                "id": CUSTOM_PROFILE_ID,
                "name": DEFAULT_ROUTINE_NAME,
                "target_body_areas": target_body_areas,
                "intensity": intensity,
                "equipment_access": equipment_access,
                "days_per_week": days_per_week,
                "max_minutes_per_day": max_minutes_per_day,
                "max_minutes_per_week": days_per_week * max_minutes_per_day,
                "created_at": timestamp,
                "updated_at": timestamp,
            }
        )
        return self.create_routine_from_profile(profile, save=save, now=timestamp)

    def get_routine(self, routine_id: str) -> Routine:
        """Raises RoutineNotFoundError if the id is unknown."""
        return self.store.require_routine(routine_id)

    def list_routines(self) -> list[Routine]:
        return self.store.list_routines()

    def save_routine(self, routine: Routine, *, now: datetime | None = None) -> Routine:
        """Store a routine with updated_at bumped; returns the stored copy."""
        updated = routine.model_copy(update={"updated_at": now or datetime.now(UTC)})
        self.store.save_routine(updated)
        return updated

    def delete_routine(self, routine_id: str) -> None:
        """Delete a routine with its week plans.

        Raises:
            RoutineNotFoundError: If the id is unknown
        """
        if not self.store.delete_routine(routine_id):
            raise RoutineNotFoundError(routine_id)

    def set_active_routine(self, routine_id: str | None) -> None:
        self.store.set_active_routine_id(routine_id)

    def get_active_routine(self) -> Routine | None:
        routine_id = self.store.get_active_routine_id()
        if routine_id is None:
            return None
        return self.store.get_routine(routine_id)

    def swap_candidates(
        self,
        routine_id: str,
        slot_id: str,
        *,
        tolerance_min: int | None = None,
    ) -> list[SwapCandidate]:
        """Ranked replacements for a slot, judged against the routine's profile snapshot.

        Raises:
            RoutineNotFoundError: If the routine id is unknown
            RoutineEditError: If the slot is not in the routine
        """
        routine = self.get_routine(routine_id)
        slot = routine.get_slot(slot_id)
        if slot is None:
            raise RoutineEditError(f"Slot not found in routine {routine.id}: {slot_id}")
        return find_swap_candidates(
            slot,
            routine.profile_snapshot,
            self.catalog,
            tolerance_min=tolerance_min,
            convention=self.convention,
        )

    def edit_routine(self, routine_id: str, edit: RoutineEdit, *, now: datetime | None = None) -> Routine:
        """Apply an edit and store the result.

        Raises:
            RoutineNotFoundError: If the routine id is unknown
            RoutineEditError: If the edit does not apply
            PlanningInvariantError: If the edited routine is inconsistent
            RoutineSaveError: If storing fails
        """
        routine = self.get_routine(routine_id)
        updated = apply_edit(routine, edit, self.catalog, convention=self.convention, now=now)
        self.store.save_routine(updated)
        routine_logger(routine.id, routine.profile_snapshot.id).info(
            "Routine edited",
            change_type=edit.change_type,
            total_weekly_minutes=updated.total_weekly_minutes,
        )
        return updated

    def confirm_and_start(
        self,
        routine_id: str,
        start_date: date,
        *,
        scheduler: ReminderScheduler | None = None,
        now: datetime | None = None,
    ) -> WeekPlan:
        """Project a routine onto a week, store it as the active plan and schedule reminders.

        Reminder delivery problems are logged by the scheduler step and never
        undo the stored plan.

        Raises:
            RoutineNotFoundError: If the routine id is unknown
            RoutineSaveError: If storing fails
        """
        routine = self.get_routine(routine_id)
        plan = project_week_plan(routine, start_date, now=now)

        self.store.save_week_plan(plan)
        self.store.set_active_week_plan_id(plan.id)
        self.store.set_active_routine_id(routine.id)

        routine_logger(routine.id, routine.profile_snapshot.id).info(
            "Routine confirmed",
            plan_id=plan.id,
            start_date=start_date.isoformat(),
            session_count=len(plan.scheduled_sessions),
        )

        if scheduler is not None:
            reschedule_reminders(plan.scheduled_sessions, self.catalog, scheduler, now=now)

        return plan

    def create_auto_populated_week_plan(
        self,
        exercise_ids: list[str],
        start_date: date,
        *,
        daily_time_window: DailyTimeWindow | None = None,
        now: datetime | None = None,
    ) -> WeekPlan:
        """Build a week plan from a bare exercise selection and store it as the active plan.

        Raises:
            RoutineSaveError: If storing fails
        """
        timestamp = now or datetime.now(UTC)
        draft = WeekPlan(
            id=f"plan-{int(timestamp.timestamp() * 1000)}",
            start_date=start_date,
            end_date=start_date + timedelta(days=6),
            schedule_style="auto-populate",
            selected_exercise_ids=tuple(exercise_ids),
            daily_time_window=daily_time_window,
            created_at=timestamp,
            updated_at=timestamp,
        )
        plan = auto_populate_week_plan(draft, self.catalog, convention=self.convention, now=timestamp)

        self.store.save_week_plan(plan)
        self.store.set_active_week_plan_id(plan.id)
        return plan

    def get_active_week_plan(self) -> WeekPlan | None:
        plan_id = self.store.get_active_week_plan_id()
        if plan_id is None:
            return None
        return self.store.get_week_plan(plan_id)
