"""Routine Store.

Persists routines and week plans as JSON documents plus two pointers
(active routine id, active week plan id).

Rules:
- Only validated routines are written; the store never repairs a routine
- Deleting a routine cascades to its week plans and clears any active
  pointer left dangling
- Every SQLAlchemy failure is logged and re-raised as a StorageError
"""

from loguru import logger
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from pt_routines.db.errors import RoutineNotFoundError, RoutineSaveError, StorageError
from pt_routines.db.models import AppStateRecord, RoutineRecord, WeekPlanRecord
from pt_routines.db.session import get_session_factory, session_scope
from pt_routines.routines.models import Routine
from pt_routines.scheduling.sessions import WeekPlan

ACTIVE_ROUTINE_KEY = "active_routine_id"
ACTIVE_WEEK_PLAN_KEY = "active_week_plan_id"


class RoutineStore:
    """SQLAlchemy-backed routine and week plan storage."""

    def __init__(self, session_factory: sessionmaker[Session] | None = None) -> None:
        self._session_factory = session_factory or get_session_factory()

    def _session(self):
        return session_scope(self._session_factory)

    # Routines

    def save_routine(self, routine: Routine) -> None:
        """Insert or replace a routine.

        Raises:
            RoutineSaveError: If the write fails
        """
        try:
            with self._session() as session:
                session.merge(
                    RoutineRecord(
                        id=routine.id,
                        name=routine.name,
                        payload=routine.model_dump_json(),
                        created_at=routine.created_at,
                        updated_at=routine.updated_at,
                    )
                )
        except SQLAlchemyError as e:
            logger.error("Failed to save routine", routine_id=routine.id, error=str(e))
            raise RoutineSaveError(f"Failed to save routine {routine.id}") from e

        logger.debug("Routine saved", routine_id=routine.id, slot_count=len(routine.slots))

    def get_routine(self, routine_id: str) -> Routine | None:
        try:
            with self._session() as session:
                record = session.get(RoutineRecord, routine_id)
                payload = record.payload if record is not None else None
        except SQLAlchemyError as e:
            logger.error("Failed to load routine", routine_id=routine_id, error=str(e))
            raise StorageError(f"Failed to load routine {routine_id}") from e

        if payload is None:
            return None
        return Routine.model_validate_json(payload)

    def require_routine(self, routine_id: str) -> Routine:
        routine = self.get_routine(routine_id)
        if routine is None:
            raise RoutineNotFoundError(routine_id)
        return routine

    def list_routines(self) -> list[Routine]:
        """All routines, most recently updated first."""
        try:
            with self._session() as session:
                payloads = list(
                    session.execute(
                        select(RoutineRecord.payload).order_by(RoutineRecord.updated_at.desc(), RoutineRecord.id)
                    ).scalars()
                )
        except SQLAlchemyError as e:
            logger.error("Failed to list routines", error=str(e))
            raise StorageError("Failed to list routines") from e

        return [Routine.model_validate_json(payload) for payload in payloads]

    def delete_routine(self, routine_id: str) -> bool:
        """Delete a routine, its week plans and any pointer left dangling.

        Returns:
            True if the routine existed
        """
        try:
            with self._session() as session:
                record = session.get(RoutineRecord, routine_id)
                if record is None:
                    return False

                plan_ids = set(
                    session.execute(select(WeekPlanRecord.id).where(WeekPlanRecord.routine_id == routine_id)).scalars()
                )
                session.execute(delete(WeekPlanRecord).where(WeekPlanRecord.routine_id == routine_id))
                session.delete(record)

                active_routine = session.get(AppStateRecord, ACTIVE_ROUTINE_KEY)
                if active_routine is not None and active_routine.value == routine_id:
                    active_routine.value = None

                active_plan = session.get(AppStateRecord, ACTIVE_WEEK_PLAN_KEY)
                if active_plan is not None and active_plan.value in plan_ids:
                    active_plan.value = None
        except SQLAlchemyError as e:
            logger.error("Failed to delete routine", routine_id=routine_id, error=str(e))
            raise StorageError(f"Failed to delete routine {routine_id}") from e

        logger.info("Routine deleted", routine_id=routine_id, week_plans_deleted=len(plan_ids))
        return True

    # Week plans

    def save_week_plan(self, plan: WeekPlan) -> None:
        """Insert or replace a week plan.

        Raises:
            RoutineSaveError: If the write fails
        """
        try:
            with self._session() as session:
                session.merge(
                    WeekPlanRecord(
                        id=plan.id,
                        routine_id=plan.routine_id,
                        start_date=plan.start_date,
                        payload=plan.model_dump_json(),
                        created_at=plan.created_at,
                        updated_at=plan.updated_at,
                    )
                )
        except SQLAlchemyError as e:
            logger.error("Failed to save week plan", plan_id=plan.id, error=str(e))
            raise RoutineSaveError(f"Failed to save week plan {plan.id}") from e

    def get_week_plan(self, plan_id: str) -> WeekPlan | None:
        try:
            with self._session() as session:
                record = session.get(WeekPlanRecord, plan_id)
                payload = record.payload if record is not None else None
        except SQLAlchemyError as e:
            logger.error("Failed to load week plan", plan_id=plan_id, error=str(e))
            raise StorageError(f"Failed to load week plan {plan_id}") from e

        if payload is None:
            return None
        return WeekPlan.model_validate_json(payload)

    def list_week_plans(self, routine_id: str | None = None) -> list[WeekPlan]:
        """Week plans ordered by start date, optionally for one routine."""
        query = select(WeekPlanRecord.payload).order_by(WeekPlanRecord.start_date, WeekPlanRecord.id)
        if routine_id is not None:
            query = query.where(WeekPlanRecord.routine_id == routine_id)
        try:
            with self._session() as session:
                payloads = list(session.execute(query).scalars())
        except SQLAlchemyError as e:
            logger.error("Failed to list week plans", routine_id=routine_id, error=str(e))
            raise StorageError("Failed to list week plans") from e

        return [WeekPlan.model_validate_json(payload) for payload in payloads]

    # Active pointers

    def _get_pointer(self, key: str) -> str | None:
        try:
            with self._session() as session:
                record = session.get(AppStateRecord, key)
                return record.value if record is not None else None
        except SQLAlchemyError as e:
            logger.error("Failed to read app state", key=key, error=str(e))
            raise StorageError(f"Failed to read {key}") from e

    def _set_pointer(self, key: str, value: str | None) -> None:
        try:
            with self._session() as session:
                session.merge(AppStateRecord(key=key, value=value))
        except SQLAlchemyError as e:
            logger.error("Failed to write app state", key=key, error=str(e))
            raise RoutineSaveError(f"Failed to write {key}") from e

    def get_active_routine_id(self) -> str | None:
        return self._get_pointer(ACTIVE_ROUTINE_KEY)

    def set_active_routine_id(self, routine_id: str | None) -> None:
        """Point at the active routine (None clears it).

        Raises:
            RoutineNotFoundError: If routine_id is not stored
        """
        if routine_id is not None and self.get_routine(routine_id) is None:
            raise RoutineNotFoundError(routine_id)
        self._set_pointer(ACTIVE_ROUTINE_KEY, routine_id)

    def get_active_week_plan_id(self) -> str | None:
        return self._get_pointer(ACTIVE_WEEK_PLAN_KEY)

    def set_active_week_plan_id(self, plan_id: str | None) -> None:
        self._set_pointer(ACTIVE_WEEK_PLAN_KEY, plan_id)

