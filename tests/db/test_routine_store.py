"""Tests for the SQLAlchemy routine store."""

from datetime import date, timedelta

import pytest
from sqlalchemy.exc import OperationalError

from pt_routines.db.errors import RoutineNotFoundError, RoutineSaveError
from pt_routines.planning.generate import generate_routine
from pt_routines.scheduling.sessions import project_week_plan


@pytest.fixture
def routine(synthetic_catalog, lower_back_profile, fixed_now):
    return generate_routine(lower_back_profile, synthetic_catalog, routine_id="routine-a", now=fixed_now)


def test_save_and_load_routine(store, routine):
    """Test that a stored routine loads back equal, profile snapshot included."""
    store.save_routine(routine)

    loaded = store.get_routine("routine-a")

    assert loaded == routine
    assert loaded.profile_snapshot == routine.profile_snapshot


def test_save_replaces_existing(store, routine, fixed_now):
    store.save_routine(routine)
    renamed = routine.model_copy(update={"name": "Renamed", "updated_at": fixed_now + timedelta(hours=1)})

    store.save_routine(renamed)

    assert store.get_routine("routine-a").name == "Renamed"
    assert len(store.list_routines()) == 1


def test_missing_routine(store):
    assert store.get_routine("missing") is None
    with pytest.raises(RoutineNotFoundError):
        store.require_routine("missing")


def test_list_routines_most_recent_first(store, routine, fixed_now):
    older = routine.model_copy(update={"id": "routine-old", "updated_at": fixed_now - timedelta(days=1)})
    store.save_routine(older)
    store.save_routine(routine)

    assert [r.id for r in store.list_routines()] == ["routine-a", "routine-old"]


def test_active_routine_pointer(store, routine):
    assert store.get_active_routine_id() is None

    store.save_routine(routine)
    store.set_active_routine_id("routine-a")
    assert store.get_active_routine_id() == "routine-a"

    store.set_active_routine_id(None)
    assert store.get_active_routine_id() is None


def test_active_pointer_requires_stored_routine(store):
    with pytest.raises(RoutineNotFoundError):
        store.set_active_routine_id("missing")


def test_week_plans_round_trip(store, routine, fixed_now):
    plan = project_week_plan(routine, date(2026, 3, 2), now=fixed_now)
    store.save_week_plan(plan)

    assert store.get_week_plan(plan.id) == plan
    assert store.list_week_plans("routine-a") == [plan]
    assert store.list_week_plans("other") == []


def test_delete_cascades_and_clears_pointers(store, routine, fixed_now):
    """Test that deleting a routine removes its plans and dangling active pointers."""
    store.save_routine(routine)
    plan = project_week_plan(routine, date(2026, 3, 2), now=fixed_now)
    store.save_week_plan(plan)
    store.set_active_routine_id("routine-a")
    store.set_active_week_plan_id(plan.id)

    assert store.delete_routine("routine-a")

    assert store.get_routine("routine-a") is None
    assert store.get_week_plan(plan.id) is None
    assert store.get_active_routine_id() is None
    assert store.get_active_week_plan_id() is None


def test_delete_keeps_unrelated_pointers(store, routine, fixed_now):
    other = routine.model_copy(update={"id": "routine-b"})
    store.save_routine(routine)
    store.save_routine(other)
    store.set_active_routine_id("routine-b")

    store.delete_routine("routine-a")

    assert store.get_active_routine_id() == "routine-b"


def test_delete_missing_routine(store):
    assert store.delete_routine("missing") is False


def test_save_failure_wrapped(store, routine, monkeypatch):
    """Test that SQLAlchemy errors surface as RoutineSaveError."""

    def _fail(*args, **kwargs):
        raise OperationalError("INSERT", {}, Exception("disk I/O error"))

    monkeypatch.setattr("sqlalchemy.orm.Session.merge", _fail)

    with pytest.raises(RoutineSaveError):
        store.save_routine(routine)
    assert store.get_routine(routine.id) is None

