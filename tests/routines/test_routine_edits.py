"""Tests for pure routine edits."""

import pytest

from pt_routines.planning.errors import RoutineEditError
from pt_routines.planning.generate import generate_routine
from pt_routines.routines.edits import RoutineEdit, apply_edit, move_slot, swap_day, swap_slot, validate_routine_edit


@pytest.fixture
def routine(synthetic_catalog, lower_back_profile, fixed_now):
    """Slots: day 0 tilt/bridge x2 (slot-1..4), day 2 stretch/tilt x3 (slot-5..10), day 4 bridge/stretch x2 (slot-11..14)."""
    return generate_routine(lower_back_profile, synthetic_catalog, routine_id="routine-test", now=fixed_now)


def test_fixture_layout(routine):
    assert routine.total_weekly_minutes == 55
    assert [s.exercise_id for s in routine.slots_for_day(0)] == ["lb_tilt", "lb_bridge", "lb_tilt", "lb_bridge"]


def test_swap_slot_replaces_one_slot(routine, synthetic_catalog, fixed_now):
    """Test that swap_slot changes one slot and re-derives totals."""
    updated = swap_slot(routine, "slot-1", synthetic_catalog.require("neck_tuck"), now=fixed_now)

    slot = updated.get_slot("slot-1")
    assert slot.exercise_id == "neck_tuck"
    assert slot.estimated_minutes == 2
    assert updated.get_slot("slot-3").exercise_id == "lb_tilt"
    assert updated.total_weekly_minutes == 53
    assert updated.exercise_ids == ("neck_tuck", "lb_bridge", "lb_tilt", "lb_stretch")
    assert updated.description == "Auto-generated routine for 3 days/week, 53 minutes/week"


def test_swap_is_idempotent(routine, synthetic_catalog, fixed_now):
    """Test that applying the same swap twice equals applying it once."""
    replacement = synthetic_catalog.require("lb_stretch")
    once = swap_slot(routine, "slot-2", replacement, now=fixed_now)
    twice = swap_slot(once, "slot-2", replacement, now=fixed_now)

    assert once == twice


def test_swap_does_not_mutate_original(routine, synthetic_catalog):
    swap_slot(routine, "slot-1", synthetic_catalog.require("neck_tuck"))
    assert routine.get_slot("slot-1").exercise_id == "lb_tilt"
    assert routine.total_weekly_minutes == 55


def test_swap_day_replaces_all_matching_slots_on_that_day(routine, synthetic_catalog, fixed_now):
    """Test that swap_day replaces every slot of the exercise on that day only."""
    updated = swap_day(routine, "slot-1", synthetic_catalog.require("neck_tuck"), now=fixed_now)

    assert [s.exercise_id for s in updated.slots_for_day(0)] == ["neck_tuck", "lb_bridge", "neck_tuck", "lb_bridge"]
    assert "lb_tilt" in [s.exercise_id for s in updated.slots_for_day(2)]
    assert updated.total_weekly_minutes == 51


def test_move_slot_keeps_orders_contiguous(routine, fixed_now):
    """Test that moving a slot appends it to the target day and renumbers the source day."""
    updated = move_slot(routine, "slot-2", 6, now=fixed_now)

    assert [(s.id, s.order) for s in updated.slots_for_day(0)] == [("slot-1", 0), ("slot-3", 1), ("slot-4", 2)]
    assert [(s.id, s.order) for s in updated.slots_for_day(6)] == [("slot-2", 0)]
    assert updated.training_days() == [0, 2, 4, 6]
    assert updated.total_weekly_minutes == 55


def test_move_slot_to_existing_day_appends(routine, fixed_now):
    updated = move_slot(routine, "slot-1", 4, now=fixed_now)

    day_four = updated.slots_for_day(4)
    assert day_four[-1].id == "slot-1"
    assert day_four[-1].order == 4


def test_move_slot_to_same_day_is_noop(routine):
    assert move_slot(routine, "slot-1", 0) is routine


def test_move_slot_out_of_range(routine):
    with pytest.raises(RoutineEditError):
        move_slot(routine, "slot-1", 7)


def test_unknown_slot_raises(routine, synthetic_catalog):
    with pytest.raises(RoutineEditError):
        swap_slot(routine, "slot-99", synthetic_catalog.require("neck_tuck"))


def test_apply_edit_dispatches(routine, synthetic_catalog, fixed_now):
    """Test apply_edit for each change type."""
    swapped = apply_edit(
        routine,
        RoutineEdit(change_type="swap_slot", slot_id="slot-1", replacement_exercise_id="neck_tuck"),
        synthetic_catalog,
        now=fixed_now,
    )
    assert swapped.get_slot("slot-1").exercise_id == "neck_tuck"

    moved = apply_edit(
        routine,
        RoutineEdit(change_type="move_slot", slot_id="slot-1", target_day_index=1),
        synthetic_catalog,
        now=fixed_now,
    )
    assert moved.get_slot("slot-1").day_index == 1


def test_apply_edit_unknown_replacement(routine, synthetic_catalog):
    edit = RoutineEdit(change_type="swap_slot", slot_id="slot-1", replacement_exercise_id="missing")
    with pytest.raises(RoutineEditError):
        apply_edit(routine, edit, synthetic_catalog)


@pytest.mark.parametrize(
    ("change_type", "exercise_id"),
    [
        ("swap_slot", "lb_band_row"),
        ("swap_day", "lb_band_row"),
        ("swap_slot", "lb_plank"),
    ],
)
def test_apply_edit_rejects_ineligible_replacement(routine, synthetic_catalog, change_type, exercise_id):
    """Test that a swap cannot bring in equipment or intensity the profile excludes.

    The profile is bodyweight-only with a low intensity target, so the band row
    (resistance band) and the plank (high) are both out.
    """
    edit = RoutineEdit(change_type=change_type, slot_id="slot-1", replacement_exercise_id=exercise_id)

    with pytest.raises(RoutineEditError, match=exercise_id):
        apply_edit(routine, edit, synthetic_catalog)

    assert routine.get_slot("slot-1").exercise_id == "lb_tilt"


@pytest.mark.parametrize(
    "edit",
    [
        RoutineEdit(change_type="swap_slot", slot_id="slot-1"),
        RoutineEdit(change_type="swap_day", slot_id="slot-1"),
        RoutineEdit(change_type="move_slot", slot_id="slot-1"),
        RoutineEdit(change_type="move_slot", slot_id="slot-1", target_day_index=-1),
    ],
)
def test_incomplete_edits_rejected(edit):
    with pytest.raises(RoutineEditError):
        validate_routine_edit(edit)
