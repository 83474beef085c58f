"""Tests for candidate selection."""

import pytest

from pt_routines.catalog.models import BodyArea, Equipment, Intensity
from pt_routines.planning.errors import NO_ELIGIBLE_EXERCISES_MESSAGE, NoEligibleExercisesError
from pt_routines.planning.profile import RangeIntensity, ToleranceIntensity, UserProfile
from pt_routines.planning.selection import prioritize_candidates, select_candidates


def _create_profile(
    areas=(BodyArea.LOWER_BACK,),
    *,
    intensity=None,
    equipment=(),
    days=3,
    minutes=20,
) -> UserProfile:
    return UserProfile(
        target_body_areas=areas,
        intensity=intensity or ToleranceIntensity(target=Intensity.LOW),
        equipment_access=equipment,
        days_per_week=days,
        max_minutes_per_day=minutes,
    )


def test_no_eligible_exercises_raises(synthetic_catalog):
    """Test that an empty candidate set raises with the user-facing message."""
    profile = _create_profile(
        areas=(BodyArea.WRIST,),
        intensity=RangeIntensity(min=Intensity.HIGH, max=Intensity.HIGH),
    )

    with pytest.raises(NoEligibleExercisesError) as exc_info:
        select_candidates(synthetic_catalog, profile)

    assert str(exc_info.value) == NO_ELIGIBLE_EXERCISES_MESSAGE
    assert exc_info.value.target_body_areas == ["wrist"]


def test_pain_and_posture_work_first_for_spine_targets(synthetic_catalog):
    """Test that pain-management / posture exercises lead for spine targets, stably."""
    profile = _create_profile(equipment=(Equipment.RESISTANCE_BAND,))

    selection = select_candidates(synthetic_catalog, profile)

    assert [item.id for item in selection.exercises] == ["lb_tilt", "lb_band_row", "lb_bridge", "lb_stretch"]
    assert selection.eligible_count == 4
    assert not selection.used_fallback


def test_no_reordering_for_other_targets(synthetic_catalog):
    """Test that targets outside upper back, neck and lower back keep catalog order."""
    profile = _create_profile(areas=(BodyArea.HIP, BodyArea.CORE))
    candidates = [synthetic_catalog.require(i) for i in ("lb_bridge", "hip_circle", "core_deadbug", "neck_tuck")]

    assert prioritize_candidates(candidates, profile) == candidates


def test_early_stop_at_target_and_variety(synthetic_catalog):
    """Test that selection stops once the target and days x 2 exercises are reached."""
    profile = _create_profile(equipment=(Equipment.RESISTANCE_BAND,), days=1, minutes=8)

    selection = select_candidates(synthetic_catalog, profile)

    assert [item.id for item in selection.exercises] == ["lb_tilt", "lb_band_row"]
    assert selection.estimated_total_minutes == 8


def test_budget_never_exceeds_overshoot(real_catalog):
    """Test that selected minutes stay within target x 1.3."""
    for days, minutes in [(1, 10), (3, 20), (5, 15), (7, 30)]:
        profile = _create_profile(
            areas=(BodyArea.CORE, BodyArea.HIP),
            intensity=ToleranceIntensity(target=Intensity.MEDIUM),
            days=days,
            minutes=minutes,
        )

        selection = select_candidates(real_catalog, profile)

        assert selection.estimated_total_minutes <= profile.target_weekly_minutes * 1.3
        assert selection.estimated_total_minutes == sum(item.minutes for item in selection.exercises)
        assert len({item.id for item in selection.exercises}) == len(selection.exercises)


def test_fallback_when_budget_admits_nothing(synthetic_catalog):
    """Test the top max(5, days) fallback when every exercise exceeds the budget."""
    profile = _create_profile(
        areas=(BodyArea.LOWER_BACK, BodyArea.HIP, BodyArea.CORE, BodyArea.NECK),
        intensity=ToleranceIntensity(target=Intensity.MEDIUM),
        days=1,
        minutes=1,
    )

    selection = select_candidates(synthetic_catalog, profile)

    assert selection.used_fallback
    assert [item.id for item in selection.exercises] == [
        "lb_tilt",
        "neck_tuck",
        "lb_bridge",
        "lb_plank",
        "lb_stretch",
    ]


def test_selection_is_deterministic(real_catalog, lower_back_profile):
    """Test that identical inputs give the identical working set."""
    first = select_candidates(real_catalog, lower_back_profile)
    second = select_candidates(real_catalog, lower_back_profile)

    assert first == second
