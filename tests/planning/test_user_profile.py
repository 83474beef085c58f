"""Tests for profile validation and legacy shape normalization."""

import pytest
from pydantic import ValidationError

from pt_routines.catalog.models import BodyArea, Equipment, Intensity
from pt_routines.planning.profile import RangeIntensity, ToleranceIntensity, UserProfile


def _create_profile_data(**overrides) -> dict:
    data = {
        "target_body_areas": ["knee"],
        "intensity": {"mode": "tolerance", "target": "low"},
        "days_per_week": 3,
        "max_minutes_per_day": 20,
    }
    data.update(overrides)
    return data


def test_tolerance_intensity():
    """Test that the tagged tolerance variant is parsed."""
    profile = UserProfile.model_validate(_create_profile_data())
    assert profile.intensity == ToleranceIntensity(target=Intensity.LOW)


def test_range_intensity():
    """Test that the tagged range variant is parsed."""
    profile = UserProfile.model_validate(
        _create_profile_data(intensity={"mode": "range", "min": "low", "max": "medium"})
    )
    assert profile.intensity == RangeIntensity(min=Intensity.LOW, max=Intensity.MEDIUM)


def test_legacy_bare_intensity_string():
    """Test that a bare intensity string becomes a tolerance constraint."""
    profile = UserProfile.model_validate(_create_profile_data(intensity="medium"))
    assert profile.intensity == ToleranceIntensity(target=Intensity.MEDIUM)


def test_legacy_camel_case_range_profile():
    """Test that camelCase keys with intensityMin/intensityMax are normalized."""
    profile = UserProfile.model_validate(
        {
            "targetBodyAreas": ["neck", "upper_back"],
            "intensityMin": "low",
            "intensityMax": "medium",
            "equipmentAccess": ["chair"],
            "daysPerWeek": 4,
            "maxMinutesPerDay": 15,
            "maxMinutesPerWeek": 50,
        }
    )

    assert profile.target_body_areas == (BodyArea.NECK, BodyArea.UPPER_BACK)
    assert profile.intensity == RangeIntensity(min=Intensity.LOW, max=Intensity.MEDIUM)
    assert profile.equipment_access == (Equipment.CHAIR,)
    assert profile.days_per_week == 4
    assert profile.target_weekly_minutes == 50


def test_legacy_half_open_range():
    """Test that a missing range bound opens to the end of the scale."""
    data = _create_profile_data(intensity_min="medium")
    del data["intensity"]

    profile = UserProfile.model_validate(data)

    assert profile.intensity == RangeIntensity(min=Intensity.MEDIUM, max=Intensity.HIGH)


def test_range_min_above_max_rejected():
    """Test that a range with min above max is rejected."""
    with pytest.raises(ValidationError):
        UserProfile.model_validate(_create_profile_data(intensity={"mode": "range", "min": "high", "max": "low"}))


@pytest.mark.parametrize(
    "overrides",
    [
        {"target_body_areas": []},
        {"days_per_week": 0},
        {"days_per_week": 8},
        {"max_minutes_per_day": 0},
        {"max_minutes_per_week": 0},
    ],
)
def test_invalid_profiles_rejected(overrides):
    """Test that malformed profile input raises ValidationError."""
    with pytest.raises(ValidationError):
        UserProfile.model_validate(_create_profile_data(**overrides))


def test_missing_intensity_rejected():
    """Test that a profile without any intensity information is rejected."""
    data = _create_profile_data()
    del data["intensity"]
    with pytest.raises(ValidationError):
        UserProfile.model_validate(data)


def test_weekly_target_defaults_to_days_times_daily_max():
    """Test the weekly minute target default."""
    profile = UserProfile.model_validate(_create_profile_data(days_per_week=3, max_minutes_per_day=20))
    assert profile.target_weekly_minutes == 60
