"""Root conftest for all tests.

This file makes shared fixtures available across all test modules.
"""

from datetime import UTC, datetime

import pytest

from pt_routines.catalog.loader import ExerciseCatalog, get_default_catalog
from pt_routines.catalog.models import BodyArea, Exercise, Intensity
from pt_routines.db.repository import RoutineStore
from pt_routines.db.session import create_session_factory
from pt_routines.planning.profile import ToleranceIntensity, UserProfile

# Small catalog with known durations (minutes under the "average" convention):
# lb_tilt 4, lb_bridge 5, lb_band_row 4, lb_plank 3, lb_stretch 3 (no hint),
# hip_circle 6, neck_tuck 2, core_deadbug 5
SYNTHETIC_EXERCISES: list[dict] = [
    {
        "id": "lb_tilt",
        "name": "Pelvic Tilt",
        "body_areas": ["lower_back"],
        "intensity": "low",
        "goals": ["pain_management"],
        "equipment": ["none"],
        "time_to_complete": "3–5 minutes",
    },
    {
        "id": "lb_bridge",
        "name": "Glute Bridge",
        "body_areas": ["lower_back", "hip"],
        "intensity": "medium",
        "goals": ["strength"],
        "equipment": ["none"],
        "time_to_complete": "4–6 minutes",
    },
    {
        "id": "lb_band_row",
        "name": "Band Row",
        "body_areas": ["lower_back", "upper_back"],
        "intensity": "low",
        "goals": ["posture"],
        "equipment": ["resistance_band"],
        "time_to_complete": "3–4 minutes",
    },
    {
        "id": "lb_plank",
        "name": "Plank",
        "body_areas": ["lower_back", "core"],
        "intensity": "high",
        "goals": ["strength"],
        "equipment": ["none"],
        "time_to_complete": "2–3 minutes",
    },
    {
        "id": "lb_stretch",
        "name": "Knee Hug Stretch",
        "body_areas": ["lower_back"],
        "intensity": "low",
        "goals": ["mobility"],
        "equipment": ["none"],
    },
    {
        "id": "hip_circle",
        "name": "Hip Circles",
        "body_areas": ["hip"],
        "intensity": "low",
        "goals": ["mobility"],
        "equipment": ["none"],
        "time_to_complete": "5–7 minutes",
    },
    {
        "id": "neck_tuck",
        "name": "Chin Tuck",
        "body_areas": ["neck"],
        "intensity": "low",
        "goals": ["posture"],
        "equipment": ["none"],
        "time_to_complete": "1–3 minutes",
    },
    {
        "id": "core_deadbug",
        "name": "Dead Bug",
        "body_areas": ["core"],
        "intensity": "medium",
        "goals": ["strength"],
        "equipment": ["none"],
        "time_to_complete": "3–6 minutes",
    },
]


@pytest.fixture
def synthetic_catalog() -> ExerciseCatalog:
    """Eight-exercise catalog with hand-checked durations."""
    return ExerciseCatalog(Exercise.model_validate(item) for item in SYNTHETIC_EXERCISES)


@pytest.fixture
def real_catalog() -> ExerciseCatalog:
    """Bundled 100-exercise catalog."""
    return get_default_catalog()


@pytest.fixture
def lower_back_profile() -> UserProfile:
    """Lower back, low intensity (tolerance), bodyweight only, 3 days x 20 minutes."""
    return UserProfile(
        target_body_areas=(BodyArea.LOWER_BACK,),
        intensity=ToleranceIntensity(target=Intensity.LOW),
        equipment_access=(),
        days_per_week=3,
        max_minutes_per_day=20,
    )


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 2, 8, 0, tzinfo=UTC)


@pytest.fixture
def store() -> RoutineStore:
    """Routine store on an isolated in-memory SQLite database."""
    return RoutineStore(create_session_factory("sqlite://"))
