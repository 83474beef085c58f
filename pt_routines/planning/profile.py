"""Profile constraint set for routine generation.

The intensity constraint is a tagged union resolved ONCE here:
- ToleranceIntensity: single target level, ±1 step allowed
- RangeIntensity: explicit [min, max] on low < medium < high

Older stored profiles carried either a bare ``intensity: "low"`` or an
``intensityMin``/``intensityMax`` pair, with camelCase keys. Those shapes are
normalized in the before-validator so nothing downstream ever sees them.
"""

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from pt_routines.catalog.models import INTENSITY_ORDER, BodyArea, Equipment, Intensity

_LEGACY_KEYS: dict[str, str] = {
    "targetBodyAreas": "target_body_areas",
    "equipmentAccess": "equipment_access",
    "daysPerWeek": "days_per_week",
    "maxMinutesPerDay": "max_minutes_per_day",
    "maxMinutesPerWeek": "max_minutes_per_week",
    "intensityMin": "intensity_min",
    "intensityMax": "intensity_max",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}


class ToleranceIntensity(BaseModel):
    """Single target intensity; exercises within one step are eligible."""

    model_config = ConfigDict(frozen=True)

    mode: Literal["tolerance"] = "tolerance"
    target: Intensity


class RangeIntensity(BaseModel):
    """Explicit inclusive intensity range."""

    model_config = ConfigDict(frozen=True)

    mode: Literal["range"] = "range"
    min: Intensity
    max: Intensity

    @model_validator(mode="after")
    def check_order(self) -> "RangeIntensity":
        if INTENSITY_ORDER.index(self.min) > INTENSITY_ORDER.index(self.max):
            raise ValueError(f"intensity min '{self.min}' is above max '{self.max}'")
        return self


IntensityConstraint = Annotated[ToleranceIntensity | RangeIntensity, Field(discriminator="mode")]


def _normalize_intensity(value: Any) -> Any:
    if isinstance(value, str):
        return {"mode": "tolerance", "target": value}
    if isinstance(value, dict) and "mode" not in value:
        if "target" in value:
            return {"mode": "tolerance", **value}
        if "min" in value or "max" in value:
            return {"mode": "range", **value}
    return value


class UserProfile(BaseModel):
    """Constraint set used to generate a routine.

    Snapshotted by value into every generated routine, so later profile
    edits never change past routines.

    Attributes:
        id: Profile identifier ("default" for the onboarding profile, "temp" for ad-hoc input)
        name: Display name
        target_body_areas: Body areas to train (non-empty)
        intensity: Tolerance or range intensity constraint
        equipment_access: Equipment the user has (empty means bodyweight only)
        days_per_week: Training days per week (1-7)
        max_minutes_per_day: Per-day minute budget
        max_minutes_per_week: Optional weekly budget (defaults to days x per-day)
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """

    model_config = ConfigDict(frozen=True)

    id: str = "default"
    name: str = ""

    target_body_areas: tuple[BodyArea, ...] = Field(min_length=1)
    intensity: IntensityConstraint
    equipment_access: tuple[Equipment, ...] = ()

    days_per_week: int = Field(ge=1, le=7)
    max_minutes_per_day: int = Field(gt=0)
    max_minutes_per_week: int | None = Field(default=None, gt=0)

    created_at: datetime | None = None
    updated_at: datetime | None = None

    @model_validator(mode="before")
    @classmethod
    def normalize_legacy_shape(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        normalized = {_LEGACY_KEYS.get(key, key): value for key, value in data.items()}

        intensity_min = normalized.pop("intensity_min", None)
        intensity_max = normalized.pop("intensity_max", None)
        if "intensity" not in normalized and (intensity_min or intensity_max):
            normalized["intensity"] = {
                "mode": "range",
                "min": intensity_min or Intensity.LOW,
                "max": intensity_max or Intensity.HIGH,
            }
        elif "intensity" in normalized:
            normalized["intensity"] = _normalize_intensity(normalized["intensity"])

        return normalized

    @property
    def target_weekly_minutes(self) -> int:
        """Weekly minute target (explicit weekly max, else days x per-day max)."""
        if self.max_minutes_per_week:
            return self.max_minutes_per_week
        return self.days_per_week * self.max_minutes_per_day
