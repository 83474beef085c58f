"""Eligibility Filter - Deterministic Core.

Decides whether an exercise is usable for a profile. Filters in order:
1. body areas intersect the profile's target areas (candidate precondition)
2. equipment compatible (bodyweight-only is always compatible)
3. intensity compatible (tolerance or range, resolved once per profile)

The intensity variant is resolved into a plain set of allowed levels when the
filter is built, so the selector, distributor and swap resolver never branch
on which variant is active.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from pt_routines.catalog.models import INTENSITY_ORDER, BodyArea, Equipment, Exercise, Intensity
from pt_routines.planning.profile import IntensityConstraint, RangeIntensity, ToleranceIntensity, UserProfile


def matches_body_areas(exercise: Exercise, target_areas: Iterable[BodyArea]) -> bool:
    targets = set(target_areas)
    return any(area in targets for area in exercise.body_areas)


def is_equipment_compatible(exercise: Exercise, equipment_access: Iterable[Equipment]) -> bool:
    """Check equipment compatibility.

    Bodyweight exercises (equipment == ["none"]) are always allowed. Otherwise
    the user needs at least one of the listed items.
    """
    if exercise.bodyweight_only:
        return True
    available = set(equipment_access)
    return any(item in available for item in exercise.equipment)


def allowed_intensities(constraint: IntensityConstraint) -> frozenset[Intensity]:
    """Resolve an intensity constraint into the set of eligible levels."""
    if isinstance(constraint, RangeIntensity):
        low = INTENSITY_ORDER.index(constraint.min)
        high = INTENSITY_ORDER.index(constraint.max)
        return frozenset(INTENSITY_ORDER[low : high + 1])
    if isinstance(constraint, ToleranceIntensity):
        target = INTENSITY_ORDER.index(constraint.target)
        return frozenset(level for idx, level in enumerate(INTENSITY_ORDER) if abs(idx - target) <= 1)
    raise TypeError(f"Unsupported intensity constraint: {constraint!r}")


def is_intensity_compatible(exercise: Exercise, constraint: IntensityConstraint) -> bool:
    return exercise.intensity in allowed_intensities(constraint)


@dataclass(frozen=True)
class EligibilityFilter:
    """Profile constraints resolved for repeated checks.

    Attributes:
        target_body_areas: Areas an exercise must touch to be a generation candidate
        equipment_access: Equipment the user has
        intensities: Eligible intensity levels
    """

    target_body_areas: frozenset[BodyArea]
    equipment_access: frozenset[Equipment]
    intensities: frozenset[Intensity]

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "EligibilityFilter":
        return cls(
            target_body_areas=frozenset(profile.target_body_areas),
            equipment_access=frozenset(profile.equipment_access),
            intensities=allowed_intensities(profile.intensity),
        )

    def allows(self, exercise: Exercise) -> bool:
        """Equipment and intensity eligibility (no body-area check)."""
        return is_equipment_compatible(exercise, self.equipment_access) and exercise.intensity in self.intensities

    def is_candidate(self, exercise: Exercise) -> bool:
        """Full generation check: body-area intersection first, then eligibility."""
        if not matches_body_areas(exercise, self.target_body_areas):
            return False
        return self.allows(exercise)

    def filter_candidates(self, exercises: Iterable[Exercise]) -> list[Exercise]:
        return [exercise for exercise in exercises if self.is_candidate(exercise)]
