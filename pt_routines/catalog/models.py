"""Exercise catalog entry and its tag vocabularies.

Catalog entries are read-only: loaded once, never mutated.
Durations are free-text hints ("3–5 minutes"); minutes are derived
later by the duration estimator, never stored here.
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class BodyArea(StrEnum):
    NECK = "neck"
    UPPER_BACK = "upper_back"
    LOWER_BACK = "lower_back"
    SHOULDER = "shoulder"
    HIP = "hip"
    KNEE = "knee"
    ANKLE = "ankle"
    WRIST = "wrist"
    ELBOW = "elbow"
    CORE = "core"


class Intensity(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Ordered scale used by the eligibility filter (low < medium < high)
INTENSITY_ORDER: tuple[Intensity, ...] = (Intensity.LOW, Intensity.MEDIUM, Intensity.HIGH)


class Goal(StrEnum):
    PAIN_MANAGEMENT = "pain_management"
    STRENGTH = "strength"
    MOBILITY = "mobility"
    POSTURE = "posture"
    ENDURANCE = "endurance"


class Equipment(StrEnum):
    NONE = "none"  # bodyweight only, always eligible
    DUMBBELLS = "dumbbells"
    EXERCISE_BALL = "exercise_ball"
    RESISTANCE_BAND = "resistance_band"
    CHAIR = "chair"
    STEP = "step"
    FOAM_ROLL = "foam_roll"


BODY_AREA_LABELS: dict[BodyArea, str] = {
    BodyArea.NECK: "Neck",
    BodyArea.UPPER_BACK: "Upper Back",
    BodyArea.LOWER_BACK: "Lower Back",
    BodyArea.SHOULDER: "Shoulder",
    BodyArea.HIP: "Hip",
    BodyArea.KNEE: "Knee",
    BodyArea.ANKLE: "Ankle",
    BodyArea.WRIST: "Wrist",
    BodyArea.ELBOW: "Elbow",
    BodyArea.CORE: "Core",
}


class Exercise(BaseModel):
    """Immutable exercise catalog entry.

    Attributes:
        id: Unique exercise identifier
        name: Human-readable exercise name
        description: How to perform the exercise
        body_areas: Body areas targeted (non-empty)
        intensity: Intensity level
        goals: Goal tags
        equipment: Equipment tags (non-empty; ["none"] means bodyweight only)
        reps: Optional repetition hint
        hold_time: Optional hold-time hint
        sets: Optional set hint
        time_to_complete: Optional free-text duration hint
        notes: Optional free-text notes
        progressions: Ids of harder variations
        regressions: Ids of easier variations
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""

    body_areas: tuple[BodyArea, ...] = Field(min_length=1)
    intensity: Intensity
    goals: tuple[Goal, ...] = ()
    equipment: tuple[Equipment, ...] = Field(min_length=1)

    reps: str | None = None
    hold_time: str | None = None
    sets: str | None = None
    time_to_complete: str | None = None
    notes: str | None = None

    progressions: tuple[str, ...] = ()
    regressions: tuple[str, ...] = ()

    @property
    def bodyweight_only(self) -> bool:
        return self.equipment == (Equipment.NONE,)
