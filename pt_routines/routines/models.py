"""Routine & Slot - Generator Output.

A Routine is a 7-day template of exercise slots. Derived fields
(exercise_ids, total_weekly_minutes) are always recomputed from the slots;
see pt_routines.planning.assembler.rederive_routine.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from pt_routines.planning.profile import UserProfile


class RoutineExerciseSlot(BaseModel):
    """One placement of an exercise on a day.

    Attributes:
        id: Unique slot identifier
        exercise_id: Catalog exercise id
        day_index: Weekday index (0-6, stable numbering)
        order: Zero-based position within the day (contiguous per day)
        estimated_minutes: Minutes captured at generation (or swap) time
    """

    model_config = ConfigDict(frozen=True)

    id: str
    exercise_id: str
    day_index: int = Field(ge=0, le=6)
    order: int = Field(ge=0)
    estimated_minutes: int = Field(ge=0)


class Routine(BaseModel):
    """Generated weekly routine.

    Attributes:
        id: Routine identifier
        name: Display name (e.g. "Neck & Upper Back")
        description: Summary of days/week and weekly minutes
        created_at: Creation timestamp
        updated_at: Last edit timestamp
        profile_snapshot: Copy of the profile used for generation
        exercise_ids: Distinct exercise ids referenced by slots (first-appearance order)
        slots: All slots across the week
        days_per_week: Training days per week
        total_weekly_minutes: Sum of slot minutes (authoritative total)
        max_minutes_per_day: Per-day budget copied from the profile
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    created_at: datetime
    updated_at: datetime

    profile_snapshot: UserProfile
    exercise_ids: tuple[str, ...]
    slots: tuple[RoutineExerciseSlot, ...]

    days_per_week: int
    total_weekly_minutes: int
    max_minutes_per_day: int

    def slots_for_day(self, day_index: int) -> list[RoutineExerciseSlot]:
        """Slots of one day sorted by order."""
        return sorted((s for s in self.slots if s.day_index == day_index), key=lambda s: s.order)

    def day_minutes(self, day_index: int) -> int:
        return sum(s.estimated_minutes for s in self.slots if s.day_index == day_index)

    def training_days(self) -> list[int]:
        return sorted({s.day_index for s in self.slots})

    def get_slot(self, slot_id: str) -> RoutineExerciseSlot | None:
        for slot in self.slots:
            if slot.id == slot_id:
                return slot
        return None
