"""Day Distributor - Best-Fit Day Packing.

Places the selected exercises onto evenly spaced training days.

For each training day, in visitation order:
1. target = min(ceil(remaining weekly minutes / remaining days), max per day)
2. search (unique count 2-4) x (repetitions 1-4), skipping any combination
   above max_minutes_per_day x 1.1
3. keep the combination minimizing |total - target| + 0.1 x unique count;
   only a strictly better score replaces the incumbent, so ties go to fewer
   exercises and fewer repetitions
4. expand it with the pattern template for its unique count
5. if nothing fits under the ceiling, take up to 2 fresh exercises once each

Exercises are drawn left-to-right from the selection and never reused until
the unused part runs out; then earlier exercises are reused in rotation.
Best-fit is the only distribution mode: the result is fully deterministic.
"""

import math
from dataclasses import dataclass

from loguru import logger

from pt_routines.planning.invariants import (
    DAILY_SLACK_FACTOR,
    DAYS_IN_WEEK,
    FALLBACK_EXERCISES_PER_DAY,
    MAX_DAY_INDEX,
    MAX_EXERCISES_PER_DAY,
    MAX_REPS_PER_EXERCISE,
    MIN_EXERCISES_PER_DAY,
    UNIQUE_EXERCISE_BIAS,
)
from pt_routines.planning.patterns import expand_pattern
from pt_routines.planning.selection import EstimatedExercise


@dataclass(frozen=True)
class DayPlan:
    """One training day's workout.

    Attributes:
        day_index: Weekday index (0-6)
        sequence: Ordered exercises (with repeats) for the day
        unique_count: Number of distinct exercises
        reps: Repetitions per exercise
        total_minutes: Sum of sequence minutes
        target_minutes: Target the day was packed against
        used_fallback: Whether the degenerate-day fallback produced it
    """

    day_index: int
    sequence: tuple[EstimatedExercise, ...]
    unique_count: int
    reps: int
    total_minutes: int
    target_minutes: int
    used_fallback: bool = False


@dataclass(frozen=True)
class _Pick:
    exercises: tuple[EstimatedExercise, ...]
    fresh_count: int
    reused_count: int

    @property
    def minutes(self) -> int:
        return sum(item.minutes for item in self.exercises)


class _ExercisePool:
    """Left-to-right cursor over the selected exercises.

    ``pick`` is side-effect free so the search can evaluate many sizes;
    ``commit`` advances the cursors for the chosen pick only.
    """

    def __init__(self, exercises: tuple[EstimatedExercise, ...]) -> None:
        self._exercises = exercises
        self._cursor = 0
        self._reuse_cursor = 0

    def __len__(self) -> int:
        return len(self._exercises)

    @property
    def remaining(self) -> int:
        return len(self._exercises) - self._cursor

    def pick(self, count: int, *, allow_reuse: bool = True) -> _Pick | None:
        if count < 1 or count > len(self._exercises):
            return None

        fresh = list(self._exercises[self._cursor : self._cursor + count])
        picked = list(fresh)
        picked_ids = {item.id for item in picked}
        reused = 0

        if allow_reuse:
            offset = 0
            while len(picked) < count and offset < len(self._exercises):
                candidate = self._exercises[(self._reuse_cursor + offset) % len(self._exercises)]
                offset += 1
                if candidate.id in picked_ids:
                    continue
                picked.append(candidate)
                picked_ids.add(candidate.id)
                reused += 1

        if len(picked) < count:
            return None
        return _Pick(exercises=tuple(picked), fresh_count=len(fresh), reused_count=reused)

    def commit(self, pick: _Pick) -> None:
        self._cursor += pick.fresh_count
        if pick.reused_count:
            self._reuse_cursor = (self._reuse_cursor + pick.reused_count) % len(self._exercises)


def training_day_indices(days_per_week: int) -> list[int]:
    """Evenly spaced weekday indices: step = 7 // days, clamped to 6."""
    if not 1 <= days_per_week <= DAYS_IN_WEEK:
        raise ValueError(f"days_per_week must be between 1 and {DAYS_IN_WEEK}, got {days_per_week}")
    step = DAYS_IN_WEEK // days_per_week
    return [min(i * step, MAX_DAY_INDEX) for i in range(days_per_week)]


def day_target_minutes(
    remaining_weekly_minutes: int,
    remaining_days: int,
    max_minutes_per_day: int,
) -> int:
    """Share of the remaining weekly target for the next day, capped per day."""
    if remaining_days <= 0:
        return max_minutes_per_day
    return min(math.ceil(remaining_weekly_minutes / remaining_days), max_minutes_per_day)


def _best_fit(pool: _ExercisePool, target_minutes: int, ceiling: float) -> tuple[_Pick, int] | None:
    best: tuple[_Pick, int] | None = None
    best_score = math.inf

    for unique_count in range(MIN_EXERCISES_PER_DAY, MAX_EXERCISES_PER_DAY + 1):
        pick = pool.pick(unique_count)
        if pick is None:
            continue

        for reps in range(1, MAX_REPS_PER_EXERCISE + 1):
            total = pick.minutes * reps
            if total > ceiling:
                continue
            score = abs(total - target_minutes) + unique_count * UNIQUE_EXERCISE_BIAS
            if score < best_score:
                best_score = score
                best = (pick, reps)

    return best


def _fallback_pick(pool: _ExercisePool) -> _Pick:
    fresh_count = min(FALLBACK_EXERCISES_PER_DAY, pool.remaining)
    if fresh_count > 0:
        pick = pool.pick(fresh_count, allow_reuse=False)
        if pick is not None:
            return pick
    reuse_count = min(FALLBACK_EXERCISES_PER_DAY, len(pool))
    pick = pool.pick(reuse_count)
    if pick is None:
        raise ValueError("Cannot build a fallback day from an empty selection")
    return pick


def distribute_week(
    exercises: tuple[EstimatedExercise, ...],
    *,
    days_per_week: int,
    max_minutes_per_day: int,
    target_weekly_minutes: int,
) -> list[DayPlan]:
    """Distribute selected exercises across the week.

    Args:
        exercises: Selected exercises in priority order (non-empty)
        days_per_week: Number of training days (1-7)
        max_minutes_per_day: Per-day budget (hard ceiling x 1.1)
        target_weekly_minutes: Weekly minute target

    Returns:
        One DayPlan per training day, in weekday order

    Raises:
        ValueError: If exercises is empty or days_per_week is out of range
    """
    if not exercises:
        raise ValueError("Cannot distribute an empty exercise selection")

    day_indices = training_day_indices(days_per_week)
    ceiling = max_minutes_per_day * DAILY_SLACK_FACTOR
    pool = _ExercisePool(exercises)

    plans: list[DayPlan] = []
    minutes_so_far = 0

    for position, day_index in enumerate(day_indices):
        target = day_target_minutes(
            target_weekly_minutes - minutes_so_far,
            len(day_indices) - position,
            max_minutes_per_day,
        )

        best = _best_fit(pool, target, ceiling)
        used_fallback = best is None
        if best is None:
            pick = _fallback_pick(pool)
            reps = 1
            logger.warning(
                "Day distribution: no combination fits the daily ceiling, using fallback day",
                day_index=day_index,
                target_minutes=target,
                ceiling=ceiling,
                fallback_minutes=pick.minutes,
            )
        else:
            pick, reps = best

        pool.commit(pick)

        sequence = tuple(expand_pattern(pick.exercises, reps))
        total = sum(item.minutes for item in sequence)
        minutes_so_far += total

        logger.debug(
            "Day distribution: day packed",
            day_index=day_index,
            unique_count=len(pick.exercises),
            reps=reps,
            total_minutes=total,
            target_minutes=target,
        )

        plans.append(
            DayPlan(
                day_index=day_index,
                sequence=sequence,
                unique_count=len(pick.exercises),
                reps=reps,
                total_minutes=total,
                target_minutes=target,
                used_fallback=used_fallback,
            )
        )

    return plans
