"""Routine Generation Constants - Single Source of Truth.

Every selector, distributor, and resolver imports its thresholds from here.

TIME IS THE PLANNING CURRENCY
=============================
All budgets are integer minutes. Per-exercise minutes are estimated once
from the catalog's duration hint and then carried on the slot; they are
never recomputed unless the slot is swapped.
"""

from pt_routines.catalog.models import BodyArea, Goal

# Duration estimate when an exercise has no parseable hint
DEFAULT_EXERCISE_MINUTES = 3

# Candidate selection may overshoot the weekly target by 30%
WEEKLY_OVERSHOOT_FACTOR = 1.3

# Early stop needs at least this many distinct exercises per training day
MIN_SELECTED_PER_DAY = 2

# Selector fallback takes the top max(FALLBACK_MIN_EXERCISES, days) candidates
FALLBACK_MIN_EXERCISES = 5

# Target areas that switch on pain-management / posture prioritization
PRIORITY_BODY_AREAS: frozenset[BodyArea] = frozenset(
    {BodyArea.UPPER_BACK, BodyArea.NECK, BodyArea.LOWER_BACK}
)
PRIORITY_GOALS: frozenset[Goal] = frozenset({Goal.PAIN_MANAGEMENT, Goal.POSTURE})

# Day packing search space
MIN_EXERCISES_PER_DAY = 2
MAX_EXERCISES_PER_DAY = 4
MAX_REPS_PER_EXERCISE = 4

# A day may exceed max-minutes-per-day by 10%
DAILY_SLACK_FACTOR = 1.1

# Fit score penalty per distinct exercise (prefer simpler days on ties)
UNIQUE_EXERCISE_BIAS = 0.1

# Degenerate-day fallback size
FALLBACK_EXERCISES_PER_DAY = 2

# Stable weekday numbering
DAYS_IN_WEEK = 7
MIN_DAY_INDEX = 0
MAX_DAY_INDEX = DAYS_IN_WEEK - 1

# Routine name uses at most this many target areas
MAX_NAME_AREAS = 3

# Swap tolerance used by the routine overview (day view uses settings default)
OVERVIEW_SWAP_TIME_TOLERANCE_MIN = 5
