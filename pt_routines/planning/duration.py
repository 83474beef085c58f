"""Duration Estimator.

Parses a free-text time hint ("3–5 minutes", "4 minutes") into integer minutes.

Conventions for ranged hints:
- average: round((low + high) / 2), halves rounded up ("3–6" -> 5)
- max: the upper bound of the range

One convention is chosen per generation run (settings.duration_convention,
"average" by default) and used for every estimate in that run, including
swap candidates, so slot minutes stay comparable.
"""

import math
import re
from typing import Literal

from pt_routines.catalog.models import Exercise
from pt_routines.planning.invariants import DEFAULT_EXERCISE_MINUTES

DurationConvention = Literal["average", "max"]

_FIRST_INT = re.compile(r"(\d+)")
_RANGE = re.compile(r"(\d+)\s*[–—-]\s*(\d+)")


def estimate_minutes_from_text(text: str | None, convention: DurationConvention = "average") -> int:
    """Estimate minutes from a duration hint.

    Args:
        text: Free-text duration hint (may be None or empty)
        convention: How to collapse a range ("average" or "max")

    Returns:
        Minutes; DEFAULT_EXERCISE_MINUTES when absent or unparseable
    """
    if not text:
        return DEFAULT_EXERCISE_MINUTES

    first = _FIRST_INT.search(text)
    if first is None:
        return DEFAULT_EXERCISE_MINUTES

    range_match = _RANGE.search(text)
    if range_match:
        low = int(range_match.group(1))
        high = int(range_match.group(2))
        if convention == "max":
            return max(low, high)
        return math.floor((low + high) / 2 + 0.5)

    return int(first.group(1))


def estimate_exercise_minutes(exercise: Exercise, convention: DurationConvention = "average") -> int:
    return estimate_minutes_from_text(exercise.time_to_complete, convention)
