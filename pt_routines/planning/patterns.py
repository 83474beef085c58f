"""Pattern Templates.

Expands a day's unique exercises into a readable repetition sequence.
Every unique exercise appears exactly ``reps`` times, so the day's minutes
are the same whatever the layout.

Templates keyed by unique count:
- 2 -> ABAB...
- 3 -> ABCABC...
- 4 -> AABBCCDD (pair blocks; an odd trailing repetition is one ABCD pass)
- other -> the letter sequence cycled
"""

from collections.abc import Sequence
from string import ascii_uppercase
from typing import TypeVar

T = TypeVar("T")


def _alternating(unique: Sequence[T], reps: int) -> list[T]:
    return [item for _ in range(reps) for item in unique]


def _paired(unique: Sequence[T], reps: int) -> list[T]:
    sequence: list[T] = []
    for _ in range(reps // 2):
        for item in unique:
            sequence.extend([item, item])
    if reps % 2:
        sequence.extend(unique)
    return sequence


def expand_pattern(unique: Sequence[T], reps: int) -> list[T]:
    """Expand unique exercises into the day's ordered sequence.

    Args:
        unique: Distinct exercises for the day, in letter order (A, B, ...)
        reps: Repetitions per exercise (>= 1)

    Returns:
        Ordered sequence of length len(unique) x reps

    Raises:
        ValueError: If reps < 1
    """
    if reps < 1:
        raise ValueError(f"reps must be >= 1, got {reps}")
    if len(unique) == 4:
        return _paired(unique, reps)
    return _alternating(unique, reps)


def pattern_label(exercise_ids: Sequence[str]) -> str:
    """Summarize a day's sequence as letter counts, e.g. "Ax4, Bx3".

    Letters are assigned by first appearance; beyond Z the letter is "?".
    """
    letters: dict[str, str] = {}
    counts: dict[str, int] = {}
    for exercise_id in exercise_ids:
        if exercise_id not in letters:
            idx = len(letters)
            letters[exercise_id] = ascii_uppercase[idx] if idx < len(ascii_uppercase) else "?"
        counts[exercise_id] = counts.get(exercise_id, 0) + 1
    return ", ".join(f"{letters[exercise_id]}x{counts[exercise_id]}" for exercise_id in letters)
