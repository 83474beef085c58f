"""Exercise catalog loading.

The catalog is a read-only table handed to the planner as a dependency.
It is never a module-level singleton the planner reaches for; callers
(service, CLI, tests) load it once and pass it in.
"""

import json
from collections.abc import Iterable, Iterator
from functools import lru_cache
from pathlib import Path

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from pt_routines.catalog.models import Exercise

_EXERCISE_LIST = TypeAdapter(list[Exercise])


class CatalogLoadError(RuntimeError):
    """Raised when the catalog file is missing or malformed."""

    pass


class ExerciseCatalog:
    """Immutable, ordered collection of exercises with id lookup.

    Iteration order is the file order; candidate selection relies on it
    for deterministic tie-breaking.
    """

    def __init__(self, exercises: Iterable[Exercise]) -> None:
        self._exercises: tuple[Exercise, ...] = tuple(exercises)
        self._by_id: dict[str, Exercise] = {}
        for exercise in self._exercises:
            if exercise.id in self._by_id:
                raise CatalogLoadError(f"Duplicate exercise id in catalog: {exercise.id}")
            self._by_id[exercise.id] = exercise

    def __iter__(self) -> Iterator[Exercise]:
        return iter(self._exercises)

    def __len__(self) -> int:
        return len(self._exercises)

    def __contains__(self, exercise_id: object) -> bool:
        return exercise_id in self._by_id

    def get(self, exercise_id: str) -> Exercise | None:
        return self._by_id.get(exercise_id)

    def require(self, exercise_id: str) -> Exercise:
        exercise = self._by_id.get(exercise_id)
        if exercise is None:
            raise KeyError(f"Exercise not found in catalog: {exercise_id}")
        return exercise

    @property
    def exercises(self) -> tuple[Exercise, ...]:
        return self._exercises


def _get_default_catalog_path() -> Path:
    return Path(__file__).parent / "data" / "exercises.json"


def load_catalog(path: Path | str | None = None) -> ExerciseCatalog:
    """Load an exercise catalog from a JSON file.

    Args:
        path: Path to a JSON array of exercise records. Defaults to the
            bundled catalog.

    Returns:
        ExerciseCatalog in file order

    Raises:
        CatalogLoadError: If the file cannot be read or fails validation
    """
    catalog_path = Path(path) if path is not None else _get_default_catalog_path()

    try:
        raw = json.loads(catalog_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogLoadError(f"Cannot read exercise catalog at {catalog_path}: {e}") from e

    try:
        exercises = _EXERCISE_LIST.validate_python(raw)
    except ValidationError as e:
        raise CatalogLoadError(f"Invalid exercise catalog at {catalog_path}: {e}") from e

    logger.debug(
        "Exercise catalog loaded",
        path=str(catalog_path),
        exercise_count=len(exercises),
    )
    return ExerciseCatalog(exercises)


@lru_cache(maxsize=1)
def get_default_catalog() -> ExerciseCatalog:
    """Bundled catalog, loaded once per process."""
    return load_catalog()
