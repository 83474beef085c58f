"""Exercise catalog - read-only exercise table and tag vocabularies."""

from pt_routines.catalog.loader import CatalogLoadError, ExerciseCatalog, get_default_catalog, load_catalog
from pt_routines.catalog.models import (
    BODY_AREA_LABELS,
    INTENSITY_ORDER,
    BodyArea,
    Equipment,
    Exercise,
    Goal,
    Intensity,
)

__all__ = [
    "BODY_AREA_LABELS",
    "INTENSITY_ORDER",
    "BodyArea",
    "CatalogLoadError",
    "Equipment",
    "Exercise",
    "ExerciseCatalog",
    "Goal",
    "Intensity",
    "get_default_catalog",
    "load_catalog",
]
