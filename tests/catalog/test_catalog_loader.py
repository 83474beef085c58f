"""Tests for the exercise catalog loader."""

import json

import pytest

from pt_routines.catalog.loader import CatalogLoadError, ExerciseCatalog, get_default_catalog, load_catalog
from pt_routines.catalog.models import BodyArea, Equipment, Exercise


def _create_record(exercise_id: str, **overrides) -> dict:
    record = {
        "id": exercise_id,
        "name": exercise_id.replace("_", " ").title(),
        "body_areas": ["knee"],
        "intensity": "low",
        "equipment": ["none"],
    }
    record.update(overrides)
    return record


def test_bundled_catalog_has_100_unique_exercises():
    """Test that the bundled catalog loads all 100 exercises with unique ids."""
    catalog = load_catalog()

    assert len(catalog) == 100
    assert len({exercise.id for exercise in catalog}) == 100


def test_bundled_catalog_entries_are_well_formed():
    """Test that every bundled entry has body areas and equipment."""
    for exercise in get_default_catalog():
        assert exercise.body_areas
        assert exercise.equipment


def test_bundled_catalog_covers_every_body_area():
    """Test that every body area tag is used by at least one exercise."""
    used = {area for exercise in get_default_catalog() for area in exercise.body_areas}
    assert used == set(BodyArea)


def test_default_catalog_is_cached():
    """Test that the bundled catalog is loaded once per process."""
    assert get_default_catalog() is get_default_catalog()


def test_catalog_lookup():
    """Test get/require/contains on a loaded catalog."""
    catalog = get_default_catalog()

    assert "chin_tucks_001" in catalog
    assert catalog.get("chin_tucks_001").name == "Chin Tucks"
    assert catalog.get("missing") is None
    with pytest.raises(KeyError):
        catalog.require("missing")


def test_catalog_keeps_file_order(tmp_path):
    """Test that iteration follows file order."""
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps([_create_record("b_first"), _create_record("a_second")]), encoding="utf-8")

    catalog = load_catalog(path)

    assert [exercise.id for exercise in catalog] == ["b_first", "a_second"]


def test_bodyweight_only_flag():
    """Test that only ["none"] equipment counts as bodyweight only."""
    bodyweight = Exercise.model_validate(_create_record("squat"))
    chair = Exercise.model_validate(_create_record("sit_to_stand", equipment=["chair"]))

    assert bodyweight.bodyweight_only
    assert not chair.bodyweight_only
    assert chair.equipment == (Equipment.CHAIR,)


def test_duplicate_ids_rejected():
    """Test that a catalog with duplicate ids is rejected."""
    exercise = Exercise.model_validate(_create_record("squat"))
    with pytest.raises(CatalogLoadError):
        ExerciseCatalog([exercise, exercise])


def test_missing_file_raises(tmp_path):
    """Test that a missing catalog file raises CatalogLoadError."""
    with pytest.raises(CatalogLoadError):
        load_catalog(tmp_path / "missing.json")


def test_malformed_json_raises(tmp_path):
    """Test that malformed JSON raises CatalogLoadError."""
    path = tmp_path / "catalog.json"
    path.write_text("[{not json", encoding="utf-8")
    with pytest.raises(CatalogLoadError):
        load_catalog(path)


def test_invalid_entry_raises(tmp_path):
    """Test that an entry without body areas fails validation."""
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps([_create_record("squat", body_areas=[])]), encoding="utf-8")
    with pytest.raises(CatalogLoadError):
        load_catalog(path)
