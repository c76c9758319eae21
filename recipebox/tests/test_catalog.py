from __future__ import annotations

import json

import pytest

from recipebox.recipes.catalog import (
    CatalogError,
    RecipeCatalog,
    RecipeNotFoundError,
    load_catalog,
)


def _write_catalog(path, records):
    path.write_text(json.dumps(records), encoding="utf-8")
    return path


def _record(recipe_id, **overrides):
    record = {"id": recipe_id, "name": f"Recipe {recipe_id}", "prep_time": 15}
    record.update(overrides)
    return record


def test_bundled_catalog_loads():
    catalog = RecipeCatalog.from_path()
    assert len(catalog) > 0
    assert "0" in catalog
    assert catalog.get("0").name == "Pesto Pasta Bake"
    for recipe in catalog.recipes:
        assert 0.0 <= recipe.rating <= 5.0
        assert not recipe.vegan or recipe.vegetarian


def test_vegan_recipe_is_marked_vegetarian(tmp_path):
    path = _write_catalog(tmp_path / "recipes.json", [_record("1", vegan=True, vegetarian=False)])
    recipe = load_catalog(path)[0]
    assert recipe.vegan is True
    assert recipe.vegetarian is True


def test_rating_is_clamped(tmp_path):
    path = _write_catalog(
        tmp_path / "recipes.json",
        [_record("1", rating=7.2), _record("2", rating=-1), _record("3", rating="n/a")],
    )
    assert [r.rating for r in load_catalog(path)] == [5.0, 0.0, 0.0]


def test_missing_file_raises(tmp_path):
    with pytest.raises(CatalogError):
        load_catalog(tmp_path / "missing.json")


def test_malformed_json_raises(tmp_path):
    path = tmp_path / "recipes.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(CatalogError):
        load_catalog(path)


def test_non_list_raises(tmp_path):
    path = _write_catalog(tmp_path / "recipes.json", {"recipes": []})
    with pytest.raises(CatalogError):
        load_catalog(path)


def test_invalid_record_raises(tmp_path):
    path = _write_catalog(tmp_path / "recipes.json", [_record("1", prep_time=0)])
    with pytest.raises(CatalogError):
        load_catalog(path)


def test_duplicate_ids_raise(tmp_path):
    path = _write_catalog(tmp_path / "recipes.json", [_record("1"), _record("1")])
    with pytest.raises(CatalogError, match="Duplicate"):
        load_catalog(path)


def test_unknown_recipe_raises(tmp_path):
    catalog = RecipeCatalog.from_path(_write_catalog(tmp_path / "recipes.json", [_record("1")]))
    with pytest.raises(RecipeNotFoundError) as excinfo:
        catalog.get("404")
    assert excinfo.value.recipe_id == "404"
    assert "404" not in catalog
