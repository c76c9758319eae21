from __future__ import annotations

from unittest.mock import patch

from recipebox.preferences.models import PreferenceChange
from recipebox.preferences.store import PreferencesStore
from recipebox.storage.kv import JsonFileStore, StorageError


def _store(tmp_path, load=True):
    store = PreferencesStore(JsonFileStore(tmp_path))
    if load:
        store.load()
    return store


def _stored(tmp_path):
    return JsonFileStore(tmp_path).get_item("user_preferences")


def test_defaults(tmp_path):
    prefs = _store(tmp_path).preferences
    assert prefs.unit_type == "metric"
    assert prefs.allergies == []
    assert prefs.excluded_ingredients == []
    assert prefs.favorite_recipes == []
    assert prefs.is_vegan is False
    assert prefs.user_name is None
    assert prefs.show_nutritional_info is False


def test_mutations_are_written_through(tmp_path):
    store = _store(tmp_path)
    store.add_allergy("peanuts")
    store.set_unit_type("imperial")
    stored = _stored(tmp_path)
    assert stored["allergies"] == ["peanuts"]
    assert stored["unit_type"] == "imperial"


def test_no_write_before_load(tmp_path):
    store = _store(tmp_path, load=False)
    store.add_allergy("peanuts")
    assert _stored(tmp_path) is None
    assert store.preferences.allergies == ["peanuts"]


def test_load_merges_over_defaults(tmp_path):
    JsonFileStore(tmp_path).set_item("user_preferences", {"unit_type": "imperial"})
    prefs = _store(tmp_path).preferences
    assert prefs.unit_type == "imperial"
    assert prefs.allergies == []


def test_corrupt_blob_falls_back_to_defaults(tmp_path):
    (tmp_path / "user_preferences.json").write_text("not json", encoding="utf-8")
    store = _store(tmp_path)
    assert store.is_loaded
    assert store.preferences.allergies == []


def test_invalid_blob_falls_back_to_defaults(tmp_path):
    JsonFileStore(tmp_path).set_item("user_preferences", {"unit_type": "cubits"})
    store = _store(tmp_path)
    assert store.preferences.unit_type == "metric"


def test_save_failure_is_not_fatal(tmp_path):
    store = _store(tmp_path)
    with patch.object(JsonFileStore, "set_item", side_effect=StorageError("disk full")):
        store.add_allergy("peanuts")
    assert store.preferences.allergies == ["peanuts"]
    assert _stored(tmp_path) is None


def test_add_is_idempotent(tmp_path):
    store = _store(tmp_path)
    store.add_allergy("dairy")
    store.add_allergy("dairy")
    store.add_excluded_ingredient("cilantro")
    store.add_excluded_ingredient("cilantro")
    prefs = store.preferences
    assert prefs.allergies == ["dairy"]
    assert prefs.excluded_ingredients == ["cilantro"]


def test_remove_items(tmp_path):
    store = _store(tmp_path)
    store.add_allergy("dairy")
    store.add_allergy("gluten")
    store.remove_allergy("dairy")
    store.add_excluded_ingredient("cilantro")
    store.remove_excluded_ingredient("cilantro")
    assert store.preferences.allergies == ["gluten"]
    assert store.preferences.excluded_ingredients == []


def test_toggle_favorite(tmp_path):
    store = _store(tmp_path)
    assert store.toggle_favorite("12") is True
    assert store.is_favorite("12")
    assert store.toggle_favorite("12") is False
    assert not store.is_favorite("12")


def test_toggle_nutritional_info(tmp_path):
    store = _store(tmp_path)
    store.toggle_nutritional_info()
    assert store.preferences.show_nutritional_info is True
    store.toggle_nutritional_info()
    assert store.preferences.show_nutritional_info is False


def test_reset_restores_defaults(tmp_path):
    store = _store(tmp_path)
    store.add_allergy("dairy")
    store.set_user_name("Sam")
    store.reset()
    assert store.preferences.allergies == []
    assert store.preferences.user_name is None
    assert _stored(tmp_path)["allergies"] == []


def test_subscribers_are_notified(tmp_path):
    store = _store(tmp_path, load=False)
    seen = []
    unsubscribe = store.subscribe(lambda change, prefs: seen.append((change, list(prefs.allergies))))

    store.load()
    store.add_allergy("dairy")
    store.set_is_vegan(True)
    unsubscribe()
    store.add_allergy("gluten")

    assert seen == [
        (PreferenceChange.loaded, []),
        (PreferenceChange.allergies, ["dairy"]),
        (PreferenceChange.vegan, ["dairy"]),
    ]


def test_snapshots_are_copies(tmp_path):
    store = _store(tmp_path)
    store.preferences.allergies.append("dairy")
    assert store.preferences.allergies == []
