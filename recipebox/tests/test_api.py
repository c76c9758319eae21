from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from recipebox.analytics.store import clear_events
from recipebox.app import create_app
from recipebox.config import AppConfig


@pytest.fixture
def client(tmp_path):
    return TestClient(create_app(AppConfig(storage_dir=tmp_path)))


def _ids(resp):
    return [r["id"] for r in resp.json()["recipes"]]


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_metadata(client):
    body = client.get("/metadata").json()
    assert body["prep_times"] == [15, 30, 45, 60]
    assert body["meal_times"] == ["breakfast", "dessert", "dinner", "lunch", "snack"]
    assert "Italian" in body["cuisine_types"]
    assert body["allergens"] == sorted(body["allergens"])


def test_recipes_lists_whole_catalog(client):
    body = client.get("/recipes").json()
    assert body["total"] == len(body["recipes"]) > 0
    assert body["active_filter_count"] == 0
    assert body["filter_active"] is False
    assert body["favorites_only"] is False


def test_recipe_detail(client):
    resp = client.get("/recipes/0")
    assert resp.status_code == 200
    assert resp.json()["name"] == "Pesto Pasta Bake"


def test_recipe_not_found(client):
    resp = client.get("/recipes/does-not-exist")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Recipe not found"


def test_apply_filters(client):
    resp = client.put("/filters", json={"meal_time": ["breakfast"]})
    assert resp.status_code == 200
    assert resp.json()["active_filter_count"] == 1
    assert resp.json()["filter_active"] is True

    assert sorted(_ids(client.get("/recipes"))) == ["10", "13", "2"]


def test_search_endpoint_does_not_touch_session(client):
    resp = client.post("/recipes/search", json={"search_query": "pasta"})
    assert resp.status_code == 200
    assert _ids(resp)[0] == "0"
    assert client.get("/filters").json()["filters"]["search_query"] is None


def test_search_without_matches(client):
    resp = client.post("/recipes/search", json={"search_query": "xyzzyqq"})
    assert resp.status_code == 200
    assert resp.json()["total"] == 0


def test_invalid_sort_option(client):
    resp = client.post("/recipes/search", json={"sort_by": "popularity"})
    assert resp.status_code == 422


def test_search_query_updates_session(client):
    client.put("/filters/search", json={"query": "pasta"})
    body = client.get("/recipes").json()
    assert body["recipes"][0]["name"] == "Pesto Pasta Bake"

    client.put("/filters/search", json={"query": ""})
    assert client.get("/filters").json()["filters"]["search_query"] is None


def test_allergy_flows_into_filters(client):
    resp = client.post("/preferences/allergies", json={"value": "peanuts"})
    assert resp.status_code == 200
    assert resp.json()["allergies"] == ["peanuts"]

    state = client.get("/filters").json()
    assert state["filters"]["allergens"] == ["peanuts"]
    assert state["active_filter_count"] == 0

    ids = _ids(client.get("/recipes"))
    assert "8" not in ids
    assert "13" not in ids

    resp = client.delete("/preferences/allergies/peanuts")
    assert resp.json()["allergies"] == []
    assert client.get("/filters").json()["filters"]["allergens"] is None


def test_excluded_ingredient_flows_into_filters(client):
    client.post("/preferences/excluded-ingredients", json={"value": "Peanut butter"})
    assert client.get("/filters").json()["filters"]["exclude_ingredients"] == ["Peanut butter"]
    assert "8" not in _ids(client.get("/recipes"))

    resp = client.delete("/preferences/excluded-ingredients/Peanut butter")
    assert resp.json()["excluded_ingredients"] == []


def test_vegan_profile(client):
    client.put("/preferences/vegan", json={"is_vegan": True})
    body = client.get("/recipes").json()
    assert body["recipes"]
    assert all(r["vegan"] for r in body["recipes"])
    assert body["active_filter_count"] == 0


def test_clear_filters_keeps_profile(client):
    client.post("/preferences/allergies", json={"value": "dairy"})
    client.put("/filters", json={"cuisine_type": ["Italian"], "sort_by": "rating"})
    client.get("/recipes", params={"favorites_only": True})

    body = client.post("/filters/clear").json()
    assert body["filters"]["allergens"] == ["dairy"]
    assert body["filters"]["cuisine_type"] is None
    assert body["active_filter_count"] == 0
    assert client.get("/recipes").json()["favorites_only"] is False


def test_toggle_favorite(client):
    resp = client.post("/preferences/favorites/12/toggle")
    assert resp.json() == {"recipe_id": "12", "is_favorite": True, "favorite_count": 18}

    resp = client.post("/preferences/favorites/12/toggle")
    assert resp.json() == {"recipe_id": "12", "is_favorite": False, "favorite_count": 17}


def test_toggle_unknown_favorite(client):
    assert client.post("/preferences/favorites/nope/toggle").status_code == 404


def test_favorites_only(client):
    assert client.get("/recipes", params={"favorites_only": True}).json()["total"] == 0
    client.post("/preferences/favorites/3/toggle")
    assert _ids(client.get("/recipes")) == ["3"]


def test_sort_by_favorites(client):
    client.put("/filters", json={"sort_by": "favorites"})
    body = client.get("/recipes").json()
    counts = [r["favorite_count"] for r in body["recipes"]]
    assert counts == sorted(counts, reverse=True)


def test_reviews(client):
    seeded = client.get("/recipes/0/reviews").json()
    assert len(seeded) == 2

    resp = client.post("/recipes/0/reviews", json={"rating": 5, "comment": "Great bake"})
    assert resp.status_code == 201
    assert resp.json()["user_name"] == "You"

    client.put("/preferences/user-name", json={"user_name": "Sam"})
    resp = client.post("/recipes/0/reviews", json={"rating": 4, "comment": "Still great"})
    assert resp.json()["user_name"] == "Sam"

    reviews = client.get("/recipes/0/reviews").json()
    assert [r["comment"] for r in reviews[:2]] == ["Still great", "Great bake"]


def test_review_validation(client):
    resp = client.post("/recipes/0/reviews", json={"rating": 6, "comment": "Too good"})
    assert resp.status_code == 422
    resp = client.post("/recipes/missing/reviews", json={"rating": 4, "comment": "Hmm"})
    assert resp.status_code == 404


def test_preference_setters(client):
    assert client.put("/preferences/unit-type", json={"unit_type": "imperial"}).json()["unit_type"] == "imperial"
    assert client.put("/preferences/unit-type", json={"unit_type": "cubits"}).status_code == 422
    assert client.post("/preferences/nutritional-info/toggle").json()["show_nutritional_info"] is True


def test_preferences_persist_across_instances(tmp_path):
    first = TestClient(create_app(AppConfig(storage_dir=tmp_path)))
    first.post("/preferences/allergies", json={"value": "gluten"})
    first.post("/preferences/favorites/3/toggle")

    second = TestClient(create_app(AppConfig(storage_dir=tmp_path)))
    prefs = second.get("/preferences").json()
    assert prefs["allergies"] == ["gluten"]
    assert prefs["favorite_recipes"] == ["3"]
    assert second.get("/filters").json()["filters"]["allergens"] == ["gluten"]


def test_reset_preferences(client):
    client.post("/preferences/allergies", json={"value": "dairy"})
    client.post("/recipes/0/reviews", json={"rating": 5, "comment": "Great"})

    prefs = client.post("/preferences/reset").json()
    assert prefs["allergies"] == []
    assert client.get("/filters").json()["filters"]["allergens"] is None
    assert client.get("/recipes/0/reviews").json() == []


def test_analytics_tracks_filter_changes(client):
    clear_events()
    client.put("/filters", json={"cuisine_type": ["Italian"]})

    body = client.get("/analytics").json()
    assert body["total_searches"] == 1
    assert body["top_cuisines"] == [{"name": "Italian", "count": 1}]
    assert body["filter_usage"]["cuisine"] == 100.0
    clear_events()


def test_analytics_ignores_startup(tmp_path):
    clear_events()
    client = TestClient(create_app(AppConfig(storage_dir=tmp_path)))
    body = client.get("/analytics").json()
    assert body["total_searches"] == 0
    assert body["empty_result_rate"] == 0.0
