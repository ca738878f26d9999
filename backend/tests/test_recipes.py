from fastapi.testclient import TestClient

from backend.app import app
from backend.recipes.store import get_recipe_store

client = TestClient(app)


def test_root_is_plain_text():
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.text == "MoodRecipe Backend Running"
    assert resp.headers["content-type"].startswith("text/plain")


def test_health_without_database():
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "database": "not_initialized"}


def test_cors_headers_on_responses():
    resp = client.get("/", headers={"Origin": "http://example.org"})
    assert resp.headers["access-control-allow-origin"] == "*"


# ── Mood lookup ──────────────────────────────────────────────────────────


def test_mood_returns_mapped_recipes(tables):
    resp = client.post("/api/mood", json={"moodName": "happy"})
    assert resp.status_code == 200
    titles = [r["title"] for r in resp.json()["recipes"]]
    assert titles == ["Lemon Herb Salad", "Chocolate Mug Cake"]


def test_mood_lookup_is_case_insensitive(tables):
    upper = client.post("/api/mood", json={"moodName": "Happy"})
    lower = client.post("/api/mood", json={"moodName": "happy"})
    assert upper.status_code == lower.status_code == 200
    assert upper.json() == lower.json()


def test_unknown_mood_is_404_not_empty_list(tables):
    resp = client.post("/api/mood", json={"moodName": "furious"})
    assert resp.status_code == 404
    assert resp.json() == {"error": "Mood not found"}


def test_known_mood_without_recipes_is_empty_list(tables):
    resp = client.post("/api/mood", json={"moodName": "bored"})
    assert resp.status_code == 200
    assert resp.json() == {"recipes": []}


def test_mood_name_required(tables):
    for body in ({}, {"moodName": ""}):
        resp = client.post("/api/mood", json=body)
        assert resp.status_code == 400
        assert resp.json() == {"error": "Mood name is required"}


def test_malformed_json_is_400(tables):
    resp = client.post(
        "/api/mood",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid request body"}


def test_wrong_field_type_is_400(tables):
    resp = client.post("/api/mood", json={"moodName": ["happy"]})
    assert resp.status_code == 400


# ── Recipe detail ────────────────────────────────────────────────────────


def test_recipe_detail_returns_stored_fields(tables):
    resp = client.get("/api/recipes/1")
    assert resp.status_code == 200
    assert resp.json() == tables.recipes[1]


def test_recipe_detail_keeps_null_fields(tables):
    resp = client.get("/api/recipes/3")
    assert resp.json() == {
        "id": 3,
        "title": "Chocolate Mug Cake",
        "description": None,
        "tags": None,
        "instructions": None,
    }


def test_recipe_detail_non_numeric_id_is_400(tables):
    resp = client.get("/api/recipes/abc")
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid recipe ID"}


def test_recipe_detail_unknown_id_is_404(tables):
    resp = client.get("/api/recipes/999999")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Recipe not found"}


def test_recipe_detail_rejects_loosely_formatted_ids(tables):
    for raw in ("0_1", "+1", "1.0", "%201%20", "1e3"):
        resp = client.get(f"/api/recipes/{raw}")
        assert resp.status_code == 400, raw
        assert resp.json() == {"error": "Invalid recipe ID"}


def test_recipe_detail_id_beyond_integer_range_is_404(tables):
    for raw in ("2147483648", "99999999999", "-2147483649", "9" * 5000):
        resp = client.get(f"/api/recipes/{raw}")
        assert resp.status_code == 404, raw[:20]
        assert resp.json() == {"error": "Recipe not found"}


# ── Router errors ────────────────────────────────────────────────────────


def test_unknown_route_uses_error_shape():
    resp = client.get("/api/nothing-here")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Not Found"}


def test_wrong_method_uses_error_shape():
    resp = client.delete("/api/mood")
    assert resp.status_code == 405
    assert resp.json() == {"error": "Method Not Allowed"}
    assert "POST" in resp.headers["allow"]


class _BrokenRecipeStore:
    def find_mood_id(self, name):
        raise RuntimeError("unexpected failure")


def test_unhandled_error_is_generic_500_with_cors(tables):
    app.dependency_overrides[get_recipe_store] = lambda: _BrokenRecipeStore()
    unguarded = TestClient(app, raise_server_exceptions=False)
    resp = unguarded.post(
        "/api/mood",
        json={"moodName": "happy"},
        headers={"Origin": "http://example.org"},
    )
    assert resp.status_code == 500
    assert resp.json() == {"error": "Internal server error"}
    assert resp.headers["access-control-allow-origin"] == "*"
