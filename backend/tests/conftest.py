from __future__ import annotations

from typing import Any

import pytest

from backend.app import app
from backend.auth.tokens import Identity, issue_token
from backend.auth.users import hash_password
from backend.errors import ConflictError
from backend.feedback.store import get_feedback_store
from backend.recipes.store import get_recipe_store
from backend.users.store import get_user_store


class FakeTables:
    """In-memory stand-in for the six tables, shared by the fake stores."""

    def __init__(self) -> None:
        self.moods: dict[str, int] = {"happy": 1, "sad": 2, "bored": 3}
        self.recipes: dict[int, dict[str, Any]] = {
            1: {
                "id": 1,
                "title": "Lemon Herb Salad",
                "description": "Crisp greens in a lemon dressing.",
                "tags": ["salad", "vegan"],
                "instructions": "Whisk and toss.",
            },
            2: {
                "id": 2,
                "title": "Tomato Basil Soup",
                "description": "Slow-simmered tomatoes.",
                "tags": ["soup"],
                "instructions": "Simmer and blend.",
            },
            3: {
                "id": 3,
                "title": "Chocolate Mug Cake",
                "description": None,
                "tags": None,
                "instructions": None,
            },
        }
        # (recipe_id, mood_id)
        self.mappings: list[tuple[int, int]] = [(1, 1), (3, 1), (2, 2), (3, 2)]
        self.users: dict[int, dict[str, Any]] = {}
        self.favorites: list[tuple[int, int]] = []
        self.feedback: list[dict[str, Any]] = []

    def add_user(self, username: str, password_hash: str, preferences: Any = None) -> dict[str, Any]:
        user_id = len(self.users) + 1
        self.users[user_id] = {
            "id": user_id,
            "username": username,
            "password_hash": password_hash,
            "preferences": preferences,
        }
        return self.users[user_id]


class FakeRecipeStore:
    def __init__(self, tables: FakeTables):
        self.tables = tables

    def find_mood_id(self, name: str) -> int | None:
        return self.tables.moods.get(name)

    def recipes_for_mood(self, mood_id: int) -> list[dict[str, Any]]:
        return [dict(self.tables.recipes[r]) for r, m in self.tables.mappings if m == mood_id]

    def get_recipe(self, recipe_id: int) -> dict[str, Any] | None:
        recipe = self.tables.recipes.get(recipe_id)
        return dict(recipe) if recipe else None


class FakeUserStore:
    def __init__(self, tables: FakeTables):
        self.tables = tables

    def find_by_username(self, username: str) -> dict[str, Any] | None:
        for user in self.tables.users.values():
            if user["username"] == username:
                return dict(user)
        return None

    def create_user(self, username: str, password_hash: str) -> dict[str, Any]:
        if self.find_by_username(username) is not None:
            raise ConflictError("Username already taken")
        user = self.tables.add_user(username, password_hash)
        return {"id": user["id"], "username": user["username"]}

    def get_profile(self, user_id: int) -> dict[str, Any] | None:
        user = self.tables.users.get(user_id)
        if user is None:
            return None
        return {"id": user["id"], "username": user["username"], "preferences": user["preferences"]}

    def list_favorites(self, user_id: int) -> list[dict[str, Any]]:
        return [dict(self.tables.recipes[r]) for u, r in self.tables.favorites if u == user_id]

    def add_favorite(self, user_id: int, recipe_id: int) -> bool:
        if (user_id, recipe_id) in self.tables.favorites:
            return False
        self.tables.favorites.append((user_id, recipe_id))
        return True


class FakeFeedbackStore:
    def __init__(self, tables: FakeTables):
        self.tables = tables

    def record_feedback(self, user_id: int, recipe_id: int, rating: int, comments: str = "") -> None:
        self.tables.feedback.append({
            "user_id": user_id,
            "recipe_id": recipe_id,
            "rating": rating,
            "comments": comments,
        })


@pytest.fixture
def tables():
    state = FakeTables()
    app.dependency_overrides[get_recipe_store] = lambda: FakeRecipeStore(state)
    app.dependency_overrides[get_user_store] = lambda: FakeUserStore(state)
    app.dependency_overrides[get_feedback_store] = lambda: FakeFeedbackStore(state)
    yield state
    app.dependency_overrides.clear()


@pytest.fixture
def alice(tables):
    """A stored user plus a valid bearer header for them."""
    user = tables.add_user("alice", hash_password("wonderland"), {"diet": "vegetarian"})
    token = issue_token(Identity(id=user["id"], username="alice"))
    return {"id": user["id"], "headers": {"Authorization": f"Bearer {token}"}}
