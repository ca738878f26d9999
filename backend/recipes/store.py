from __future__ import annotations

from typing import Any

from fastapi import Request

from ..db.pool import Database


class RecipeStore:
    """Read-only access to moods, recipes and the mapping table."""

    def __init__(self, db: Database):
        self._db = db

    def find_mood_id(self, name: str) -> int | None:
        with self._db.cursor() as cur:
            cur.execute("SELECT id FROM moods WHERE name = %s", (name,))
            row = cur.fetchone()
        return row["id"] if row else None

    def recipes_for_mood(self, mood_id: int) -> list[dict[str, Any]]:
        with self._db.cursor() as cur:
            cur.execute(
                """
                SELECT recipes.* FROM recipes
                JOIN recipe_mood_mappings rmm ON recipes.id = rmm.recipe_id
                WHERE rmm.mood_id = %s
                """,
                (mood_id,),
            )
            rows = cur.fetchall()
        return [dict(r) for r in rows]

    def get_recipe(self, recipe_id: int) -> dict[str, Any] | None:
        with self._db.cursor() as cur:
            cur.execute("SELECT * FROM recipes WHERE id = %s", (recipe_id,))
            row = cur.fetchone()
        return dict(row) if row else None


def get_recipe_store(request: Request) -> RecipeStore:
    return RecipeStore(request.app.state.database)
