from __future__ import annotations

from typing import Any

from fastapi import Request
from psycopg2 import errorcodes

from ..db.pool import Database
from ..errors import ConflictError, StorageError


class UserStore:
    """Users and their favorites."""

    def __init__(self, db: Database):
        self._db = db

    def find_by_username(self, username: str) -> dict[str, Any] | None:
        with self._db.cursor() as cur:
            cur.execute(
                "SELECT id, username, password_hash FROM users WHERE username = %s",
                (username,),
            )
            row = cur.fetchone()
        return dict(row) if row else None

    def create_user(self, username: str, password_hash: str) -> dict[str, Any]:
        """
        Insert a user and return ``{id, username}``.

        The UNIQUE constraint on ``username`` decides conflicts; a violation
        raises ``ConflictError`` even when a caller's pre-check passed.
        """
        try:
            with self._db.cursor() as cur:
                cur.execute(
                    "INSERT INTO users (username, password_hash) VALUES (%s, %s) "
                    "RETURNING id, username",
                    (username, password_hash),
                )
                row = cur.fetchone()
        except StorageError as exc:
            if exc.pgcode == errorcodes.UNIQUE_VIOLATION:
                raise ConflictError("Username already taken") from exc
            raise
        return dict(row)

    def get_profile(self, user_id: int) -> dict[str, Any] | None:
        with self._db.cursor() as cur:
            cur.execute(
                "SELECT id, username, preferences FROM users WHERE id = %s",
                (user_id,),
            )
            row = cur.fetchone()
        return dict(row) if row else None

    def list_favorites(self, user_id: int) -> list[dict[str, Any]]:
        with self._db.cursor() as cur:
            cur.execute(
                """
                SELECT recipes.* FROM favorites
                JOIN recipes ON favorites.recipe_id = recipes.id
                WHERE favorites.user_id = %s
                """,
                (user_id,),
            )
            rows = cur.fetchall()
        return [dict(r) for r in rows]

    def add_favorite(self, user_id: int, recipe_id: int) -> bool:
        """Idempotent insert. Returns False when the favorite already existed."""
        with self._db.cursor() as cur:
            cur.execute(
                "INSERT INTO favorites (user_id, recipe_id) VALUES (%s, %s) "
                "ON CONFLICT (user_id, recipe_id) DO NOTHING",
                (user_id, recipe_id),
            )
            inserted = cur.rowcount == 1
        return inserted


def get_user_store(request: Request) -> UserStore:
    return UserStore(request.app.state.database)
