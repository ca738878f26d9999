from __future__ import annotations

from fastapi import Request

from ..db.pool import Database


class FeedbackStore:
    def __init__(self, db: Database):
        self._db = db

    def record_feedback(
        self,
        user_id: int,
        recipe_id: int,
        rating: int,
        comments: str = "",
    ) -> None:
        """Append a feedback row. Repeat submissions for the same recipe are kept."""
        with self._db.cursor() as cur:
            cur.execute(
                "INSERT INTO feedback (user_id, recipe_id, rating, comments) "
                "VALUES (%s, %s, %s, %s)",
                (user_id, recipe_id, rating, comments),
            )


def get_feedback_store(request: Request) -> FeedbackStore:
    return FeedbackStore(request.app.state.database)
