from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

MIN_RATING = 1
MAX_RATING = 5


class FeedbackRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    recipe_id: int | None = Field(default=None, alias="recipeId")
    rating: int | None = None
    comments: str | None = None
