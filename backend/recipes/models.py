from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class MoodRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    mood_name: str | None = Field(default=None, alias="moodName")


class RecipeOut(BaseModel):
    id: int
    title: str
    description: str | None = None
    tags: list[str] | None = None
    instructions: str | None = None


class MoodRecipesResponse(BaseModel):
    recipes: list[RecipeOut]


class ExternalRecipe(BaseModel):
    """A third-party recipe remapped to the local shape. Never persisted."""

    title: str | None = None
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    instructions: str = ""
