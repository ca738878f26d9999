from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..recipes.models import RecipeOut


class CredentialsRequest(BaseModel):
    username: str | None = None
    password: str | None = None


class UserOut(BaseModel):
    id: int
    username: str


class RegisterResponse(BaseModel):
    user: UserOut


class LoginResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(..., alias="accessToken")


class ProfileOut(BaseModel):
    id: int
    username: str
    preferences: Any = None


class FavoriteRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    recipe_id: int | None = Field(default=None, alias="recipeId")


class FavoritesResponse(BaseModel):
    favorites: list[RecipeOut]


class MessageResponse(BaseModel):
    message: str
