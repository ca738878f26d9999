from __future__ import annotations

import logging
import re
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from .auth.config import DEFAULT_AUTH_CONFIG
from .auth.dependencies import require_owner, require_user
from .auth.tokens import Identity, issue_token
from .auth.users import authenticate, register
from .db.pool import Database
from .db.schema import init_schema
from .errors import (
    AuthenticationError,
    NotFoundError,
    StorageError,
    ValidationError,
    register_error_handlers,
)
from .external.client import fetch_external_recipes
from .external.config import DEFAULT_EXTERNAL_CONFIG
from .feedback.models import MAX_RATING, MIN_RATING, FeedbackRequest
from .feedback.store import FeedbackStore, get_feedback_store
from .recipes.models import ExternalRecipe, MoodRecipesResponse, MoodRequest, RecipeOut
from .recipes.store import RecipeStore, get_recipe_store
from .users.models import (
    CredentialsRequest,
    FavoriteRequest,
    FavoritesResponse,
    LoginResponse,
    MessageResponse,
    ProfileOut,
    RegisterResponse,
    UserOut,
)
from .users.store import UserStore, get_user_store

logger = logging.getLogger(__name__)

# Path ids are plain decimal integers within PostgreSQL INTEGER.
_ID_PATTERN = re.compile(r"-?[0-9]+")
_PG_INT_MIN, _PG_INT_MAX = -(2**31), 2**31 - 1


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    database: Database = app.state.database
    if app.state.auth_config.uses_fallback_secret:
        logger.warning("ACCESS_TOKEN_SECRET is not set; using the insecure fallback secret")
    try:
        database.open()
        init_schema(database)
    except StorageError:
        # Keep serving; requests that need storage fail with 500 until restart.
        logger.exception("Database unavailable at startup")
    yield
    database.close()


app = FastAPI(title="MoodRecipe API", version="1.0.0", lifespan=lifespan)
app.state.database = Database()
app.state.auth_config = DEFAULT_AUTH_CONFIG
app.state.external_config = DEFAULT_EXTERNAL_CONFIG
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
register_error_handlers(app)


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/", response_class=PlainTextResponse)
def root() -> str:
    return "MoodRecipe Backend Running"


@app.get("/health")
def health(request: Request) -> dict[str, str]:
    return {"status": "ok", "database": request.app.state.database.check_health()}


@app.post("/api/mood", response_model=MoodRecipesResponse)
def mood_recipes(
    body: MoodRequest,
    store: RecipeStore = Depends(get_recipe_store),
) -> MoodRecipesResponse:
    if not body.mood_name:
        raise ValidationError("Mood name is required")

    mood_id = store.find_mood_id(body.mood_name.lower())
    if mood_id is None:
        raise NotFoundError("Mood not found")

    return MoodRecipesResponse(recipes=store.recipes_for_mood(mood_id))


@app.get("/api/recipes/{recipe_id}", response_model=RecipeOut)
def recipe_detail(
    recipe_id: str,
    store: RecipeStore = Depends(get_recipe_store),
) -> RecipeOut:
    if not _ID_PATTERN.fullmatch(recipe_id):
        raise ValidationError("Invalid recipe ID")

    recipe = None
    # More than ten significant digits can never fit in INTEGER.
    if len(recipe_id.lstrip("-0")) <= 10:
        parsed_id = int(recipe_id)
        if _PG_INT_MIN <= parsed_id <= _PG_INT_MAX:
            recipe = store.get_recipe(parsed_id)
    if recipe is None:
        raise NotFoundError("Recipe not found")
    return RecipeOut(**recipe)


@app.get("/api/external-recipes", response_model=list[ExternalRecipe])
def external_recipes(request: Request) -> list[ExternalRecipe]:
    return fetch_external_recipes(request.app.state.external_config)


# ── Account endpoints ────────────────────────────────────────────────────


@app.post(
    "/api/users/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
)
def register_user(
    body: CredentialsRequest,
    request: Request,
    store: UserStore = Depends(get_user_store),
) -> RegisterResponse:
    if not body.username or not body.password:
        raise ValidationError("Username and password required")

    user = register(store, body.username, body.password, request.app.state.auth_config)
    return RegisterResponse(user=UserOut(**user))


@app.post("/api/users/login", response_model=LoginResponse)
def login(
    body: CredentialsRequest,
    request: Request,
    store: UserStore = Depends(get_user_store),
) -> LoginResponse:
    if not body.username or not body.password:
        raise ValidationError("Username and password required")

    identity = authenticate(store, body.username, body.password)
    if identity is None:
        raise AuthenticationError("Invalid credentials")

    token = issue_token(identity, request.app.state.auth_config)
    return LoginResponse(access_token=token)


# ── Authenticated endpoints ──────────────────────────────────────────────


@app.get("/api/users/profile", response_model=ProfileOut)
def profile(
    user: Identity = Depends(require_user),
    store: UserStore = Depends(get_user_store),
) -> ProfileOut:
    record = store.get_profile(user.id)
    if record is None:
        raise NotFoundError("User not found")
    return ProfileOut(**record)


@app.get("/api/users/{user_id}/favorites", response_model=FavoritesResponse)
def list_favorites(
    user_id: str,
    user: Identity = Depends(require_user),
    store: UserStore = Depends(get_user_store),
) -> FavoritesResponse:
    owner_id = require_owner(user_id, user)
    return FavoritesResponse(favorites=store.list_favorites(owner_id))


@app.post(
    "/api/users/{user_id}/favorites",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_favorite(
    user_id: str,
    body: FavoriteRequest,
    user: Identity = Depends(require_user),
    store: UserStore = Depends(get_user_store),
) -> MessageResponse:
    owner_id = require_owner(user_id, user)
    if not body.recipe_id:
        raise ValidationError("Recipe id required")

    store.add_favorite(owner_id, body.recipe_id)
    return MessageResponse(message="Added to favorites")


@app.post(
    "/api/feedback",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
def submit_feedback(
    body: FeedbackRequest,
    user: Identity = Depends(require_user),
    store: FeedbackStore = Depends(get_feedback_store),
) -> MessageResponse:
    if not body.recipe_id or body.rating is None:
        raise ValidationError("Recipe ID and rating required")
    if not MIN_RATING <= body.rating <= MAX_RATING:
        raise ValidationError("Rating must be 1 to 5")

    store.record_feedback(user.id, body.recipe_id, body.rating, body.comments or "")
    return MessageResponse(message="Feedback recorded")
