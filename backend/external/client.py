from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from ..errors import UpstreamError
from ..recipes.models import ExternalRecipe
from .config import DEFAULT_EXTERNAL_CONFIG, ExternalConfig

logger = logging.getLogger(__name__)


def normalize_recipe(record: dict[str, Any]) -> ExternalRecipe:
    """Map an upstream record (name/summary/tags/instructions) to the local shape."""
    return ExternalRecipe(
        title=record.get("name"),
        description=record.get("summary") or "",
        tags=record.get("tags") or [],
        instructions=record.get("instructions") or "",
    )


def fetch_external_recipes(
    config: ExternalConfig = DEFAULT_EXTERNAL_CONFIG,
) -> list[ExternalRecipe]:
    """
    GET the upstream recipe list and normalize every record.

    Any failure (network, non-2xx status, body that is not a list of objects)
    raises ``UpstreamError``. There is no retry and no partial result.
    """
    try:
        response = httpx.get(config.url, timeout=config.timeout)
        response.raise_for_status()
        payload = response.json()
    except httpx.HTTPError as exc:
        raise UpstreamError(f"Upstream request to {config.url} failed: {exc}") from exc
    except ValueError as exc:
        raise UpstreamError(f"Upstream returned invalid JSON: {exc}") from exc

    if not isinstance(payload, list) or not all(isinstance(r, dict) for r in payload):
        raise UpstreamError("Upstream returned an unexpected body shape")

    try:
        recipes = [normalize_recipe(r) for r in payload]
    except PydanticValidationError as exc:
        raise UpstreamError(f"Upstream record has unexpected field types: {exc}") from exc

    logger.info("Fetched %d external recipes", len(recipes))
    return recipes
