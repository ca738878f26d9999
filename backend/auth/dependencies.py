from __future__ import annotations

import logging

from fastapi import Request

from ..errors import AuthenticationError, ForbiddenError
from .tokens import Identity, verify_token

logger = logging.getLogger(__name__)


def _bearer_token(request: Request) -> str | None:
    header = request.headers.get("authorization")
    if not header:
        return None
    parts = header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


def require_user(request: Request) -> Identity:
    """Raise 401 if no bearer token is sent, 403 if it does not verify."""
    token = _bearer_token(request)
    if token is None:
        raise AuthenticationError("Authentication required")

    result = verify_token(token, request.app.state.auth_config)
    if not result.ok:
        logger.info("Rejected bearer token on %s: %s", request.url.path, result.reason)
        raise ForbiddenError("Invalid or expired token")
    return result.identity


def require_owner(user_id: str, identity: Identity) -> int:
    """Return ``user_id`` as an int if it names the caller, else raise 403."""
    try:
        parsed = int(user_id)
    except ValueError:
        parsed = None
    if parsed != identity.id:
        raise ForbiddenError("Forbidden")
    return parsed
