from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from .config import DEFAULT_AUTH_CONFIG, AuthConfig


@dataclass(frozen=True)
class Identity:
    id: int
    username: str


@dataclass(frozen=True)
class TokenResult:
    """Outcome of verifying a bearer token: either an identity or a reason."""

    identity: Identity | None = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.identity is not None


def issue_token(identity: Identity, config: AuthConfig = DEFAULT_AUTH_CONFIG) -> str:
    """Sign an access token carrying ``{id, username}`` that expires after the configured TTL."""
    now = datetime.now(timezone.utc)
    payload = {
        "id": identity.id,
        "username": identity.username,
        "iat": now,
        "exp": now + timedelta(seconds=config.token_ttl_seconds),
    }
    return jwt.encode(payload, config.secret, algorithm=config.algorithm)


def verify_token(token: str, config: AuthConfig = DEFAULT_AUTH_CONFIG) -> TokenResult:
    """
    Check signature and expiry and decode the identity claims.

    Never raises for a bad token; the failure is reported in ``reason``.
    """
    try:
        payload = jwt.decode(
            token,
            config.secret,
            algorithms=[config.algorithm],
            options={"require": ["exp"]},
        )
    except jwt.ExpiredSignatureError:
        return TokenResult(reason="expired")
    except jwt.InvalidTokenError:
        return TokenResult(reason="invalid")

    user_id = payload.get("id")
    username = payload.get("username")
    if not isinstance(user_id, int) or isinstance(user_id, bool) or not isinstance(username, str):
        return TokenResult(reason="malformed claims")
    return TokenResult(identity=Identity(id=user_id, username=username))
