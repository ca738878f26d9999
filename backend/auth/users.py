from __future__ import annotations

import logging
from typing import Any

import bcrypt

from ..errors import ConflictError, ValidationError
from ..users.store import UserStore
from .config import DEFAULT_AUTH_CONFIG, AuthConfig
from .tokens import Identity

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes and newer releases refuse longer input.
_MAX_PASSWORD_BYTES = 72


def hash_password(plain: str, rounds: int = DEFAULT_AUTH_CONFIG.bcrypt_rounds) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode(), hashed.encode())
    except ValueError:
        return False


# Checked against when the username is unknown, so both paths pay for bcrypt.
_DUMMY_HASH = hash_password("moodrecipe-dummy-password")


def register(
    store: UserStore,
    username: str,
    password: str,
    config: AuthConfig = DEFAULT_AUTH_CONFIG,
) -> dict[str, Any]:
    """Create a user. Returns ``{id, username}``; raises ``ConflictError`` if taken."""
    if len(password.encode()) > _MAX_PASSWORD_BYTES:
        raise ValidationError("Password must be at most 72 bytes")

    password_hash = hash_password(password, config.bcrypt_rounds)

    # Fast path only; create_user still maps a unique violation to a conflict.
    if store.find_by_username(username) is not None:
        raise ConflictError("Username already taken")

    user = store.create_user(username, password_hash)
    logger.info("Registered user id=%s", user["id"])
    return user


def authenticate(store: UserStore, username: str, password: str) -> Identity | None:
    """Verify credentials. Returns the identity, or ``None`` for any mismatch."""
    record = store.find_by_username(username)
    if record is None:
        verify_password(password, _DUMMY_HASH)
        return None
    if verify_password(password, record["password_hash"]):
        return Identity(id=record["id"], username=record["username"])
    return None
