from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

FALLBACK_SECRET = "secretkey"


@dataclass(frozen=True)
class AuthConfig:
    secret: str = os.getenv("ACCESS_TOKEN_SECRET", FALLBACK_SECRET)
    algorithm: str = "HS256"
    token_ttl_seconds: int = 3600
    bcrypt_rounds: int = 10

    @property
    def uses_fallback_secret(self) -> bool:
        return self.secret == FALLBACK_SECRET


DEFAULT_AUTH_CONFIG = AuthConfig()
