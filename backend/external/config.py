from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class ExternalConfig:
    url: str = os.getenv(
        "EXTERNAL_RECIPES_URL", "https://api.example.com/external-recipes"
    )
    timeout: float = 10.0


DEFAULT_EXTERNAL_CONFIG = ExternalConfig()
