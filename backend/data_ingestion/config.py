from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class SeedConfig:
    """
    Configuration for loading seed recipes into the database.
    """

    csv_path: Path = Path(__file__).resolve().parent.parent / "data" / "seed_recipes.csv"
    list_separator: str = "|"


DEFAULT_SEED_CONFIG = SeedConfig()
