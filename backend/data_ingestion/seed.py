from __future__ import annotations

from dataclasses import dataclass
from typing import List

import pandas as pd

from ..db.pool import Database
from ..db.schema import init_schema
from .config import DEFAULT_SEED_CONFIG, SeedConfig


SEED_COLUMNS: List[str] = [
    "title",
    "description",
    "tags",
    "instructions",
    "moods",
]


@dataclass(frozen=True)
class SeedSummary:
    moods: int
    recipes: int
    mappings: int


def _split_list(raw: str, separator: str) -> list[str]:
    items = [part.strip() for part in str(raw).split(separator)]
    # Preserve order, drop blanks and repeats
    return list(dict.fromkeys(item for item in items if item))


def load_seed_frame(config: SeedConfig = DEFAULT_SEED_CONFIG) -> pd.DataFrame:
    """
    Read and normalize the seed CSV.

    Missing columns are treated as empty, rows without a title are dropped,
    and mood names are lower-cased so they match the API's lookup.
    """
    df = pd.read_csv(config.csv_path, dtype=str).fillna("")
    for col in SEED_COLUMNS:
        if col not in df.columns:
            df[col] = ""

    df["title"] = df["title"].str.strip()
    df = df[df["title"] != ""].copy()

    sep = config.list_separator
    df["tags_list"] = df["tags"].apply(lambda s: _split_list(s, sep))
    df["moods_list"] = df["moods"].apply(
        lambda s: _split_list(s.lower(), sep)
    )
    return df.reset_index(drop=True)


def run_seed(db: Database, config: SeedConfig = DEFAULT_SEED_CONFIG) -> SeedSummary:
    """
    Load the seed CSV into moods, recipes and recipe_mood_mappings.

    Runs in a single transaction. Recipes whose title already exists are
    skipped, so re-running the seed does not duplicate rows.
    """
    df = load_seed_frame(config)
    mood_names = sorted({m for moods in df["moods_list"] for m in moods})

    recipes_added = 0
    mappings_added = 0
    with db.cursor() as cur:
        mood_ids: dict[str, int] = {}
        for name in mood_names:
            cur.execute(
                "INSERT INTO moods (name) VALUES (%s) ON CONFLICT (name) DO NOTHING",
                (name,),
            )
            cur.execute("SELECT id FROM moods WHERE name = %s", (name,))
            mood_ids[name] = cur.fetchone()["id"]

        for row in df.itertuples(index=False):
            cur.execute("SELECT id FROM recipes WHERE title = %s", (row.title,))
            if cur.fetchone() is not None:
                continue

            cur.execute(
                "INSERT INTO recipes (title, description, tags, instructions) "
                "VALUES (%s, %s, %s, %s) RETURNING id",
                (
                    row.title,
                    row.description or None,
                    row.tags_list,
                    row.instructions or None,
                ),
            )
            recipe_id = cur.fetchone()["id"]
            recipes_added += 1

            for mood in row.moods_list:
                cur.execute(
                    "INSERT INTO recipe_mood_mappings (recipe_id, mood_id) VALUES (%s, %s)",
                    (recipe_id, mood_ids[mood]),
                )
                mappings_added += 1

    return SeedSummary(
        moods=len(mood_ids),
        recipes=recipes_added,
        mappings=mappings_added,
    )


if __name__ == "__main__":
    database = Database()
    database.open()
    try:
        init_schema(database)
        summary = run_seed(database)
    finally:
        database.close()
    print(
        f"Seed complete: {summary.moods} moods, {summary.recipes} new recipes, "
        f"{summary.mappings} mood mappings."
    )
