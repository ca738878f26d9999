"""
Seed data ingestion package.

Responsibilities:
- Read a CSV of recipes tagged with moods.
- Normalize titles, tag lists and mood names.
- Load moods, recipes and mood mappings into the database.
"""
