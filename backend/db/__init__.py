"""
PostgreSQL persistence layer.

Responsibilities:
- Own the bounded connection pool and its lifecycle.
- Hand out one connection per query with guaranteed release.
- Create the fixed schema idempotently at startup.
"""
