from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager

import psycopg2
from psycopg2.extensions import cursor as Cursor
from psycopg2.extras import RealDictCursor
from psycopg2.pool import ThreadedConnectionPool

from ..errors import StorageError
from .config import DEFAULT_DATABASE_CONFIG, DatabaseConfig

logger = logging.getLogger(__name__)


def _rollback_quietly(conn) -> None:
    # A broken connection cannot roll back; it is discarded on putconn.
    try:
        conn.rollback()
    except psycopg2.Error:
        logger.warning("Rollback failed; connection will be discarded")


class Database:
    """Bounded PostgreSQL connection pool shared by all request threads.

    Constructed once per process and passed to the stores; nothing reaches it
    through module globals.
    """

    def __init__(self, config: DatabaseConfig = DEFAULT_DATABASE_CONFIG):
        self._config = config
        self._pool: ThreadedConnectionPool | None = None
        # ThreadedConnectionPool raises instead of waiting when exhausted,
        # so callers queue here for one of the max_connections slots.
        self._slots = threading.BoundedSemaphore(config.max_connections)

    @property
    def is_open(self) -> bool:
        return self._pool is not None

    def open(self) -> None:
        if self._pool is not None:
            return
        logger.info(
            "Opening database pool (min=%d, max=%d)",
            self._config.min_connections,
            self._config.max_connections,
        )
        try:
            self._pool = ThreadedConnectionPool(
                self._config.min_connections,
                self._config.max_connections,
                dsn=self._config.url,
            )
        except psycopg2.Error as exc:
            raise StorageError(f"Could not open database pool: {exc}", exc.pgcode) from exc

    def close(self) -> None:
        if self._pool is None:
            return
        logger.info("Closing database pool")
        self._pool.closeall()
        self._pool = None

    @contextmanager
    def cursor(self) -> Iterator[Cursor]:
        """
        Yield a dict-row cursor on a pooled connection.

        Waits for a free connection when all of them are in use. Commits when
        the block exits cleanly, rolls back otherwise, and always returns the
        connection to the pool. Any psycopg2 failure surfaces as
        ``StorageError`` with the original SQLSTATE attached.
        """
        pool = self._pool
        if pool is None:
            raise StorageError("Database pool not initialized")

        timeout = self._config.acquire_timeout
        if not self._slots.acquire(timeout=timeout):
            raise StorageError(f"Timed out after {timeout}s waiting for a database connection")

        try:
            conn = pool.getconn()
        except psycopg2.Error as exc:
            self._slots.release()
            raise StorageError(f"Could not acquire connection: {exc}", exc.pgcode) from exc

        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                yield cur
            conn.commit()
        except psycopg2.Error as exc:
            _rollback_quietly(conn)
            logger.warning("Database statement failed (pgcode=%s)", exc.pgcode)
            raise StorageError(str(exc).strip(), exc.pgcode) from exc
        except BaseException:
            _rollback_quietly(conn)
            raise
        finally:
            try:
                pool.putconn(conn, close=bool(conn.closed))
            finally:
                self._slots.release()

    def check_health(self) -> str:
        if self._pool is None:
            return "not_initialized"
        try:
            with self.cursor() as cur:
                cur.execute("SELECT 1")
                cur.fetchone()
        except StorageError:
            return "unhealthy"
        return "healthy"
