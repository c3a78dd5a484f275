"""Local PostgreSQL access for development without a hosted Supabase project.

Enabled with ``USE_LOCAL_DB=1``. The schema must provide the ``profiles``,
``posts`` and ``private_messages`` tables with a unique index on
``profiles.nickname`` and ``gen_random_uuid()`` defaults for post and message ids.
"""
from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from typing import Any, Generator

import psycopg2
from psycopg2 import pool
from psycopg2.extras import RealDictCursor

logger = logging.getLogger(__name__)


class PostgresClient:
    """Thin wrapper over a psycopg2 connection pool."""

    def __init__(self) -> None:
        self.enabled = os.getenv("USE_LOCAL_DB", "0") == "1"
        self._pool: Any = None

        if self.enabled:
            try:
                self._pool = pool.SimpleConnectionPool(
                    minconn=1,
                    maxconn=10,
                    host=os.getenv("POSTGRES_HOST", "localhost"),
                    port=int(os.getenv("POSTGRES_PORT", "5432")),
                    database=os.getenv("POSTGRES_DB", "lfgboard"),
                    user=os.getenv("POSTGRES_USER", "lfgboard"),
                    password=os.getenv("POSTGRES_PASSWORD", "lfgboard_dev_password"),
                )
            except psycopg2.Error as exc:  # pragma: no cover
                raise RuntimeError(f"Failed to initialize PostgreSQL connection pool: {exc}") from exc
            logger.info("Local PostgreSQL pool ready")

    @contextmanager
    def cursor(self, dict_cursor: bool = True) -> Generator[Any, None, None]:
        """Yield a cursor inside a transaction that commits on success.

        Raises:
            RuntimeError: If the local database is not enabled.
        """
        if not self.enabled or self._pool is None:
            raise RuntimeError("Local PostgreSQL database is not enabled")

        conn = self._pool.getconn()
        try:
            cur = conn.cursor(cursor_factory=RealDictCursor if dict_cursor else None)
            try:
                yield cur
            finally:
                cur.close()
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            self._pool.putconn(conn)

    def fetch_one(self, query: str, params: tuple = ()) -> dict[str, Any] | None:
        with self.cursor() as cur:
            cur.execute(query, params)
            row = cur.fetchone()
            return dict(row) if row else None

    def fetch_all(self, query: str, params: tuple = ()) -> list[dict[str, Any]]:
        with self.cursor() as cur:
            cur.execute(query, params)
            return [dict(row) for row in cur.fetchall()]

    def insert_returning(self, query: str, params: tuple = ()) -> dict[str, Any]:
        """Run an INSERT ... RETURNING * and return the new row."""
        with self.cursor() as cur:
            cur.execute(query, params)
            row = cur.fetchone()
            if not row:
                raise RuntimeError("Insert query did not return a row")
            return dict(row)

    def execute(self, query: str, params: tuple = ()) -> int:
        """Run an UPDATE or DELETE and return the affected row count."""
        with self.cursor(dict_cursor=False) as cur:
            cur.execute(query, params)
            return cur.rowcount

    def close(self) -> None:
        if self._pool:
            self._pool.closeall()


_POSTGRES_CLIENT: PostgresClient | None = None


def get_postgres_client() -> PostgresClient | None:
    global _POSTGRES_CLIENT
    if os.getenv("USE_LOCAL_DB", "0") != "1":
        return None
    if _POSTGRES_CLIENT is None:
        _POSTGRES_CLIENT = PostgresClient()
    return _POSTGRES_CLIENT
