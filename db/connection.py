"""
db/connection.py
----------------
Manages the PostgreSQL connection pool.
Uses psycopg2's ThreadedConnectionPool so concurrent catch-ups can share it,
and `transaction()` to run a unit of work on one pooled connection.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

import psycopg2
from psycopg2 import pool

from config import (
    DATABASE_URL,
    DB_CONNECT_TIMEOUT,
    DB_POOL_MAX,
    DB_POOL_MIN,
    STORE_TIMEOUT_MS,
)
from utils.errors import StoreError
from utils.logger import get_logger

logger = get_logger(__name__)

_pool: pool.ThreadedConnectionPool | None = None

# Driver failures that mean "the store is unavailable right now".
_STORE_FAILURES = (psycopg2.OperationalError, psycopg2.InterfaceError, pool.PoolError)


def init_pool(min_conn: int = DB_POOL_MIN, max_conn: int = DB_POOL_MAX) -> None:
    """
    Initialize the database connection pool.

    Args:
        min_conn: Minimum number of connections to keep open.
        max_conn: Maximum number of connections allowed.

    Raises:
        StoreError: If the database is unreachable.
    """
    global _pool
    if _pool is not None:
        return
    try:
        _pool = pool.ThreadedConnectionPool(
            min_conn, max_conn, DATABASE_URL, connect_timeout=DB_CONNECT_TIMEOUT
        )
        logger.info("Database connection pool initialized successfully.")
    except psycopg2.OperationalError as e:
        logger.error(f"Failed to initialize database pool: {e}")
        raise StoreError(f"Database unreachable: {e}") from e


def get_connection():
    """
    Get a connection from the pool.

    Returns:
        A psycopg2 connection object.

    Raises:
        RuntimeError: If the pool has not been initialized.
        StoreError: If no connection can be obtained.
    """
    if _pool is None:
        raise RuntimeError("Database pool not initialized. Call init_pool() first.")
    try:
        return _pool.getconn()
    except _STORE_FAILURES as e:
        logger.error(f"Failed to get a database connection: {e}")
        raise StoreError(f"No database connection available: {e}") from e


def release_connection(conn) -> None:
    """
    Return a connection back to the pool.

    Args:
        conn: The psycopg2 connection to release.
    """
    if _pool is not None:
        _pool.putconn(conn, close=bool(conn.closed))


def close_pool() -> None:
    """Close all connections in the pool."""
    global _pool
    if _pool is not None:
        _pool.closeall()
        _pool = None
        logger.info("Database connection pool closed.")


@contextmanager
def transaction(conn=None, timeout_ms: Optional[int] = None) -> Iterator:
    """
    Run a block inside one database transaction.

    Commits when the block finishes, rolls back on any exception, and
    always returns the connection to the pool. Connectivity failures and
    statement timeouts surface as `StoreError`.

    Args:
        conn: An open connection to join instead of starting a new
            transaction. The outer transaction owns commit and rollback.
        timeout_ms: Statement timeout for this transaction. Defaults to
            STORE_TIMEOUT_MS.

    Yields:
        The psycopg2 connection to run statements on.

    Usage:
        with transaction() as conn:
            with conn.cursor() as cur:
                cur.execute(...)
    """
    if conn is not None:
        yield conn
        return

    conn = get_connection()
    try:
        with conn.cursor() as cur:
            cur.execute(
                "SET LOCAL statement_timeout = %s;",
                (timeout_ms if timeout_ms is not None else STORE_TIMEOUT_MS,),
            )
        yield conn
        conn.commit()
    except _STORE_FAILURES as e:
        _rollback(conn)
        logger.error(f"Store failure, transaction rolled back: {e}")
        raise StoreError(str(e)) from e
    except Exception:
        _rollback(conn)
        raise
    finally:
        release_connection(conn)


def _rollback(conn) -> None:
    """Roll back, tolerating a connection that is already gone."""
    if conn.closed:
        return
    try:
        conn.rollback()
    except _STORE_FAILURES as e:
        logger.error(f"Rollback failed: {e}")
