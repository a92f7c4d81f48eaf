"""
db/connection.py
----------------
PostgreSQL connection pool shared by the expense store.
Connections always go back to the pool outside a transaction.
"""

import psycopg2
from psycopg2 import extensions, pool

from config import DATABASE_URL, DB_POOL_MAX, DB_POOL_MIN
from utils.logger import get_logger

logger = get_logger(__name__)

_pool: pool.SimpleConnectionPool | None = None


def init_pool(min_conn: int = DB_POOL_MIN, max_conn: int = DB_POOL_MAX, dsn: str = DATABASE_URL) -> None:
    """
    Open the pool. A second call is a no-op.

    Args:
        min_conn: Connections opened up front.
        max_conn: Upper bound; get_connection() fails beyond it.
        dsn: libpq connection string; defaults to DATABASE_URL.

    Raises:
        ValueError: If the bounds are inconsistent.
        psycopg2.OperationalError: If the database is unreachable.
    """
    global _pool
    if _pool is not None:
        return
    if not 0 <= min_conn <= max_conn or max_conn < 1:
        raise ValueError(f"invalid pool size {min_conn}-{max_conn} (check DB_POOL_MIN / DB_POOL_MAX)")
    try:
        _pool = pool.SimpleConnectionPool(min_conn, max_conn, dsn)
        logger.info(f"Expense database pool ready ({min_conn}-{max_conn} connections).")
    except psycopg2.OperationalError as e:
        logger.error(f"Cannot reach the expense database: {e}")
        raise


def get_connection():
    """
    Borrow a connection; hand it back with release_connection().

    Raises:
        RuntimeError: If init_pool() has not been called.
    """
    if _pool is None:
        raise RuntimeError("Database pool not initialized. Call init_pool() first.")
    return _pool.getconn()


def release_connection(conn) -> None:
    """
    Return a borrowed connection.

    A read leaves psycopg2 inside an implicit transaction; it is rolled
    back here so pooled connections never sit idle in transaction.
    A connection that was closed under us is discarded instead of reused.
    """
    if _pool is None:
        return
    if conn.closed:
        _pool.putconn(conn, close=True)
        return
    if conn.get_transaction_status() != extensions.TRANSACTION_STATUS_IDLE:
        conn.rollback()
    _pool.putconn(conn)


def close_pool() -> None:
    """Close every pooled connection."""
    global _pool
    if _pool is not None:
        _pool.closeall()
        _pool = None
        logger.info("Expense database pool closed.")
