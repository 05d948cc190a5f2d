"""Database connection management."""

from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional

import psycopg
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool, PoolTimeout

from ..errors import StoreUnavailableError


class DatabaseConfig:
    """Connection parameters for the pool.

    Expects the dict from Config.get_db_config(), where the password has
    already been resolved from the environment.
    """

    def __init__(self, config: Dict[str, Any]) -> None:
        self.host = config.get("host", "localhost")
        self.port = config.get("port", 5432)
        self.database = config.get("database", "udnews")
        self.user = config.get("user", "udnews_user")
        self.password = config.get("password") or ""

    @property
    def connection_string(self) -> str:
        """Get psycopg connection string."""
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"


_connection_pool: Optional[ConnectionPool] = None


def get_connection_pool(config: Dict[str, Any]) -> ConnectionPool:
    """Get or create connection pool."""
    global _connection_pool
    if _connection_pool is None:
        db_config = DatabaseConfig(config)
        _connection_pool = ConnectionPool(
            db_config.connection_string,
            min_size=1,
            max_size=10,
            timeout=10.0,
            kwargs={"row_factory": dict_row},
            open=True,
        )
    return _connection_pool


def close_connection_pool() -> None:
    """Close the shared pool if one was opened."""
    global _connection_pool
    if _connection_pool is not None:
        _connection_pool.close()
        _connection_pool = None


@contextmanager
def get_connection(config: Dict[str, Any]) -> Generator[psycopg.Connection, None, None]:
    """
    Get a database connection from the pool.

    Connectivity failures are raised as StoreUnavailableError; query
    errors propagate unchanged.
    """
    try:
        pool = get_connection_pool(config)
        with pool.connection() as conn:
            yield conn
    except (psycopg.OperationalError, PoolTimeout) as e:
        raise StoreUnavailableError(f"Database unavailable: {e}") from e
