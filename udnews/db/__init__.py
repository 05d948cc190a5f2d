"""Entity storage for articles and sources."""

from ..config import Config
from .base import EntityStore
from .connection import close_connection_pool, get_connection, get_connection_pool
from .init import init_database, validate_connection
from .memory import MemoryStore
from .postgres import PostgresStore


def create_store(config: Config) -> EntityStore:
    """Build the store backend selected by configuration."""
    backend = config.config.store.backend
    if backend == "postgres":
        return PostgresStore(config.get_db_config())
    return MemoryStore()


__all__ = [
    "EntityStore",
    "MemoryStore",
    "PostgresStore",
    "close_connection_pool",
    "create_store",
    "get_connection",
    "get_connection_pool",
    "init_database",
    "validate_connection",
]
