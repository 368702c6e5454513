"""Database package public API."""

from .connection import SQLitePool, close_db_pool, get_db_pool, init_db_pool
from .migrations import run_migrations

__all__ = [
    "SQLitePool",
    "close_db_pool",
    "get_db_pool",
    "init_db_pool",
    "run_migrations",
]
