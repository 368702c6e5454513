"""Base repository pattern for database operations."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, List, Optional, Sequence

import aiosqlite

from database.connection import SQLitePool


class BaseRepository:
    """Base repository with common database operations.

    Every helper takes an optional ``conn``. When given, the statement runs on
    that connection so it joins the caller's open transaction; otherwise a
    pooled connection is borrowed in autocommit mode.
    """

    def __init__(self, pool: SQLitePool) -> None:
        self.pool = pool

    @asynccontextmanager
    async def _use(self, conn: Optional[aiosqlite.Connection]) -> AsyncIterator[aiosqlite.Connection]:
        if conn is not None:
            yield conn
            return
        async with self.pool.connection() as pooled:
            yield pooled

    async def execute(
        self, query: str, params: Sequence[Any] = (), conn: Optional[aiosqlite.Connection] = None
    ) -> int:
        """Execute a query and return the number of affected rows."""
        async with self._use(conn) as db:
            cursor = await db.execute(query, params)
            return cursor.rowcount

    async def fetch_one(
        self, query: str, params: Sequence[Any] = (), conn: Optional[aiosqlite.Connection] = None
    ) -> Optional[aiosqlite.Row]:
        """Fetch a single row."""
        async with self._use(conn) as db:
            cursor = await db.execute(query, params)
            return await cursor.fetchone()

    async def fetch_all(
        self, query: str, params: Sequence[Any] = (), conn: Optional[aiosqlite.Connection] = None
    ) -> List[aiosqlite.Row]:
        """Fetch all rows."""
        async with self._use(conn) as db:
            cursor = await db.execute(query, params)
            return list(await cursor.fetchall())

    async def fetch_value(
        self, query: str, params: Sequence[Any] = (), conn: Optional[aiosqlite.Connection] = None
    ) -> Optional[Any]:
        """Fetch a single value from a single row."""
        row = await self.fetch_one(query, params, conn=conn)
        return row[0] if row else None
