"""SQLite connection pool with a single serialized writer."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, List, Optional

import aiosqlite

from core.exceptions import ConnectionPoolError
from core.logger import get_logger

logger = get_logger(__name__)


class SQLitePool:
    """Small pool of aiosqlite connections.

    Reads may run on any idle connection. Every mutation of queue positions or
    event rows goes through :meth:`transaction`, which holds the pool-wide
    write lock and opens a ``BEGIN IMMEDIATE`` transaction, so writers never
    interleave inside this process and SQLite serializes them across processes.
    """

    def __init__(self, database_path: str, pool_size: int = 5, busy_timeout_ms: int = 5000) -> None:
        self.database_path = Path(database_path)
        self.pool_size = pool_size
        self.busy_timeout_ms = busy_timeout_ms
        self._connections: List[aiosqlite.Connection] = []
        self._idle: Optional[asyncio.Queue] = None
        self._write_lock: Optional[asyncio.Lock] = None
        self._init_lock: Optional[asyncio.Lock] = None
        self._initialized = False

    @property
    def size(self) -> int:
        return len(self._connections)

    async def init_pool(self) -> None:
        if self._initialized:
            return
        if self._init_lock is None:
            self._init_lock = asyncio.Lock()

        async with self._init_lock:
            if self._initialized:
                return

            if not self.database_path.parent.exists():
                self.database_path.parent.mkdir(parents=True, exist_ok=True)

            self._idle = asyncio.Queue()
            self._write_lock = asyncio.Lock()
            for _ in range(self.pool_size):
                # isolation_level=None: transactions are opened explicitly
                conn = await aiosqlite.connect(self.database_path.as_posix(), isolation_level=None)
                conn.row_factory = aiosqlite.Row
                await self._apply_pragma(conn)
                self._connections.append(conn)
                self._idle.put_nowait(conn)

            self._initialized = True
            logger.info(f"SQLite pool ready: {self.database_path} ({self.pool_size} connections)")

    async def close(self) -> None:
        while self._connections:
            conn = self._connections.pop()
            await conn.close()
        self._idle = None
        self._initialized = False

    async def _apply_pragma(self, conn: aiosqlite.Connection) -> None:
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA synchronous=FULL")
        await conn.execute("PRAGMA foreign_keys=ON")
        await conn.execute("PRAGMA temp_store=MEMORY")
        await conn.execute(f"PRAGMA busy_timeout={self.busy_timeout_ms}")

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[aiosqlite.Connection]:
        """Borrow a connection in autocommit mode."""
        if not self._initialized:
            await self.init_pool()
        if self._idle is None:
            raise ConnectionPoolError("Database pool is closed")
        conn = await self._idle.get()
        try:
            yield conn
        finally:
            self._idle.put_nowait(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """Run a serialized write transaction; commits on success, rolls back on error."""
        if not self._initialized:
            await self.init_pool()
        async with self._write_lock:
            async with self.connection() as conn:
                await conn.execute("BEGIN IMMEDIATE")
                try:
                    yield conn
                except BaseException:
                    await conn.rollback()
                    raise
                else:
                    await conn.commit()


_db_pool: Optional[SQLitePool] = None


def get_db_pool() -> SQLitePool:
    if _db_pool is None:
        raise ConnectionPoolError("Database pool not initialized")
    return _db_pool


async def init_db_pool(database_path: str, pool_size: int, busy_timeout_ms: int) -> SQLitePool:
    global _db_pool
    pool = SQLitePool(database_path=database_path, pool_size=pool_size, busy_timeout_ms=busy_timeout_ms)
    await pool.init_pool()
    _db_pool = pool
    return pool


async def close_db_pool() -> None:
    global _db_pool
    if _db_pool is not None:
        await _db_pool.close()
        _db_pool = None
