"""Queue position ledger: dense 1..N ordering of drawn DJs."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

import aiosqlite

from core import get_logger
from core.exceptions import (
    AlreadyQueuedError,
    CandidateNotFoundError,
    InactiveCandidateError,
    NotQueuedError,
    PositionOutOfRangeError,
)
from database.connection import SQLitePool
from database.models import Candidate
from database.repositories import CandidateRepository

logger = get_logger(__name__)


class QueueLedger:
    """Owns the ``position_in_queue`` column.

    Every mutation runs inside one serialized transaction, so readers never
    observe a gap or a duplicate. Mutating methods accept ``conn`` to join a
    transaction the caller already holds (the lottery coordinator records the
    draw and appends the winner atomically).
    """

    def __init__(self, pool: SQLitePool, candidates: CandidateRepository) -> None:
        self.pool = pool
        self.candidates = candidates

    @asynccontextmanager
    async def _transaction(self, conn: Optional[aiosqlite.Connection]) -> AsyncIterator[aiosqlite.Connection]:
        if conn is not None:
            yield conn
            return
        async with self.pool.transaction() as txn:
            yield txn

    async def _require(self, candidate_id: str, conn: aiosqlite.Connection) -> Candidate:
        candidate = await self.candidates.get(candidate_id, conn=conn)
        if candidate is None:
            raise CandidateNotFoundError(f"DJ {candidate_id} not found")
        return candidate

    async def insert(self, candidate_id: str, conn: Optional[aiosqlite.Connection] = None) -> int:
        """Append a DJ at the end of the queue and return the new position.

        Raises:
            AlreadyQueuedError: If the DJ already holds a position
            InactiveCandidateError: If the DJ is not active
            CandidateNotFoundError: If the DJ does not exist
        """
        async with self._transaction(conn) as txn:
            candidate = await self._require(candidate_id, txn)
            if candidate.position_in_queue is not None:
                raise AlreadyQueuedError(
                    f"DJ {candidate_id} is already queued at position {candidate.position_in_queue}"
                )
            if not candidate.is_active:
                raise InactiveCandidateError(f"DJ {candidate_id} is not active")

            position = await self.candidates.max_position(conn=txn) + 1
            await self.candidates.set_position(candidate_id, position, conn=txn)

        logger.info(f"Queued DJ {candidate_id} at position {position}")
        return position

    async def remove(self, candidate_id: str, conn: Optional[aiosqlite.Connection] = None) -> bool:
        """Drop a DJ from the queue and close the gap.

        Returns False (no error) when the DJ held no position.
        """
        async with self._transaction(conn) as txn:
            candidate = await self.candidates.get(candidate_id, conn=txn)
            if candidate is None or candidate.position_in_queue is None:
                return False

            removed_position = candidate.position_in_queue
            last_position = await self.candidates.max_position(conn=txn)
            await self.candidates.set_position(candidate_id, None, conn=txn)
            await self.candidates.shift_positions(removed_position + 1, last_position, -1, conn=txn)

        logger.info(f"Removed DJ {candidate_id} from queue position {removed_position}")
        return True

    async def move_to(
        self, candidate_id: str, new_position: int, conn: Optional[aiosqlite.Connection] = None
    ) -> List[Candidate]:
        """Move a queued DJ to ``new_position`` and return the resulting order.

        Raises:
            NotQueuedError: If the DJ holds no position
            PositionOutOfRangeError: If ``new_position`` is outside 1..N
            CandidateNotFoundError: If the DJ does not exist
        """
        async with self._transaction(conn) as txn:
            candidate = await self._require(candidate_id, txn)
            current_position = candidate.position_in_queue
            if current_position is None:
                raise NotQueuedError(f"DJ {candidate_id} is not in the queue")

            queue_length = await self.candidates.count_queued(conn=txn)
            if not 1 <= new_position <= queue_length:
                raise PositionOutOfRangeError(
                    f"Position {new_position} is outside 1..{queue_length}"
                )

            if new_position != current_position:
                # Park the moving DJ so the shifted block never collides with it
                await self.candidates.set_position(candidate_id, None, conn=txn)
                if new_position < current_position:
                    await self.candidates.shift_positions(new_position, current_position - 1, 1, conn=txn)
                else:
                    await self.candidates.shift_positions(current_position + 1, new_position, -1, conn=txn)
                await self.candidates.set_position(candidate_id, new_position, conn=txn)

            order = await self.candidates.list_queued(conn=txn)

        logger.info(f"Moved DJ {candidate_id} from position {current_position} to {new_position}")
        return order

    async def clear(self, conn: Optional[aiosqlite.Connection] = None) -> int:
        """Empty the queue; returns how many DJs lost their position."""
        async with self._transaction(conn) as txn:
            cleared = await self.candidates.clear_positions(conn=txn)
        logger.info(f"Queue cleared ({cleared} DJs)")
        return cleared

    async def current_order(self, conn: Optional[aiosqlite.Connection] = None) -> List[Candidate]:
        return await self.candidates.list_queued(conn=conn)

    async def next_up(self) -> Optional[Candidate]:
        return await self.candidates.get_at_position(1)
