"""DJ performances: the sets actually played during an event."""

from __future__ import annotations

import uuid
from typing import List, Optional

from core import get_logger
from core.constants import PerformanceType
from core.exceptions import (
    CandidateNotFoundError,
    NoActiveEventError,
    PerformanceAlreadyActiveError,
    PerformanceAlreadyEndedError,
    PerformanceNotFoundError,
    ValidationError,
)
from database.connection import SQLitePool
from database.models import Performance, PerformanceStats
from database.repositories import CandidateRepository, PerformanceRepository
from services.event_service import EventCoordinator
from utils.time_utils import Clock, utc_now, whole_minutes

logger = get_logger(__name__)


def parse_performance_type(value: Optional[str]) -> PerformanceType:
    """Parse a session type from a request, defaulting to solo."""
    if not value:
        return PerformanceType.SOLO
    try:
        return PerformanceType(value.lower())
    except ValueError as e:
        allowed = ", ".join(t.value for t in PerformanceType)
        raise ValidationError(f"Unknown session type {value!r}; expected one of {allowed}") from e


class PerformanceService:
    def __init__(
        self,
        pool: SQLitePool,
        performances: PerformanceRepository,
        candidates: CandidateRepository,
        events: EventCoordinator,
        clock: Clock = utc_now,
    ) -> None:
        self.pool = pool
        self.performances = performances
        self.candidates = candidates
        self.events = events
        self.clock = clock

    async def start(self, dj_id: str, session_type: PerformanceType = PerformanceType.SOLO) -> Performance:
        """Open a performance for ``dj_id`` and start their event slot.

        Raises:
            CandidateNotFoundError: If the DJ does not exist
            PerformanceAlreadyActiveError: If the DJ is already playing
        """
        performance = Performance(
            id=str(uuid.uuid4()),
            dj_id=dj_id,
            started_at=self.clock(),
            session_type=session_type,
        )
        async with self.pool.transaction() as conn:
            if await self.candidates.get(dj_id, conn=conn) is None:
                raise CandidateNotFoundError(f"DJ {dj_id} not found")
            if await self.performances.get_open_for_dj(dj_id, conn=conn) is not None:
                raise PerformanceAlreadyActiveError(f"DJ {dj_id} already has an active session")
            await self.performances.insert(performance, conn=conn)

        logger.info(f"DJ {dj_id} started a {session_type.value} session ({performance.id})")

        # A set can be logged outside an event
        try:
            await self.events.begin_slot(dj_id)
        except NoActiveEventError:
            logger.warning(f"Session {performance.id} started without an active event; slot clock unchanged")

        return performance

    async def end(self, performance_id: str) -> Performance:
        """Close a performance and record its duration in whole minutes.

        Raises:
            PerformanceNotFoundError: If the id is unknown
            PerformanceAlreadyEndedError: If it was already ended
        """
        ended_at = self.clock()
        async with self.pool.transaction() as conn:
            performance = await self.performances.get(performance_id, conn=conn)
            if performance is None:
                raise PerformanceNotFoundError(f"Session {performance_id} not found")
            if performance.ended_at is not None:
                raise PerformanceAlreadyEndedError(f"Session {performance_id} already ended")

            duration = whole_minutes(ended_at - performance.started_at)
            await self.performances.mark_ended(performance_id, ended_at, duration, conn=conn)

        performance.ended_at = ended_at
        performance.duration_minutes = duration
        logger.info(f"Session {performance_id} ended after {duration} minutes")
        return performance

    async def get(self, performance_id: str) -> Performance:
        performance = await self.performances.get(performance_id)
        if performance is None:
            raise PerformanceNotFoundError(f"Session {performance_id} not found")
        return performance

    async def list_recent(self, limit: int = 100) -> List[Performance]:
        return await self.performances.list_recent(limit)

    async def stats(self) -> PerformanceStats:
        return await self.performances.stats()

    async def dj_name(self, dj_id: str) -> Optional[str]:
        dj = await self.candidates.get(dj_id)
        return dj.name if dj else None
