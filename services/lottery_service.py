"""Lottery coordination: eligible pool -> weighted draw -> queue append."""

from __future__ import annotations

from typing import List, Optional

from cachetools import TTLCache

from core import get_logger
from core.exceptions import AlreadyQueuedError
from database.connection import SQLitePool
from database.models import Candidate, LotteryDraw, LotteryStatistics
from database.repositories import CandidateRepository, DrawRepository, EventRepository
from services.lottery import LotteryEngine
from services.queue_ledger import QueueLedger
from utils.performance import PerformanceMonitor
from utils.time_utils import Clock, utc_now

logger = get_logger(__name__)

STATISTICS_CACHE_TTL = 30  # seconds


class LotteryCoordinator:
    """Runs draws against the stored pool and keeps the queue in step."""

    def __init__(
        self,
        pool: SQLitePool,
        candidates: CandidateRepository,
        draws: DrawRepository,
        events: EventRepository,
        ledger: QueueLedger,
        engine: LotteryEngine,
        clock: Clock = utc_now,
        monitor: Optional[PerformanceMonitor] = None,
    ) -> None:
        self.pool = pool
        self.candidates = candidates
        self.draws = draws
        self.events = events
        self.ledger = ledger
        self.engine = engine
        self.clock = clock
        self.monitor = monitor or PerformanceMonitor()
        self._stats_cache: TTLCache = TTLCache(maxsize=1, ttl=STATISTICS_CACHE_TTL)

    async def get_eligible(self) -> List[Candidate]:
        return await self.candidates.list_eligible()

    async def draw_next(self) -> Optional[LotteryDraw]:
        """Draw the next DJ and append them to the queue.

        Returns None when nobody is eligible, or when the winner turned out
        to be queued already by a concurrent draw.
        """
        with self.monitor.track_draw():
            try:
                async with self.pool.transaction() as conn:
                    eligible = await self.candidates.list_eligible(conn=conn)
                    if not eligible:
                        logger.info("No eligible DJs; nothing to draw")
                        return None

                    event = await self.events.get_active(conn=conn)
                    draw = self.engine.draw(eligible, self.clock(), event)
                    if draw is None:
                        return None

                    await self.draws.insert(draw, conn=conn)
                    position = await self.ledger.insert(draw.winner.id, conn=conn)
            except AlreadyQueuedError as e:
                logger.warning(f"Draw discarded, winner already queued by another draw: {e}")
                return None

        self.invalidate_statistics()
        self.monitor.record_draw(draw.algorithm_used)
        self.monitor.record_queue_length(position)
        logger.info(
            f"Drew DJ {draw.winner.name} ({draw.winner.id}) from {len(draw.participants)} "
            f"participants, queued at position {position} [{draw.algorithm_used}]"
        )
        return draw

    async def current_queue(self) -> List[Candidate]:
        return await self.ledger.current_order()

    async def next_dj(self) -> Optional[Candidate]:
        return await self.ledger.next_up()

    async def move(self, candidate_id: str, new_position: int) -> List[Candidate]:
        return await self.ledger.move_to(candidate_id, new_position)

    async def remove_from_queue(self, candidate_id: str) -> bool:
        removed = await self.ledger.remove(candidate_id)
        if removed:
            self.monitor.record_queue_length(len(await self.ledger.current_order()))
        return removed

    def invalidate_statistics(self) -> None:
        """Drop cached statistics after the candidate pool changed."""
        self._stats_cache.clear()

    async def reset(self) -> int:
        cleared = await self.ledger.clear()
        self.invalidate_statistics()
        self.monitor.record_queue_length(0)
        return cleared

    async def recent_draws(self, limit: int = 50) -> List[LotteryDraw]:
        return await self.draws.list_recent(limit)

    async def statistics(self) -> LotteryStatistics:
        cached = self._stats_cache.get("stats")
        if cached is not None:
            return cached

        total_draws = await self.draws.count()
        unique_winners = await self.draws.count_unique_winners()
        average_weight = await self.candidates.average_active_weight()
        # Share of draws that produced a new winner
        fairness_score = unique_winners / total_draws if total_draws > 0 else 1.0

        stats = LotteryStatistics(
            total_draws=total_draws,
            unique_winners=unique_winners,
            average_weight=average_weight,
            fairness_score=fairness_score,
        )
        self._stats_cache["stats"] = stats
        return stats
