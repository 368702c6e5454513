"""Background task that draws the next DJ when the half-slot deadline passes."""

from __future__ import annotations

import asyncio
from typing import Optional

from core import get_logger
from core.constants import AutoDrawDefaults
from core.exceptions import ApplicationError
from database.models import LotteryDraw
from services.event_service import EventCoordinator
from services.lottery_service import LotteryCoordinator
from utils.performance import PerformanceMonitor

logger = get_logger(__name__)


class AutoDrawTrigger:
    """Polls :meth:`EventCoordinator.check_due` on a fixed interval.

    Talks to the coordinators only through their public methods. Recoverable
    application errors are logged and the loop keeps going; the task stops
    only through :meth:`stop`.
    """

    def __init__(
        self,
        events: EventCoordinator,
        lottery: LotteryCoordinator,
        interval_seconds: float = AutoDrawDefaults.INTERVAL_SECONDS,
        error_backoff_seconds: float = AutoDrawDefaults.ERROR_BACKOFF_SECONDS,
        monitor: Optional[PerformanceMonitor] = None,
    ) -> None:
        self.events = events
        self.lottery = lottery
        self.interval = interval_seconds
        self.error_backoff = error_backoff_seconds
        self.monitor = monitor or PerformanceMonitor()
        self.running = False
        self.task: Optional[asyncio.Task] = None

    async def tick(self) -> Optional[LotteryDraw]:
        """One poll: draw if the deadline has passed."""
        if not await self.events.check_due():
            return None

        self.monitor.record_auto_draw_trigger()
        draw = await self.lottery.draw_next()
        if draw is not None:
            logger.info(f"Auto-drew next DJ: {draw.winner.name}")
        else:
            logger.info("Draw was due but no DJs are eligible")
        return draw

    async def run(self) -> None:
        logger.info(f"Auto draw loop started (interval: {self.interval}s)")
        while self.running:
            try:
                await self.tick()
                await asyncio.sleep(self.interval)
            except asyncio.CancelledError:
                logger.info("Auto draw loop cancelled")
                break
            except ApplicationError as e:
                self.monitor.record_auto_draw_error()
                logger.warning(f"Auto draw check failed: {e}")
                await asyncio.sleep(self.interval)
            except Exception as e:
                self.monitor.record_auto_draw_error()
                logger.error(f"Error in auto draw loop: {e}", exc_info=True)
                await asyncio.sleep(self.error_backoff)

    async def start(self) -> None:
        if self.running:
            logger.warning("Auto draw trigger is already running")
            return

        self.running = True
        self.task = asyncio.create_task(self.run())

    async def stop(self) -> None:
        if not self.running:
            return

        self.running = False
        if self.task:
            self.task.cancel()
            try:
                await self.task
            except asyncio.CancelledError:
                pass
            self.task = None
        logger.info("Auto draw trigger stopped")
