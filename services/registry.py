"""Wires repositories and services around one connection pool."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional

from config import Config
from database.connection import SQLitePool
from database.repositories import (
    CandidateRepository,
    DrawRepository,
    EventRepository,
    PerformanceRepository,
)
from services.auto_draw import AutoDrawTrigger
from services.candidate_service import CandidateService
from services.event_service import EventCoordinator
from services.lottery import LotteryEngine
from services.lottery_service import LotteryCoordinator
from services.queue_ledger import QueueLedger
from services.session_service import PerformanceService
from services.weights import WeightCalculator
from utils.performance import PerformanceMonitor
from utils.time_utils import Clock, utc_now


@dataclass
class ServiceRegistry:
    pool: SQLitePool
    candidates: CandidateService
    lottery: LotteryCoordinator
    events: EventCoordinator
    performances: PerformanceService
    auto_draw: AutoDrawTrigger
    monitor: PerformanceMonitor

    @classmethod
    def build(
        cls,
        pool: SQLitePool,
        config: Config,
        clock: Clock = utc_now,
        rng: Optional[random.Random] = None,
        monitor: Optional[PerformanceMonitor] = None,
    ) -> "ServiceRegistry":
        monitor = monitor or PerformanceMonitor()

        candidate_repo = CandidateRepository(pool)
        draw_repo = DrawRepository(pool)
        event_repo = EventRepository(pool)
        performance_repo = PerformanceRepository(pool)

        ledger = QueueLedger(pool, candidate_repo)
        engine = LotteryEngine(WeightCalculator(config.lottery), rng=rng)
        lottery = LotteryCoordinator(
            pool, candidate_repo, draw_repo, event_repo, ledger, engine, clock=clock, monitor=monitor
        )
        events = EventCoordinator(
            pool,
            event_repo,
            candidate_repo,
            performance_repo,
            lottery,
            default_slot_duration_minutes=config.default_slot_duration_minutes,
            default_late_arrival_cutoff_hours=config.default_late_arrival_cutoff_hours,
            clock=clock,
        )
        return cls(
            pool=pool,
            candidates=CandidateService(
                pool,
                candidate_repo,
                performance_repo,
                ledger,
                clock=clock,
                on_pool_change=lottery.invalidate_statistics,
            ),
            lottery=lottery,
            events=events,
            performances=PerformanceService(pool, performance_repo, candidate_repo, events, clock=clock),
            auto_draw=AutoDrawTrigger(
                events, lottery, interval_seconds=config.auto_draw_interval_seconds, monitor=monitor
            ),
            monitor=monitor,
        )
