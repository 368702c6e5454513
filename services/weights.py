"""Per-DJ lottery weight calculation."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Optional

from config import LotteryConfig
from core.constants import LotteryDefaults
from core.exceptions import InvalidWeightError
from database.models import Candidate, EventSession
from utils.time_utils import hours_between


class WeightCalculator:
    """Pure function object turning a DJ into a positive lottery weight.

    The weight starts from the DJ's base weight, is reduced for DJs who
    registered after the event's late-arrival cutoff, and gets a small bonus
    (at most +20%) for time spent waiting since registration. The result is
    clamped to ``config.min_weight`` so nobody's chance collapses to zero.
    """

    def __init__(self, config: LotteryConfig) -> None:
        self.config = config.validate()

    def is_late_arrival(self, candidate: Candidate, event: Optional[EventSession]) -> bool:
        # No running event: the lottery may run before doors open, no penalty
        if event is None or not event.running:
            return False
        hours_after_start = hours_between(event.started_at, candidate.registered_at)
        return hours_after_start > event.late_arrival_cutoff_hours

    @staticmethod
    def waiting_bonus(candidate: Candidate, now: datetime) -> float:
        hours_registered = hours_between(candidate.registered_at, now)
        if hours_registered <= 0:
            return 0.0
        return min(
            hours_registered / LotteryDefaults.WAITING_BONUS_HOURS_DIVISOR,
            LotteryDefaults.MAX_WAITING_BONUS,
        )

    def weight(self, candidate: Candidate, now: datetime, event: Optional[EventSession] = None) -> float:
        weight = candidate.weight * self.config.base_weight_multiplier

        if self.is_late_arrival(candidate, event):
            weight *= self.config.late_arrival_penalty

        weight *= 1.0 + self.waiting_bonus(candidate, now)

        if not math.isfinite(weight):
            raise InvalidWeightError(f"Weight for DJ {candidate.id} is not a finite number: {weight}")
        return max(weight, self.config.min_weight)


def calculate_weight(
    candidate: Candidate,
    now: datetime,
    config: LotteryConfig,
    event: Optional[EventSession] = None,
) -> float:
    """Functional form of :meth:`WeightCalculator.weight`."""
    return WeightCalculator(config).weight(candidate, now, event)
