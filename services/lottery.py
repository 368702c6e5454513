"""Weighted roulette-wheel lottery over the eligible DJ pool."""

from __future__ import annotations

import random
import uuid
from datetime import datetime
from typing import List, Optional, Sequence

from core import get_logger
from core.constants import DrawAlgorithm
from core.exceptions import EmptyCandidatePoolError
from database.models import Candidate, EventSession, LotteryDraw, LotteryParticipant
from services.weights import WeightCalculator

logger = get_logger(__name__)


class LotteryEngine:
    """Draws one winner from a candidate list, proportionally to weight.

    Selection walks the participants in input order, so ties are settled by
    that order rather than by drawing again. The full participant list with
    weights and probabilities is attached to the result so every draw can be
    audited afterwards.
    """

    def __init__(self, calculator: WeightCalculator, rng: Optional[random.Random] = None) -> None:
        self.calculator = calculator
        self.rng = rng or random.SystemRandom()

    def calculate_participants(
        self,
        candidates: Sequence[Candidate],
        now: datetime,
        event: Optional[EventSession] = None,
    ) -> List[LotteryParticipant]:
        """Weight every candidate and fill in selection probabilities.

        Raises:
            EmptyCandidatePoolError: If ``candidates`` is empty
        """
        if not candidates:
            raise EmptyCandidatePoolError("No eligible DJs to weigh")

        participants = [
            LotteryParticipant(candidate=candidate, calculated_weight=self.calculator.weight(candidate, now, event))
            for candidate in candidates
        ]

        total_weight = sum(p.calculated_weight for p in participants)
        if total_weight > 0:
            for participant in participants:
                participant.selection_probability = participant.calculated_weight / total_weight
        return participants

    def draw(
        self,
        candidates: Sequence[Candidate],
        now: datetime,
        event: Optional[EventSession] = None,
    ) -> Optional[LotteryDraw]:
        """Draw a winner, or return None when there is nobody to draw."""
        if not candidates:
            return None

        participants = self.calculate_participants(candidates, now, event)
        total_weight = sum(p.calculated_weight for p in participants)
        if total_weight <= 0:
            logger.warning(f"Total lottery weight is {total_weight}; skipping draw")
            return None

        random_value = self.rng.random() * total_weight
        cumulative_weight = 0.0

        for participant in participants:
            cumulative_weight += participant.calculated_weight
            if cumulative_weight >= random_value:
                return self._build_draw(participant.candidate, participants, now, DrawAlgorithm.WEIGHTED_RANDOM)

        # Rounding left the walk short of random_value
        last = participants[-1]
        logger.warning(
            f"Roulette walk fell through (r={random_value!r}, total={total_weight!r}); "
            f"falling back to last participant {last.candidate.id}"
        )
        return self._build_draw(last.candidate, participants, now, DrawAlgorithm.WEIGHTED_RANDOM_FALLBACK)

    @staticmethod
    def _build_draw(
        winner: Candidate,
        participants: List[LotteryParticipant],
        now: datetime,
        algorithm: DrawAlgorithm,
    ) -> LotteryDraw:
        return LotteryDraw(
            id=str(uuid.uuid4()),
            winner=winner,
            participants=participants,
            drawn_at=now,
            algorithm_used=algorithm.value,
        )
