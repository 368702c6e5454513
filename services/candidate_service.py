"""DJ pool maintenance: registration, updates and removal."""

from __future__ import annotations

import uuid
from typing import Any, Callable, Dict, List, Optional

from core import get_logger
from core.constants import LotteryDefaults
from core.exceptions import CandidateNotFoundError, ValidationError
from database.connection import SQLitePool
from database.models import Candidate, DjPool
from database.repositories import CandidateRepository, PerformanceRepository
from services.queue_ledger import QueueLedger
from utils.time_utils import Clock, utc_now
from utils.validators import validate_dj_name, validate_email, validate_weight

logger = get_logger(__name__)


class CandidateService:
    """Keeps the candidate pool consistent with the queue ledger."""

    def __init__(
        self,
        pool: SQLitePool,
        candidates: CandidateRepository,
        performances: PerformanceRepository,
        ledger: QueueLedger,
        clock: Clock = utc_now,
        on_pool_change: Optional[Callable[[], None]] = None,
    ) -> None:
        self.pool = pool
        self.candidates = candidates
        self.performances = performances
        self.ledger = ledger
        self.clock = clock
        self.on_pool_change = on_pool_change

    def _pool_changed(self) -> None:
        if self.on_pool_change is not None:
            self.on_pool_change()

    async def register(self, name: str, email: Optional[str] = None) -> Candidate:
        """Register a DJ with the default base weight.

        Raises:
            ValidationError: If the name or e-mail is invalid
        """
        name = (name or "").strip()
        if not validate_dj_name(name):
            raise ValidationError("DJ name must be 1-100 characters")
        email = email.strip() if email else None
        if email and not validate_email(email):
            raise ValidationError(f"Invalid e-mail address: {email}")

        candidate = Candidate(
            id=str(uuid.uuid4()),
            name=name,
            email=email,
            registered_at=self.clock(),
            weight=LotteryDefaults.BASE_WEIGHT,
        )
        await self.candidates.insert(candidate)
        self._pool_changed()
        logger.info(f"Registered DJ {candidate.name} ({candidate.id})")
        return candidate

    async def get(self, candidate_id: str) -> Candidate:
        candidate = await self.candidates.get(candidate_id)
        if candidate is None:
            raise CandidateNotFoundError(f"DJ {candidate_id} not found")
        return candidate

    async def list(self, active_only: bool = False) -> List[Candidate]:
        return await self.candidates.list_all(active_only=active_only)

    async def update(self, candidate_id: str, changes: Dict[str, Any]) -> Candidate:
        """Apply a partial update (name, email, weight, is_active).

        Deactivating a DJ also removes them from the queue, in the same
        transaction, since only active DJs may hold a position.

        Raises:
            CandidateNotFoundError: If the DJ does not exist
            ValidationError: If a field value is invalid or unknown
        """
        unknown = set(changes) - set(CandidateRepository.UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown or read-only fields: {', '.join(sorted(unknown))}")

        fields: Dict[str, Any] = {}
        if "name" in changes:
            if not isinstance(changes["name"], str):
                raise ValidationError("DJ name must be a string")
            name = changes["name"].strip()
            if not validate_dj_name(name):
                raise ValidationError("DJ name must be 1-100 characters")
            fields["name"] = name
        if "email" in changes:
            if changes["email"] is not None and not isinstance(changes["email"], str):
                raise ValidationError("E-mail must be a string")
            email = (changes["email"] or "").strip() or None
            if email and not validate_email(email):
                raise ValidationError(f"Invalid e-mail address: {email}")
            fields["email"] = email
        if "weight" in changes:
            if isinstance(changes["weight"], bool) or not validate_weight(changes["weight"]):
                raise ValidationError(f"Weight must be a number in (0, {LotteryDefaults.MAX_BASE_WEIGHT:g}]")
            fields["weight"] = float(changes["weight"])
        if "is_active" in changes:
            if not isinstance(changes["is_active"], bool):
                raise ValidationError("is_active must be a boolean")
            fields["is_active"] = changes["is_active"]

        async with self.pool.transaction() as conn:
            if await self.candidates.get(candidate_id, conn=conn) is None:
                raise CandidateNotFoundError(f"DJ {candidate_id} not found")
            if fields.get("is_active") is False:
                await self.ledger.remove(candidate_id, conn=conn)
            await self.candidates.update_fields(candidate_id, fields, conn=conn)
            updated = await self.candidates.get(candidate_id, conn=conn)

        self._pool_changed()
        logger.info(f"Updated DJ {candidate_id}: {', '.join(sorted(fields)) or 'no changes'}")
        return updated

    async def delete(self, candidate_id: str) -> bool:
        """Delete a DJ, closing their queue gap first. False if unknown."""
        async with self.pool.transaction() as conn:
            if await self.candidates.get(candidate_id, conn=conn) is None:
                return False
            await self.ledger.remove(candidate_id, conn=conn)
            await self.candidates.delete(candidate_id, conn=conn)
        self._pool_changed()
        logger.info(f"Deleted DJ {candidate_id}")
        return True

    async def pool_summary(self) -> DjPool:
        active = await self.candidates.list_all(active_only=True)
        current_dj = None
        open_performance = await self.performances.get_latest_open()
        if open_performance is not None:
            current_dj = await self.candidates.get(open_performance.dj_id)
        return DjPool(
            active_djs=active,
            current_dj=current_dj,
            next_dj=await self.ledger.next_up(),
        )
