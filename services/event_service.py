"""Event session lifecycle and the half-slot draw deadline."""

from __future__ import annotations

import sqlite3
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from core import get_logger
from core.constants import EventState, TimetableEntryStatus
from core.exceptions import (
    CandidateNotFoundError,
    EventAlreadyActiveError,
    NoActiveEventError,
    ValidationError,
)
from database.connection import SQLitePool
from database.models import EventSession, EventStatus, LotteryDraw, Timetable, TimetableEntry
from database.repositories import CandidateRepository, EventRepository, PerformanceRepository
from services.event_clock import EventClock
from services.lottery_service import LotteryCoordinator
from utils.time_utils import Clock, isoformat, utc_now
from utils.validators import validate_late_arrival_cutoff, validate_slot_duration

logger = get_logger(__name__)


@dataclass(slots=True)
class EventStartResult:
    status: EventStatus
    initial_draw: Optional[LotteryDraw]

    def to_dict(self) -> Dict[str, Any]:
        data = self.status.to_dict()
        data["initial_draw"] = self.initial_draw.to_dict() if self.initial_draw else None
        return data


class EventCoordinator:
    """Starts and ends the single active event and tracks its slot clock.

    State machine::

        NO_ACTIVE_EVENT --start--> WAITING_FOR_FIRST_PERFORMER
        WAITING_FOR_FIRST_PERFORMER | SLOT_IN_PROGRESS --begin_slot--> SLOT_IN_PROGRESS
        any active state --end--> ENDED
    """

    def __init__(
        self,
        pool: SQLitePool,
        events: EventRepository,
        candidates: CandidateRepository,
        performances: PerformanceRepository,
        lottery: LotteryCoordinator,
        default_slot_duration_minutes: int,
        default_late_arrival_cutoff_hours: int,
        clock: Clock = utc_now,
    ) -> None:
        self.pool = pool
        self.events = events
        self.candidates = candidates
        self.performances = performances
        self.lottery = lottery
        self.default_slot_duration = default_slot_duration_minutes
        self.default_late_arrival_cutoff = default_late_arrival_cutoff_hours
        self.clock = clock
        self.event_clock = EventClock()

    async def get_active_event(self) -> Optional[EventSession]:
        return await self.events.get_active()

    async def start(
        self,
        slot_duration_minutes: Optional[int] = None,
        late_arrival_cutoff_hours: Optional[int] = None,
        started_at: Optional[datetime] = None,
    ) -> EventStartResult:
        """Open a new event and immediately draw the first DJ.

        Raises:
            EventAlreadyActiveError: If another event is running
            ValidationError: If slot duration or cutoff are out of range
        """
        slot_duration = slot_duration_minutes if slot_duration_minutes is not None else self.default_slot_duration
        cutoff = late_arrival_cutoff_hours if late_arrival_cutoff_hours is not None else self.default_late_arrival_cutoff
        if not validate_slot_duration(slot_duration):
            raise ValidationError(f"Invalid slot duration: {slot_duration} minutes")
        if not validate_late_arrival_cutoff(cutoff):
            raise ValidationError(f"Invalid late arrival cutoff: {cutoff} hours")

        event = EventSession(
            id=str(uuid.uuid4()),
            started_at=started_at or self.clock(),
            slot_duration_minutes=slot_duration,
            late_arrival_cutoff_hours=cutoff,
        )

        try:
            async with self.pool.transaction() as conn:
                if await self.events.get_active(conn=conn) is not None:
                    raise EventAlreadyActiveError("An event is already running. End the current event first.")
                await self.events.insert(event, conn=conn)
        except sqlite3.IntegrityError as e:
            # Another process won the race for the single active slot
            raise EventAlreadyActiveError("An event is already running. End the current event first.") from e

        logger.info(
            f"Event {event.id} started at {isoformat(event.started_at)} "
            f"(slot {slot_duration} min, late cutoff {cutoff} h)"
        )

        initial_draw = await self.lottery.draw_next()
        if initial_draw is not None:
            logger.info(f"Automatically drew first DJ for new event: {initial_draw.winner.name}")
        else:
            logger.warning(f"Event {event.id} started with no DJs available to draw")

        return EventStartResult(status=await self._to_status(event), initial_draw=initial_draw)

    async def end(self) -> EventStatus:
        """End the running event.

        Raises:
            NoActiveEventError: If no event is running (including a second call)
        """
        now = self.clock()
        async with self.pool.transaction() as conn:
            event = await self.events.get_active(conn=conn)
            if event is None or not await self.events.mark_ended(event.id, now, conn=conn):
                raise NoActiveEventError("No active event found")

        event.ended_at = now
        event.is_active = False
        event.next_draw_at = None
        logger.info(f"Event {event.id} ended after {self.event_clock.elapsed_minutes(event, now)} minutes")
        return await self._to_status(event, now)

    async def begin_slot(self, candidate_id: str) -> EventStatus:
        """Record that ``candidate_id`` took the decks and schedule the next draw.

        Raises:
            NoActiveEventError: If no event is running
            CandidateNotFoundError: If the DJ does not exist
        """
        slot_start = self.clock()
        async with self.pool.transaction() as conn:
            event = await self.events.get_active(conn=conn)
            if event is None:
                raise NoActiveEventError("No active event found")
            if await self.candidates.get(candidate_id, conn=conn) is None:
                raise CandidateNotFoundError(f"DJ {candidate_id} not found")

            next_draw = self.event_clock.next_draw_due(event, slot_start)
            await self.events.update_slot(event.id, candidate_id, slot_start, next_draw, conn=conn)

        event.current_dj_id = candidate_id
        event.current_slot_started_at = slot_start
        event.next_draw_at = next_draw
        logger.info(f"DJ {candidate_id} began slot; next draw due at {isoformat(next_draw)}")
        return await self._to_status(event, slot_start)

    async def check_due(self, now: Optional[datetime] = None) -> bool:
        """True at most once per deadline: the deadline is cleared as it is reported."""
        now = now or self.clock()
        async with self.pool.transaction() as conn:
            due = await self.events.claim_due_draw(now, conn=conn)
        if due:
            logger.info("Half-slot deadline reached; next draw is due")
        return due

    async def status(self, now: Optional[datetime] = None) -> Optional[EventStatus]:
        event = await self.events.get_active()
        if event is None:
            return None
        return await self._to_status(event, now)

    async def state(self) -> EventState:
        return self.event_clock.state(await self.events.get_active())

    async def timetable(self) -> Optional[Timetable]:
        event = await self.events.get_active()
        if event is None:
            return None

        timetable = Timetable(event_id=event.id, event_started_at=event.started_at)
        queued = await self.lottery.current_queue()
        for position, dj in enumerate(queued, start=1):
            performance = await self.performances.get_latest_for_dj_since(dj.id, event.started_at)
            if performance is None:
                timetable.entries.append(
                    TimetableEntry(
                        position=position,
                        dj_id=dj.id,
                        dj_name=dj.name,
                        started_at=None,
                        ended_at=None,
                        duration_minutes=None,
                        status=TimetableEntryStatus.UPCOMING,
                    )
                )
                continue

            if performance.ended_at is not None:
                status = TimetableEntryStatus.COMPLETED
            elif dj.id == event.current_dj_id:
                status = TimetableEntryStatus.IN_PROGRESS
            else:
                status = TimetableEntryStatus.UPCOMING

            timetable.entries.append(
                TimetableEntry(
                    position=position,
                    dj_id=dj.id,
                    dj_name=dj.name,
                    started_at=performance.started_at,
                    ended_at=performance.ended_at,
                    duration_minutes=performance.duration_minutes,
                    status=status,
                )
            )
        return timetable

    async def _to_status(self, event: EventSession, now: Optional[datetime] = None) -> EventStatus:
        now = now or self.clock()
        current_dj_name = None
        if event.current_dj_id:
            dj = await self.candidates.get(event.current_dj_id)
            current_dj_name = dj.name if dj else None

        return EventStatus(
            event=event,
            state=self.event_clock.state(event),
            current_dj_name=current_dj_name,
            elapsed_minutes=self.event_clock.elapsed_minutes(event, now),
            current_slot_progress_percent=self.event_clock.slot_progress_percent(event, now),
        )
