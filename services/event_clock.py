"""Derived timing values for the running event."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from core.constants import EventDefaults, EventState
from database.models import EventSession
from utils.time_utils import whole_minutes


class EventClock:
    """Stateless calculations over an :class:`EventSession` snapshot.

    Nothing here reads the wall clock; ``now`` is always passed in.
    """

    @staticmethod
    def state(event: Optional[EventSession]) -> EventState:
        if event is None:
            return EventState.NO_ACTIVE_EVENT
        if not event.running:
            return EventState.ENDED
        if event.current_slot_started_at is None:
            return EventState.WAITING_FOR_FIRST_PERFORMER
        return EventState.SLOT_IN_PROGRESS

    @staticmethod
    def slot_duration(event: EventSession) -> timedelta:
        return timedelta(minutes=event.slot_duration_minutes)

    @classmethod
    def next_draw_due(cls, event: EventSession, slot_started_at: datetime) -> datetime:
        """Deadline for drawing the next DJ: halfway through the current slot."""
        return slot_started_at + cls.slot_duration(event) * EventDefaults.NEXT_DRAW_SLOT_FRACTION

    @staticmethod
    def elapsed(event: EventSession, now: datetime) -> timedelta:
        return now - event.started_at

    @classmethod
    def elapsed_minutes(cls, event: EventSession, now: datetime) -> int:
        return whole_minutes(cls.elapsed(event, now))

    @classmethod
    def slot_progress_percent(cls, event: EventSession, now: datetime) -> Optional[float]:
        if event.current_slot_started_at is None:
            return None
        progress = (now - event.current_slot_started_at) / cls.slot_duration(event) * 100
        return min(100.0, progress)

    @staticmethod
    def is_due(event: Optional[EventSession], now: datetime) -> bool:
        if event is None or not event.running or event.next_draw_at is None:
            return False
        return now >= event.next_draw_at
