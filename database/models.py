"""Typed records exchanged between the storage layer and the services."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from core.constants import EventState, PerformanceType, TimetableEntryStatus
from utils.time_utils import from_db, isoformat


@dataclass(slots=True)
class Candidate:
    id: str
    name: str
    email: Optional[str]
    registered_at: datetime
    weight: float = 1.0
    is_active: bool = True
    position_in_queue: Optional[int] = None

    @classmethod
    def from_row(cls, row: Any) -> "Candidate":
        return cls(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            registered_at=from_db(row["registered_at"]),
            weight=float(row["weight"]),
            is_active=bool(row["is_active"]),
            position_in_queue=row["position_in_queue"],
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Candidate":
        return cls(
            id=data["id"],
            name=data["name"],
            email=data.get("email"),
            registered_at=datetime.fromisoformat(data["registered_at"]),
            weight=float(data.get("weight", 1.0)),
            is_active=bool(data.get("is_active", True)),
            position_in_queue=data.get("position_in_queue"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "registered_at": isoformat(self.registered_at),
            "weight": self.weight,
            "is_active": self.is_active,
            "position_in_queue": self.position_in_queue,
        }


@dataclass(slots=True)
class LotteryParticipant:
    candidate: Candidate
    calculated_weight: float
    selection_probability: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dj": self.candidate.to_dict(),
            "calculated_weight": self.calculated_weight,
            "selection_probability": self.selection_probability,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LotteryParticipant":
        return cls(
            candidate=Candidate.from_dict(data["dj"]),
            calculated_weight=float(data["calculated_weight"]),
            selection_probability=float(data["selection_probability"]),
        )


@dataclass(frozen=True)
class LotteryDraw:
    id: str
    winner: Candidate
    participants: List[LotteryParticipant]
    drawn_at: datetime
    algorithm_used: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "winner": self.winner.to_dict(),
            "participants": [p.to_dict() for p in self.participants],
            "drawn_at": isoformat(self.drawn_at),
            "algorithm_used": self.algorithm_used,
        }


@dataclass(slots=True)
class LotteryStatistics:
    total_draws: int
    unique_winners: int
    average_weight: float
    fairness_score: float  # 0-1, 1 means every draw had a different winner

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_draws": self.total_draws,
            "unique_winners": self.unique_winners,
            "average_weight": self.average_weight,
            "fairness_score": self.fairness_score,
        }


@dataclass(slots=True)
class EventSession:
    id: str
    started_at: datetime
    slot_duration_minutes: int
    late_arrival_cutoff_hours: int
    is_active: bool = True
    ended_at: Optional[datetime] = None
    current_dj_id: Optional[str] = None
    current_slot_started_at: Optional[datetime] = None
    next_draw_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Any) -> "EventSession":
        return cls(
            id=row["id"],
            started_at=from_db(row["started_at"]),
            ended_at=from_db(row["ended_at"]),
            slot_duration_minutes=int(row["slot_duration_minutes"]),
            late_arrival_cutoff_hours=int(row["late_arrival_cutoff_hours"]),
            is_active=bool(row["is_active"]),
            current_dj_id=row["current_dj_id"],
            current_slot_started_at=from_db(row["current_slot_started_at"]),
            next_draw_at=from_db(row["next_draw_at"]),
        )

    @property
    def running(self) -> bool:
        return self.is_active and self.ended_at is None


@dataclass(slots=True)
class EventStatus:
    """Event session as shown to clients, with derived clock values."""
    event: EventSession
    state: EventState
    current_dj_name: Optional[str]
    elapsed_minutes: int
    current_slot_progress_percent: Optional[float]

    def to_dict(self) -> Dict[str, Any]:
        event = self.event
        return {
            "id": event.id,
            "state": self.state.value,
            "started_at": isoformat(event.started_at),
            "ended_at": isoformat(event.ended_at),
            "slot_duration_minutes": event.slot_duration_minutes,
            "late_arrival_cutoff_hours": event.late_arrival_cutoff_hours,
            "is_active": event.running,
            "current_dj_id": event.current_dj_id,
            "current_dj_name": self.current_dj_name,
            "current_slot_started_at": isoformat(event.current_slot_started_at),
            "next_draw_at": isoformat(event.next_draw_at),
            "elapsed_minutes": self.elapsed_minutes,
            "current_slot_progress_percent": self.current_slot_progress_percent,
        }


@dataclass(slots=True)
class Performance:
    id: str
    dj_id: str
    started_at: datetime
    ended_at: Optional[datetime] = None
    duration_minutes: Optional[int] = None
    session_type: PerformanceType = PerformanceType.SOLO

    @classmethod
    def from_row(cls, row: Any) -> "Performance":
        return cls(
            id=row["id"],
            dj_id=row["dj_id"],
            started_at=from_db(row["started_at"]),
            ended_at=from_db(row["ended_at"]),
            duration_minutes=row["duration_minutes"],
            session_type=PerformanceType(row["session_type"]),
        )

    @property
    def is_active(self) -> bool:
        return self.ended_at is None

    def to_dict(self, dj_name: Optional[str] = None) -> Dict[str, Any]:
        return {
            "id": self.id,
            "dj_id": self.dj_id,
            "dj_name": dj_name,
            "started_at": isoformat(self.started_at),
            "ended_at": isoformat(self.ended_at),
            "duration_minutes": self.duration_minutes,
            "session_type": self.session_type.value,
        }


@dataclass(slots=True)
class PerformanceStats:
    total_sessions: int
    active_sessions: int
    average_duration_minutes: float
    total_duration_hours: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_sessions": self.total_sessions,
            "active_sessions": self.active_sessions,
            "average_duration_minutes": self.average_duration_minutes,
            "total_duration_hours": self.total_duration_hours,
        }


@dataclass(slots=True)
class TimetableEntry:
    position: int
    dj_id: str
    dj_name: str
    started_at: Optional[datetime]
    ended_at: Optional[datetime]
    duration_minutes: Optional[int]
    status: TimetableEntryStatus

    def to_dict(self) -> Dict[str, Any]:
        return {
            "position": self.position,
            "dj_id": self.dj_id,
            "dj_name": self.dj_name,
            "started_at": isoformat(self.started_at),
            "ended_at": isoformat(self.ended_at),
            "duration_minutes": self.duration_minutes,
            "status": self.status.value,
        }


@dataclass(slots=True)
class Timetable:
    event_id: str
    event_started_at: datetime
    entries: List[TimetableEntry] = field(default_factory=list)

    @property
    def total_djs(self) -> int:
        return len(self.entries)

    @property
    def completed_sets(self) -> int:
        return sum(1 for entry in self.entries if entry.status is TimetableEntryStatus.COMPLETED)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_id": self.event_id,
            "event_started_at": isoformat(self.event_started_at),
            "entries": [entry.to_dict() for entry in self.entries],
            "total_djs": self.total_djs,
            "completed_sets": self.completed_sets,
        }


@dataclass(slots=True)
class DjPool:
    active_djs: List[Candidate]
    current_dj: Optional[Candidate]
    next_dj: Optional[Candidate]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "active_djs": [dj.to_dict() for dj in self.active_djs],
            "current_dj": self.current_dj.to_dict() if self.current_dj else None,
            "next_dj": self.next_dj.to_dict() if self.next_dj else None,
            "total_count": len(self.active_djs),
        }
