"""Database access layer helpers."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Dict, List, Optional

import aiosqlite

from database.base_repository import BaseRepository
from database.models import (
    Candidate,
    EventSession,
    LotteryDraw,
    LotteryParticipant,
    Performance,
    PerformanceStats,
)
from utils.time_utils import from_db, to_db

Conn = Optional[aiosqlite.Connection]

DJ_COLUMNS = "id, name, email, registered_at, weight, is_active, position_in_queue"


class CandidateRepository(BaseRepository):
    """Repository for DJ rows, including the queue position column."""

    UPDATABLE_FIELDS = ("name", "email", "weight", "is_active")

    async def insert(self, candidate: Candidate, conn: Conn = None) -> None:
        await self.execute(
            f"INSERT INTO djs ({DJ_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?)",
            (
                candidate.id,
                candidate.name,
                candidate.email,
                to_db(candidate.registered_at),
                candidate.weight,
                int(candidate.is_active),
                candidate.position_in_queue,
            ),
            conn=conn,
        )

    async def get(self, candidate_id: str, conn: Conn = None) -> Optional[Candidate]:
        row = await self.fetch_one(f"SELECT {DJ_COLUMNS} FROM djs WHERE id = ?", (candidate_id,), conn=conn)
        return Candidate.from_row(row) if row else None

    async def list_all(self, active_only: bool = False) -> List[Candidate]:
        query = f"SELECT {DJ_COLUMNS} FROM djs"
        if active_only:
            query += " WHERE is_active = 1"
        query += " ORDER BY registered_at ASC, id ASC"
        return [Candidate.from_row(row) for row in await self.fetch_all(query)]

    async def list_eligible(self, conn: Conn = None) -> List[Candidate]:
        """Active DJs without a queue position, oldest registration first."""
        rows = await self.fetch_all(
            f"""
            SELECT {DJ_COLUMNS} FROM djs
            WHERE is_active = 1 AND position_in_queue IS NULL
            ORDER BY registered_at ASC, id ASC
            """,
            conn=conn,
        )
        return [Candidate.from_row(row) for row in rows]

    async def list_queued(self, conn: Conn = None) -> List[Candidate]:
        rows = await self.fetch_all(
            f"""
            SELECT {DJ_COLUMNS} FROM djs
            WHERE position_in_queue IS NOT NULL
            ORDER BY position_in_queue ASC
            """,
            conn=conn,
        )
        return [Candidate.from_row(row) for row in rows]

    async def get_at_position(self, position: int, conn: Conn = None) -> Optional[Candidate]:
        row = await self.fetch_one(
            f"SELECT {DJ_COLUMNS} FROM djs WHERE position_in_queue = ?", (position,), conn=conn
        )
        return Candidate.from_row(row) if row else None

    async def update_fields(self, candidate_id: str, fields: Dict[str, Any], conn: Conn = None) -> int:
        unknown = set(fields) - set(self.UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update columns: {', '.join(sorted(unknown))}")
        if not fields:
            return 0
        assignments = ", ".join(f"{column} = ?" for column in fields)
        values = [int(v) if isinstance(v, bool) else v for v in fields.values()]
        return await self.execute(
            f"UPDATE djs SET {assignments} WHERE id = ?", (*values, candidate_id), conn=conn
        )

    async def delete(self, candidate_id: str, conn: Conn = None) -> bool:
        return await self.execute("DELETE FROM djs WHERE id = ?", (candidate_id,), conn=conn) > 0

    async def average_active_weight(self) -> float:
        value = await self.fetch_value("SELECT AVG(weight) FROM djs WHERE is_active = 1")
        return float(value) if value is not None else 0.0

    # Queue position column

    async def max_position(self, conn: Conn = None) -> int:
        return await self.fetch_value("SELECT COALESCE(MAX(position_in_queue), 0) FROM djs", conn=conn)

    async def count_queued(self, conn: Conn = None) -> int:
        return await self.fetch_value(
            "SELECT COUNT(*) FROM djs WHERE position_in_queue IS NOT NULL", conn=conn
        )

    async def set_position(self, candidate_id: str, position: Optional[int], conn: Conn = None) -> None:
        await self.execute(
            "UPDATE djs SET position_in_queue = ? WHERE id = ?", (position, candidate_id), conn=conn
        )

    async def shift_positions(self, low: int, high: int, delta: int, conn: Conn = None) -> int:
        """Add ``delta`` to every position in the inclusive range [low, high]."""
        if low > high:
            return 0
        return await self.execute(
            """
            UPDATE djs SET position_in_queue = position_in_queue + ?
            WHERE position_in_queue >= ? AND position_in_queue <= ?
            """,
            (delta, low, high),
            conn=conn,
        )

    async def clear_positions(self, conn: Conn = None) -> int:
        return await self.execute(
            "UPDATE djs SET position_in_queue = NULL WHERE position_in_queue IS NOT NULL", conn=conn
        )


class DrawRepository(BaseRepository):
    """Append-only log of lottery draws."""

    async def insert(self, draw: LotteryDraw, conn: Conn = None) -> None:
        await self.execute(
            """
            INSERT INTO lottery_draws (id, winner_dj_id, winner_data, drawn_at, algorithm_used, participants_data)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                draw.id,
                draw.winner.id,
                json.dumps(draw.winner.to_dict(), ensure_ascii=False),
                to_db(draw.drawn_at),
                draw.algorithm_used,
                json.dumps([p.to_dict() for p in draw.participants], ensure_ascii=False),
            ),
            conn=conn,
        )

    async def count(self) -> int:
        return await self.fetch_value("SELECT COUNT(*) FROM lottery_draws") or 0

    async def count_unique_winners(self) -> int:
        return await self.fetch_value("SELECT COUNT(DISTINCT winner_dj_id) FROM lottery_draws") or 0

    async def list_recent(self, limit: int = 50) -> List[LotteryDraw]:
        rows = await self.fetch_all(
            "SELECT * FROM lottery_draws ORDER BY drawn_at DESC, rowid DESC LIMIT ?", (limit,)
        )
        return [self._to_draw(row) for row in rows]

    @staticmethod
    def _to_draw(row: Any) -> LotteryDraw:
        participants = [LotteryParticipant.from_dict(item) for item in json.loads(row["participants_data"])]
        return LotteryDraw(
            id=row["id"],
            winner=Candidate.from_dict(json.loads(row["winner_data"])),
            participants=participants,
            drawn_at=from_db(row["drawn_at"]),
            algorithm_used=row["algorithm_used"],
        )


class EventRepository(BaseRepository):
    """Repository for the event session rows."""

    async def insert(self, event: EventSession, conn: Conn = None) -> None:
        await self.execute(
            """
            INSERT INTO event_sessions (id, started_at, ended_at, slot_duration_minutes,
                                        late_arrival_cutoff_hours, is_active, current_dj_id,
                                        current_slot_started_at, next_draw_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                event.id,
                to_db(event.started_at),
                to_db(event.ended_at),
                event.slot_duration_minutes,
                event.late_arrival_cutoff_hours,
                int(event.is_active),
                event.current_dj_id,
                to_db(event.current_slot_started_at),
                to_db(event.next_draw_at),
            ),
            conn=conn,
        )

    async def get(self, event_id: str, conn: Conn = None) -> Optional[EventSession]:
        row = await self.fetch_one("SELECT * FROM event_sessions WHERE id = ?", (event_id,), conn=conn)
        return EventSession.from_row(row) if row else None

    async def get_active(self, conn: Conn = None) -> Optional[EventSession]:
        row = await self.fetch_one(
            """
            SELECT * FROM event_sessions
            WHERE is_active = 1 AND ended_at IS NULL
            ORDER BY started_at DESC
            LIMIT 1
            """,
            conn=conn,
        )
        return EventSession.from_row(row) if row else None

    async def mark_ended(self, event_id: str, ended_at: datetime, conn: Conn = None) -> bool:
        updated = await self.execute(
            """
            UPDATE event_sessions
            SET ended_at = ?, is_active = 0, next_draw_at = NULL
            WHERE id = ? AND is_active = 1
            """,
            (to_db(ended_at), event_id),
            conn=conn,
        )
        return updated > 0

    async def update_slot(
        self,
        event_id: str,
        dj_id: str,
        slot_started_at: datetime,
        next_draw_at: datetime,
        conn: Conn = None,
    ) -> None:
        await self.execute(
            """
            UPDATE event_sessions
            SET current_dj_id = ?, current_slot_started_at = ?, next_draw_at = ?
            WHERE id = ?
            """,
            (dj_id, to_db(slot_started_at), to_db(next_draw_at), event_id),
            conn=conn,
        )

    async def claim_due_draw(self, now: datetime, conn: Conn = None) -> bool:
        """Clear a passed ``next_draw_at`` deadline; True only for the caller that cleared it."""
        updated = await self.execute(
            """
            UPDATE event_sessions
            SET next_draw_at = NULL
            WHERE is_active = 1 AND ended_at IS NULL
              AND next_draw_at IS NOT NULL AND next_draw_at <= ?
            """,
            (to_db(now),),
            conn=conn,
        )
        return updated > 0


class PerformanceRepository(BaseRepository):
    """Repository for DJ performances (the sets actually played)."""

    async def insert(self, performance: Performance, conn: Conn = None) -> None:
        await self.execute(
            """
            INSERT INTO performances (id, dj_id, started_at, ended_at, duration_minutes, session_type)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                performance.id,
                performance.dj_id,
                to_db(performance.started_at),
                to_db(performance.ended_at),
                performance.duration_minutes,
                performance.session_type.value,
            ),
            conn=conn,
        )

    async def get(self, performance_id: str, conn: Conn = None) -> Optional[Performance]:
        row = await self.fetch_one("SELECT * FROM performances WHERE id = ?", (performance_id,), conn=conn)
        return Performance.from_row(row) if row else None

    async def get_open_for_dj(self, dj_id: str, conn: Conn = None) -> Optional[Performance]:
        row = await self.fetch_one(
            "SELECT * FROM performances WHERE dj_id = ? AND ended_at IS NULL", (dj_id,), conn=conn
        )
        return Performance.from_row(row) if row else None

    async def get_latest_open(self) -> Optional[Performance]:
        row = await self.fetch_one(
            "SELECT * FROM performances WHERE ended_at IS NULL ORDER BY started_at DESC LIMIT 1"
        )
        return Performance.from_row(row) if row else None

    async def get_latest_for_dj_since(self, dj_id: str, since: datetime) -> Optional[Performance]:
        row = await self.fetch_one(
            """
            SELECT * FROM performances
            WHERE dj_id = ? AND started_at >= ?
            ORDER BY started_at DESC
            LIMIT 1
            """,
            (dj_id, to_db(since)),
        )
        return Performance.from_row(row) if row else None

    async def mark_ended(
        self, performance_id: str, ended_at: datetime, duration_minutes: int, conn: Conn = None
    ) -> bool:
        updated = await self.execute(
            """
            UPDATE performances SET ended_at = ?, duration_minutes = ?
            WHERE id = ? AND ended_at IS NULL
            """,
            (to_db(ended_at), duration_minutes, performance_id),
            conn=conn,
        )
        return updated > 0

    async def list_recent(self, limit: int = 100) -> List[Performance]:
        rows = await self.fetch_all(
            "SELECT * FROM performances ORDER BY started_at DESC LIMIT ?", (limit,)
        )
        return [Performance.from_row(row) for row in rows]

    async def stats(self) -> PerformanceStats:
        row = await self.fetch_one(
            """
            SELECT COUNT(*) AS total,
                   SUM(CASE WHEN ended_at IS NULL THEN 1 ELSE 0 END) AS active,
                   AVG(duration_minutes) AS avg_minutes,
                   COALESCE(SUM(duration_minutes), 0) AS total_minutes
            FROM performances
            """
        )
        return PerformanceStats(
            total_sessions=row["total"] or 0,
            active_sessions=row["active"] or 0,
            average_duration_minutes=float(row["avg_minutes"] or 0.0),
            total_duration_hours=float(row["total_minutes"] or 0) / 60,
        )
