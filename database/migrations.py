"""Database schema migrations."""

from __future__ import annotations

from core.logger import get_logger

from .connection import SQLitePool

logger = get_logger(__name__)


SCHEMA_SQL: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS djs (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        email TEXT,
        registered_at TEXT NOT NULL,
        weight REAL NOT NULL DEFAULT 1.0 CHECK (weight > 0),
        is_active INTEGER NOT NULL DEFAULT 1,
        position_in_queue INTEGER,
        CHECK (position_in_queue IS NULL OR (position_in_queue >= 1 AND is_active = 1))
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_djs_position ON djs(position_in_queue);",
    "CREATE INDEX IF NOT EXISTS idx_djs_eligible ON djs(is_active, position_in_queue, registered_at);",
    """
    CREATE TABLE IF NOT EXISTS lottery_draws (
        id TEXT PRIMARY KEY,
        winner_dj_id TEXT NOT NULL,
        winner_data TEXT NOT NULL,
        drawn_at TEXT NOT NULL,
        algorithm_used TEXT NOT NULL,
        participants_data TEXT NOT NULL
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_lottery_draws_drawn_at ON lottery_draws(drawn_at);",
    "CREATE INDEX IF NOT EXISTS idx_lottery_draws_winner ON lottery_draws(winner_dj_id);",
    """
    CREATE TABLE IF NOT EXISTS event_sessions (
        id TEXT PRIMARY KEY,
        started_at TEXT NOT NULL,
        ended_at TEXT,
        slot_duration_minutes INTEGER NOT NULL CHECK (slot_duration_minutes > 0),
        late_arrival_cutoff_hours INTEGER NOT NULL,
        is_active INTEGER NOT NULL DEFAULT 1,
        current_dj_id TEXT,
        current_slot_started_at TEXT,
        next_draw_at TEXT
    );
    """,
    # At most one running event
    """
    CREATE UNIQUE INDEX IF NOT EXISTS idx_event_sessions_single_active
        ON event_sessions(is_active) WHERE is_active = 1;
    """,
    """
    CREATE TABLE IF NOT EXISTS performances (
        id TEXT PRIMARY KEY,
        dj_id TEXT NOT NULL,
        started_at TEXT NOT NULL,
        ended_at TEXT,
        duration_minutes INTEGER,
        session_type TEXT NOT NULL DEFAULT 'solo'
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_performances_dj ON performances(dj_id, started_at);",
    "CREATE INDEX IF NOT EXISTS idx_performances_open ON performances(ended_at);",
)


async def run_migrations(pool: SQLitePool) -> None:
    async with pool.transaction() as conn:
        for statement in SCHEMA_SQL:
            await conn.execute(statement)
    logger.info(f"Schema migrations applied ({len(SCHEMA_SQL)} statements)")
