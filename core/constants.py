"""Application-wide constants and configuration values."""

from __future__ import annotations

from enum import Enum


# Database constants
class DatabaseDefaults:
    """Default database configuration."""
    POOL_SIZE = 5
    BUSY_TIMEOUT = 5000  # milliseconds


# Lottery constants
class LotteryDefaults:
    """Lottery weighting configuration."""
    BASE_WEIGHT = 1.0
    BASE_WEIGHT_MULTIPLIER = 1.0
    LATE_ARRIVAL_PENALTY = 0.5
    MIN_WEIGHT = 0.1
    WAITING_BONUS_HOURS_DIVISOR = 10.0
    MAX_WAITING_BONUS = 0.2  # +20%
    MAX_BASE_WEIGHT = 1000.0


# Event constants
class EventDefaults:
    """Event session defaults."""
    SLOT_DURATION_MINUTES = 60
    LATE_ARRIVAL_CUTOFF_HOURS = 2
    MAX_SLOT_DURATION_MINUTES = 480  # 8 hours
    NEXT_DRAW_SLOT_FRACTION = 0.5  # draw the next DJ halfway through a slot


# Auto draw trigger
class AutoDrawDefaults:
    """Background trigger configuration."""
    INTERVAL_SECONDS = 10
    ERROR_BACKOFF_SECONDS = 30


# Candidate validation
class CandidateLimits:
    """DJ registration limits."""
    NAME_MAX_LENGTH = 100
    EMAIL_MIN_LENGTH = 6


class DrawAlgorithm(str, Enum):
    """Algorithm tag recorded on every lottery draw."""
    WEIGHTED_RANDOM = "weighted_random"
    WEIGHTED_RANDOM_FALLBACK = "weighted_random_fallback"


class EventState(str, Enum):
    """Lifecycle state of the event session."""
    NO_ACTIVE_EVENT = "no_active_event"
    WAITING_FOR_FIRST_PERFORMER = "waiting_for_first_performer"
    SLOT_IN_PROGRESS = "slot_in_progress"
    ENDED = "ended"


class TimetableEntryStatus(str, Enum):
    """Status of a queued DJ in the timetable."""
    COMPLETED = "completed"
    IN_PROGRESS = "in_progress"
    UPCOMING = "upcoming"


class PerformanceType(str, Enum):
    """Kind of DJ set."""
    SOLO = "solo"
    B2B = "b2b"
    SPECIAL = "special"
