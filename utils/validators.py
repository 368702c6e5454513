"""Input validation helpers."""

import math
import re

from core.constants import CandidateLimits, EventDefaults, LotteryDefaults


EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def validate_dj_name(value: str) -> bool:
    if not value:
        return False
    stripped = value.strip()
    return 0 < len(stripped) <= CandidateLimits.NAME_MAX_LENGTH


def validate_email(value: str) -> bool:
    """Loose e-mail check: something@domain.tld"""
    if not value:
        return False
    if len(value) < CandidateLimits.EMAIL_MIN_LENGTH:
        return False
    return bool(EMAIL_RE.match(value.strip()))


def validate_weight(value: float) -> bool:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return False
    return math.isfinite(number) and 0 < number <= LotteryDefaults.MAX_BASE_WEIGHT


def validate_slot_duration(minutes: int) -> bool:
    return 0 < minutes <= EventDefaults.MAX_SLOT_DURATION_MINUTES


def validate_late_arrival_cutoff(hours: int) -> bool:
    return hours >= 0
