"""Application configuration module.

Reads settings from environment variables with sane defaults for a single
venue running one DJ night at a time.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from core.constants import AutoDrawDefaults, DatabaseDefaults, EventDefaults, LotteryDefaults
from core.exceptions import ConfigurationError

# Load environment variables from .env file if present
load_dotenv()


def _get_bool(name: str, default: bool = False) -> bool:
    """Get boolean from environment variable."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "on"}


def _get_int(name: str, default: int) -> int:
    """Get integer from environment variable with fallback."""
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float(name: str, default: float) -> float:
    """Get float from environment variable with fallback."""
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_str(name: str, default: str = "") -> str:
    """Get string from environment variable."""
    return os.getenv(name, default)


@dataclass(frozen=True)
class LotteryConfig:
    """Weighting knobs for the DJ lottery."""
    base_weight_multiplier: float = LotteryDefaults.BASE_WEIGHT_MULTIPLIER
    late_arrival_penalty: float = LotteryDefaults.LATE_ARRIVAL_PENALTY
    min_weight: float = LotteryDefaults.MIN_WEIGHT

    def validate(self) -> "LotteryConfig":
        if not (math.isfinite(self.base_weight_multiplier) and self.base_weight_multiplier > 0):
            raise ConfigurationError("base_weight_multiplier must be a positive number")
        if not (0 < self.late_arrival_penalty <= 1):
            raise ConfigurationError("late_arrival_penalty must be in (0, 1]")
        if not (math.isfinite(self.min_weight) and self.min_weight > 0):
            raise ConfigurationError("min_weight must be a positive number")
        return self


@dataclass(frozen=True)
class Config:
    environment: str
    debug: bool
    web_host: str
    web_port: int
    secret_key: str
    database_path: str
    log_folder: str
    log_level: str
    db_pool_size: int
    db_busy_timeout: int
    auto_draw_enabled: bool
    auto_draw_interval_seconds: int
    default_slot_duration_minutes: int
    default_late_arrival_cutoff_hours: int
    lottery: LotteryConfig = field(default_factory=LotteryConfig)


def load_config() -> Config:
    """Load application configuration from environment variables.

    Returns:
        Config: Application configuration with validated values

    Raises:
        ConfigurationError: If a value is out of range
    """
    lottery = LotteryConfig(
        base_weight_multiplier=_get_float("LOTTERY_BASE_WEIGHT", LotteryDefaults.BASE_WEIGHT_MULTIPLIER),
        late_arrival_penalty=_get_float("LOTTERY_LATE_ARRIVAL_PENALTY", LotteryDefaults.LATE_ARRIVAL_PENALTY),
        min_weight=_get_float("LOTTERY_MIN_WEIGHT", LotteryDefaults.MIN_WEIGHT),
    ).validate()

    config = Config(
        environment=_get_str("ENVIRONMENT", "development"),
        debug=_get_bool("DEBUG", False),
        web_host=_get_str("WEB_HOST", "0.0.0.0"),
        web_port=_get_int("WEB_PORT", 3000),
        secret_key=_get_str("SECRET_KEY", "change_me_in_production"),
        database_path=_get_str("DATABASE_PATH", "data/dj_lottery.sqlite"),
        log_folder=_get_str("LOG_FOLDER", "logs"),
        log_level=_get_str("LOG_LEVEL", "INFO"),
        db_pool_size=_get_int("DB_POOL_SIZE", DatabaseDefaults.POOL_SIZE),
        db_busy_timeout=_get_int("DB_BUSY_TIMEOUT", DatabaseDefaults.BUSY_TIMEOUT),
        auto_draw_enabled=_get_bool("AUTO_DRAW_ENABLED", True),
        auto_draw_interval_seconds=_get_int("AUTO_DRAW_INTERVAL_SECONDS", AutoDrawDefaults.INTERVAL_SECONDS),
        default_slot_duration_minutes=_get_int("SLOT_DURATION_MINUTES", EventDefaults.SLOT_DURATION_MINUTES),
        default_late_arrival_cutoff_hours=_get_int(
            "LATE_ARRIVAL_CUTOFF_HOURS", EventDefaults.LATE_ARRIVAL_CUTOFF_HOURS
        ),
        lottery=lottery,
    )

    if config.auto_draw_interval_seconds <= 0:
        raise ConfigurationError("AUTO_DRAW_INTERVAL_SECONDS must be positive")
    if config.db_pool_size < 1:
        raise ConfigurationError("DB_POOL_SIZE must be at least 1")

    return config
