"""Tests for environment-driven configuration."""

import pytest

from config import load_config
from core.exceptions import ConfigurationError


def test_defaults(monkeypatch):
    for name in (
        "SLOT_DURATION_MINUTES",
        "LATE_ARRIVAL_CUTOFF_HOURS",
        "LOTTERY_BASE_WEIGHT",
        "LOTTERY_LATE_ARRIVAL_PENALTY",
        "LOTTERY_MIN_WEIGHT",
        "AUTO_DRAW_INTERVAL_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)

    config = load_config()

    assert config.default_slot_duration_minutes == 60
    assert config.default_late_arrival_cutoff_hours == 2
    assert config.auto_draw_interval_seconds == 10
    assert config.lottery.base_weight_multiplier == 1.0
    assert config.lottery.late_arrival_penalty == 0.5
    assert config.lottery.min_weight == 0.1


def test_overrides(monkeypatch):
    monkeypatch.setenv("SLOT_DURATION_MINUTES", "45")
    monkeypatch.setenv("LOTTERY_LATE_ARRIVAL_PENALTY", "0.25")
    monkeypatch.setenv("AUTO_DRAW_ENABLED", "false")

    config = load_config()

    assert config.default_slot_duration_minutes == 45
    assert config.lottery.late_arrival_penalty == 0.25
    assert config.auto_draw_enabled is False


@pytest.mark.parametrize(
    "name, value",
    [
        ("LOTTERY_LATE_ARRIVAL_PENALTY", "2"),
        ("LOTTERY_MIN_WEIGHT", "0"),
        ("AUTO_DRAW_INTERVAL_SECONDS", "0"),
        ("DB_POOL_SIZE", "0"),
    ],
)
def test_invalid_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigurationError):
        load_config()
