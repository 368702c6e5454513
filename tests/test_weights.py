"""Unit tests for the lottery weight calculation."""

import math
from datetime import timedelta

import pytest

from config import LotteryConfig
from core.exceptions import ConfigurationError, InvalidWeightError
from database.models import Candidate, EventSession
from services.weights import WeightCalculator, calculate_weight
from tests.helpers import EVENT_START


def make_dj(registered_at=EVENT_START, weight=1.0):
    return Candidate(id="dj-1", name="Nina", email=None, registered_at=registered_at, weight=weight)


def make_event(started_at=EVENT_START, cutoff_hours=2):
    return EventSession(
        id="ev-1",
        started_at=started_at,
        slot_duration_minutes=60,
        late_arrival_cutoff_hours=cutoff_hours,
    )


def test_fresh_registration_keeps_base_weight():
    dj = make_dj()
    assert calculate_weight(dj, EVENT_START, LotteryConfig()) == pytest.approx(1.0)


def test_waiting_bonus_grows_with_hours():
    dj = make_dj()
    now = EVENT_START + timedelta(hours=1)
    assert WeightCalculator.waiting_bonus(dj, now) == pytest.approx(0.1)
    assert calculate_weight(dj, now, LotteryConfig()) == pytest.approx(1.1)


def test_waiting_bonus_is_capped():
    dj = make_dj()
    now = EVENT_START + timedelta(hours=30)
    assert WeightCalculator.waiting_bonus(dj, now) == pytest.approx(0.2)
    assert calculate_weight(dj, now, LotteryConfig()) == pytest.approx(1.2)


def test_no_bonus_for_future_registration():
    dj = make_dj(registered_at=EVENT_START + timedelta(hours=1))
    assert WeightCalculator.waiting_bonus(dj, EVENT_START) == 0.0


def test_late_arrival_penalty_applies_after_cutoff():
    event = make_event(cutoff_hours=2)
    late = make_dj(registered_at=EVENT_START + timedelta(hours=3))
    # Registered and drawn at the same instant: only the penalty applies
    assert calculate_weight(late, late.registered_at, LotteryConfig(), event) == pytest.approx(0.5)


def test_registration_at_cutoff_is_not_late():
    event = make_event(cutoff_hours=2)
    dj = make_dj(registered_at=EVENT_START + timedelta(hours=2))
    assert WeightCalculator(LotteryConfig()).is_late_arrival(dj, event) is False


def test_no_penalty_without_event():
    late = make_dj(registered_at=EVENT_START + timedelta(hours=5))
    assert WeightCalculator(LotteryConfig()).is_late_arrival(late, None) is False


def test_no_penalty_for_ended_event():
    event = make_event()
    event.is_active = False
    event.ended_at = EVENT_START + timedelta(hours=6)
    late = make_dj(registered_at=EVENT_START + timedelta(hours=5))
    assert WeightCalculator(LotteryConfig()).is_late_arrival(late, event) is False


def test_penalty_and_bonus_compound():
    event = make_event(cutoff_hours=0)
    dj = make_dj(registered_at=EVENT_START + timedelta(hours=1))
    now = dj.registered_at + timedelta(hours=1)
    assert calculate_weight(dj, now, LotteryConfig(), event) == pytest.approx(0.5 * 1.1)


def test_weight_clamped_to_minimum():
    dj = make_dj(weight=0.01)
    assert calculate_weight(dj, EVENT_START, LotteryConfig()) == pytest.approx(0.1)


def test_multiplier_scales_weight():
    dj = make_dj(weight=2.0)
    config = LotteryConfig(base_weight_multiplier=1.5)
    assert calculate_weight(dj, EVENT_START, config) == pytest.approx(3.0)


def test_nan_weight_raises():
    dj = make_dj(weight=math.nan)
    with pytest.raises(InvalidWeightError):
        calculate_weight(dj, EVENT_START, LotteryConfig())


@pytest.mark.parametrize(
    "kwargs",
    [
        {"base_weight_multiplier": 0},
        {"late_arrival_penalty": 0},
        {"late_arrival_penalty": 1.5},
        {"min_weight": -1},
    ],
)
def test_invalid_config_rejected(kwargs):
    with pytest.raises(ConfigurationError):
        WeightCalculator(LotteryConfig(**kwargs))


def test_infinite_weight_raises():
    dj = make_dj(weight=1.7e308)
    later = EVENT_START + timedelta(hours=1)
    with pytest.raises(InvalidWeightError):
        calculate_weight(dj, later, LotteryConfig())


def test_weight_is_deterministic():
    calculator = WeightCalculator(LotteryConfig())
    event = make_event(cutoff_hours=0)
    dj = make_dj(registered_at=EVENT_START + timedelta(minutes=30), weight=1.7)
    now = EVENT_START + timedelta(hours=4, minutes=7)

    first = calculator.weight(dj, now, event)
    assert all(calculator.weight(dj, now, event) == first for _ in range(10))


def test_late_registrant_gets_exactly_half():
    calculator = WeightCalculator(LotteryConfig())
    event = make_event(cutoff_hours=2)
    on_time = make_dj(registered_at=EVENT_START + timedelta(hours=1))
    late = make_dj(registered_at=EVENT_START + timedelta(hours=3))
    waited = timedelta(hours=1)

    on_time_weight = calculator.weight(on_time, on_time.registered_at + waited, event)
    late_weight = calculator.weight(late, late.registered_at + waited, event)

    assert late_weight / on_time_weight == 0.5
