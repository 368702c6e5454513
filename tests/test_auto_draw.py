"""Tests for the background half-slot draw trigger."""

import asyncio
from datetime import timedelta

import pytest

from core.exceptions import DatabaseError
from services.auto_draw import AutoDrawTrigger


async def start_first_slot(services):
    opener = await services.candidates.register("Opener")
    await services.candidates.register("Second")
    await services.candidates.register("Third")
    result = await services.events.start()
    await services.performances.start(result.initial_draw.winner.id)
    return opener


@pytest.mark.asyncio
async def test_tick_before_deadline_does_nothing(services):
    await start_first_slot(services)
    assert await services.auto_draw.tick() is None
    assert len(await services.lottery.current_queue()) == 1


@pytest.mark.asyncio
async def test_tick_after_deadline_draws_once(services, clock):
    await start_first_slot(services)
    clock.advance(minutes=30)

    draw = await services.auto_draw.tick()

    assert draw is not None
    assert len(await services.lottery.current_queue()) == 2
    assert await services.auto_draw.tick() is None
    assert len(await services.lottery.current_queue()) == 2


@pytest.mark.asyncio
async def test_due_with_empty_pool_is_harmless(services, clock):
    dj = await services.candidates.register("Only")
    await services.events.start()
    await services.performances.start(dj.id)
    clock.advance(hours=1)

    assert await services.auto_draw.tick() is None
    assert await services.events.check_due() is False


@pytest.mark.asyncio
async def test_loop_draws_and_stops(services, clock):
    await start_first_slot(services)
    clock.advance(minutes=45)
    trigger = AutoDrawTrigger(services.events, services.lottery, interval_seconds=0.01)

    await trigger.start()
    for _ in range(100):
        if len(await services.lottery.current_queue()) == 2:
            break
        await asyncio.sleep(0.01)
    await trigger.stop()

    assert trigger.running is False
    assert trigger.task is None
    assert len(await services.lottery.current_queue()) == 2


@pytest.mark.asyncio
async def test_loop_survives_errors(services):
    class FlakyEvents:
        def __init__(self):
            self.calls = 0

        async def check_due(self):
            self.calls += 1
            if self.calls == 1:
                raise DatabaseError("database is locked")
            if self.calls == 2:
                raise RuntimeError("boom")
            return False

    events = FlakyEvents()
    trigger = AutoDrawTrigger(events, services.lottery, interval_seconds=0.01, error_backoff_seconds=0.01)

    await trigger.start()
    for _ in range(100):
        if events.calls >= 3:
            break
        await asyncio.sleep(0.01)
    await trigger.stop()

    assert events.calls >= 3


@pytest.mark.asyncio
async def test_start_twice_and_stop_idle(services):
    trigger = AutoDrawTrigger(services.events, services.lottery, interval_seconds=0.01)
    await trigger.stop()
    await trigger.start()
    first_task = trigger.task
    await trigger.start()
    assert trigger.task is first_task
    await trigger.stop()
