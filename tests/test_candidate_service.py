"""Tests for DJ pool maintenance."""

import pytest

from core.exceptions import CandidateNotFoundError, ValidationError


@pytest.mark.asyncio
async def test_register_defaults(services, clock):
    dj = await services.candidates.register("  Nina Kraviz ", "nina@example.com")

    assert dj.name == "Nina Kraviz"
    assert dj.email == "nina@example.com"
    assert dj.weight == 1.0
    assert dj.is_active is True
    assert dj.position_in_queue is None
    assert dj.registered_at == clock.now
    assert (await services.candidates.get(dj.id)).name == "Nina Kraviz"


@pytest.mark.asyncio
@pytest.mark.parametrize("name, email", [("", None), ("x" * 101, None), ("Ok", "not-an-email")])
async def test_register_validation(services, name, email):
    with pytest.raises(ValidationError):
        await services.candidates.register(name, email)


@pytest.mark.asyncio
async def test_list_active_only(services):
    a = await services.candidates.register("A")
    b = await services.candidates.register("B")
    await services.candidates.update(b.id, {"is_active": False})

    assert {dj.id for dj in await services.candidates.list()} == {a.id, b.id}
    assert [dj.id for dj in await services.candidates.list(active_only=True)] == [a.id]


@pytest.mark.asyncio
async def test_update_fields(services):
    dj = await services.candidates.register("A")
    updated = await services.candidates.update(dj.id, {"name": "A2", "weight": 2.5, "email": "a2@example.com"})
    assert updated.name == "A2"
    assert updated.weight == 2.5
    assert updated.email == "a2@example.com"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "changes",
    [
        {"weight": 0},
        {"weight": 1.7e308},
        {"weight": "heavy"},
        {"weight": True},
        {"is_active": "no"},
        {"position_in_queue": 1},
    ],
)
async def test_update_validation(services, changes):
    dj = await services.candidates.register("A")
    with pytest.raises(ValidationError):
        await services.candidates.update(dj.id, changes)


@pytest.mark.asyncio
async def test_update_unknown(services):
    with pytest.raises(CandidateNotFoundError):
        await services.candidates.update("missing", {"name": "X"})


@pytest.mark.asyncio
async def test_deactivation_leaves_queue(services):
    a = await services.candidates.register("A")
    b = await services.candidates.register("B")
    await services.lottery.ledger.insert(a.id)
    await services.lottery.ledger.insert(b.id)

    updated = await services.candidates.update(a.id, {"is_active": False})

    assert updated.position_in_queue is None
    queue = await services.lottery.current_queue()
    assert [(dj.id, dj.position_in_queue) for dj in queue] == [(b.id, 1)]


@pytest.mark.asyncio
async def test_delete_closes_queue_gap(services):
    a = await services.candidates.register("A")
    b = await services.candidates.register("B")
    await services.lottery.ledger.insert(a.id)
    await services.lottery.ledger.insert(b.id)

    assert await services.candidates.delete(a.id) is True
    assert await services.candidates.delete(a.id) is False
    assert [(dj.id, dj.position_in_queue) for dj in await services.lottery.current_queue()] == [(b.id, 1)]
    with pytest.raises(CandidateNotFoundError):
        await services.candidates.get(a.id)


@pytest.mark.asyncio
async def test_pool_summary(services):
    a = await services.candidates.register("A")
    b = await services.candidates.register("B")
    await services.events.start()
    await services.performances.start(a.id)

    pool = await services.candidates.pool_summary()

    assert pool.current_dj.id == a.id
    assert pool.next_dj.id in {a.id, b.id}
    assert pool.to_dict()["total_count"] == 2
