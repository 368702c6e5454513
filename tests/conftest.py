"""Pytest configuration and fixtures."""

import random

import pytest
import pytest_asyncio

from database.connection import SQLitePool
from database.migrations import run_migrations
from services.registry import ServiceRegistry
from tests.helpers import BackgroundLoop, FrozenClock, make_config


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def config(tmp_path):
    return make_config(database_path=str(tmp_path / "dj_lottery.sqlite"))


@pytest_asyncio.fixture
async def pool(config):
    db_pool = SQLitePool(config.database_path, pool_size=config.db_pool_size)
    await db_pool.init_pool()
    await run_migrations(db_pool)
    yield db_pool
    await db_pool.close()


@pytest_asyncio.fixture
async def services(pool, config, clock, rng):
    return ServiceRegistry.build(pool, config, clock=clock, rng=rng)


@pytest.fixture
def web_env(config, clock, rng):
    """Flask test client backed by services living on a background loop."""
    from web.app import create_app

    with BackgroundLoop() as background:
        db_pool = SQLitePool(config.database_path, pool_size=config.db_pool_size)

        async def _setup():
            await db_pool.init_pool()
            await run_migrations(db_pool)
            return ServiceRegistry.build(db_pool, config, clock=clock, rng=rng)

        registry = background.run(_setup())
        app = create_app(config, registry, testing=True)
        yield app.test_client(), registry, background
        background.run(db_pool.close())


@pytest.fixture
def client(web_env):
    return web_env[0]
