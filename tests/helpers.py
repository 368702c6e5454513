"""Shared test helpers."""

import asyncio
import threading
from datetime import datetime, timedelta, timezone

from config import Config, LotteryConfig
from services import clear_main_loop, set_main_loop


EVENT_START = datetime(2025, 6, 14, 20, 0, tzinfo=timezone.utc)


class FrozenClock:
    """Manually advanced clock injected into the services."""

    def __init__(self, start: datetime = EVENT_START):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now

    def set(self, value: datetime) -> None:
        self.now = value


def make_config(**overrides) -> Config:
    values = dict(
        environment="testing",
        debug=False,
        web_host="127.0.0.1",
        web_port=3000,
        secret_key="test-secret",
        database_path=":memory:",
        log_folder="logs",
        log_level="DEBUG",
        db_pool_size=3,
        db_busy_timeout=5000,
        auto_draw_enabled=False,
        auto_draw_interval_seconds=1,
        default_slot_duration_minutes=60,
        default_late_arrival_cutoff_hours=2,
        lottery=LotteryConfig(),
    )
    values.update(overrides)
    return Config(**values)


class BackgroundLoop:
    """Runs an event loop in a thread, the way the aiohttp server does for Flask."""

    def __init__(self):
        self.loop = asyncio.new_event_loop()
        self.thread = threading.Thread(target=self.loop.run_forever, daemon=True)

    def __enter__(self):
        self.thread.start()
        set_main_loop(self.loop)
        return self

    def run(self, coro):
        return asyncio.run_coroutine_threadsafe(coro, self.loop).result(timeout=10)

    def __exit__(self, *exc):
        clear_main_loop()
        self.loop.call_soon_threadsafe(self.loop.stop)
        self.thread.join(timeout=5)
        self.loop.close()
