"""Utilities to execute coroutines on the main asyncio loop from sync contexts."""

from __future__ import annotations

import asyncio
from concurrent.futures import Future
from typing import Awaitable, Optional, TypeVar


_loop: Optional[asyncio.AbstractEventLoop] = None
T = TypeVar("T")

DEFAULT_TIMEOUT = 30.0  # seconds


def set_main_loop(loop: asyncio.AbstractEventLoop) -> None:
    global _loop
    _loop = loop


def clear_main_loop() -> None:
    global _loop
    _loop = None


def get_main_loop() -> Optional[asyncio.AbstractEventLoop]:
    return _loop


def run_coroutine_sync(coro: Awaitable[T], timeout: Optional[float] = DEFAULT_TIMEOUT) -> T:
    """Run ``coro`` on the main loop and block the calling thread for its result."""
    if _loop is None:
        raise RuntimeError("Asyncio loop is not initialized")
    future = asyncio.run_coroutine_threadsafe(coro, _loop)
    return future.result(timeout=timeout)


def submit_coroutine(coro: Awaitable[T]) -> Future:
    if _loop is None:
        raise RuntimeError("Asyncio loop is not initialized")
    return asyncio.run_coroutine_threadsafe(coro, _loop)
