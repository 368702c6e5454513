"""Performance monitoring utilities using Prometheus metrics."""

from __future__ import annotations

import time
from contextlib import contextmanager

import psutil
from prometheus_client import Counter, Gauge, Histogram


lottery_draws_total = Counter(
    "lottery_draws_total", "Completed lottery draws", labelnames=("algorithm",)
)
lottery_draw_duration = Histogram(
    "lottery_draw_duration_seconds", "Time spent computing and persisting a draw"
)
auto_draw_triggers_total = Counter(
    "auto_draw_triggers_total", "Half-slot deadlines that fired an automatic draw"
)
auto_draw_errors_total = Counter(
    "auto_draw_errors_total", "Recoverable errors swallowed by the auto draw loop"
)
queue_length = Gauge("lottery_queue_length", "DJs currently holding a queue position")
db_connections = Gauge("db_connection_pool_size", "DB connection pool size")


class PerformanceMonitor:
    def __init__(self) -> None:
        self.metrics = {
            "lottery_draws_total": lottery_draws_total,
            "lottery_draw_duration": lottery_draw_duration,
            "auto_draw_triggers_total": auto_draw_triggers_total,
            "auto_draw_errors_total": auto_draw_errors_total,
            "queue_length": queue_length,
            "db_connections": db_connections,
        }

    @contextmanager
    def track_draw(self):
        start = time.perf_counter()
        try:
            yield
        finally:
            lottery_draw_duration.observe(time.perf_counter() - start)

    def record_draw(self, algorithm: str) -> None:
        lottery_draws_total.labels(algorithm=algorithm).inc()

    def record_auto_draw_trigger(self) -> None:
        auto_draw_triggers_total.inc()

    def record_auto_draw_error(self) -> None:
        auto_draw_errors_total.inc()

    def record_queue_length(self, length: int) -> None:
        queue_length.set(length)

    def record_db_pool(self, pool_size: int) -> None:
        db_connections.set(pool_size)

    def gather_host_metrics(self) -> dict:
        process = psutil.Process()
        memory_info = process.memory_info()
        return {
            "memory_rss": memory_info.rss,
            "cpu_percent": process.cpu_percent(interval=None),
        }
