"""Flask application configuration and middleware setup."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from flask import Flask, g, request
from prometheus_client import Counter, Histogram

if TYPE_CHECKING:
    from config import Config

# Prometheus metrics
REQUEST_LATENCY = Histogram(
    "http_request_latency_seconds",
    "HTTP request latency",
    ["method", "path"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2, 5),
)
REQUEST_ERRORS = Counter(
    "http_request_errors_total",
    "Total number of 5xx responses",
    ["method", "path"],
)


def configure_app(app: Flask, config: Config, testing: bool = False) -> None:
    """Configure Flask application settings.

    Args:
        app: Flask application instance
        config: Application configuration
        testing: Whether running in testing mode
    """
    app.config.update(
        SECRET_KEY=config.secret_key,
        DATABASE_PATH=config.database_path,
        WEB_HOST=config.web_host,
        WEB_PORT=config.web_port,
        TESTING=testing,
    )

    # Warn if insecure defaults detected
    if config.environment == "production" and config.secret_key == "change_me_in_production":
        app.logger.warning("SECRET_KEY is not set properly")


def setup_security_headers(app: Flask) -> None:
    """Setup security headers middleware.

    Args:
        app: Flask application instance
    """
    @app.after_request
    def add_security_headers(response):
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("Referrer-Policy", "same-origin")
        response.headers.setdefault("Cache-Control", "no-store")
        return response


def _metric_path() -> str:
    return getattr(request.url_rule, "rule", None) or "unmatched"


def setup_metrics(app: Flask) -> None:
    """Setup Prometheus metrics middleware.

    Args:
        app: Flask application instance
    """
    @app.before_request
    def before_metrics():
        g._metrics_start = time.perf_counter()

    @app.after_request
    def after_metrics(response):
        start = g.pop("_metrics_start", None)
        if start is not None:
            REQUEST_LATENCY.labels(method=request.method, path=_metric_path()).observe(
                time.perf_counter() - start
            )
        if response.status_code >= 500:
            REQUEST_ERRORS.labels(method=request.method, path=_metric_path()).inc()
        return response
