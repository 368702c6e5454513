"""Route registration for the Flask app."""

from __future__ import annotations

from flask import Flask

from .djs import djs_bp
from .event import event_bp
from .health import health_bp
from .lottery import lottery_bp
from .sessions import sessions_bp


def register_routes(app: Flask) -> None:
    app.register_blueprint(djs_bp)
    app.register_blueprint(lottery_bp)
    app.register_blueprint(event_bp)
    app.register_blueprint(sessions_bp)
    app.register_blueprint(health_bp)
