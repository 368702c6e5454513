"""Health check blueprint."""

from __future__ import annotations

from flask import Blueprint, jsonify

from web.routes.common import get_services, run


health_bp = Blueprint("health", __name__)


@health_bp.route("/health")
def health_check():
    services = get_services()
    state = run(services.events.state())

    data = {
        "status": "ok",
        "db_pool_size": services.pool.size,
        "event_state": state.value,
        "auto_draw_running": services.auto_draw.running,
        "host": services.monitor.gather_host_metrics(),
    }
    return jsonify(data)
