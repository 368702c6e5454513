"""DJ performance (set) endpoints."""

from __future__ import annotations

from flask import Blueprint, jsonify

from core.exceptions import ValidationError
from services.session_service import parse_performance_type
from web.routes.common import get_services, json_body, limit_arg, run


sessions_bp = Blueprint("sessions", __name__, url_prefix="/api/sessions")


def _serialize(performance):
    name = run(get_services().performances.dj_name(performance.dj_id))
    return performance.to_dict(dj_name=name)


@sessions_bp.route("/start", methods=["POST"])
def start_session():
    data = json_body()
    dj_id = data.get("dj_id")
    if not isinstance(dj_id, str) or not dj_id:
        raise ValidationError("dj_id is required")
    session_type = parse_performance_type(data.get("session_type"))
    performance = run(get_services().performances.start(dj_id, session_type))
    return jsonify(_serialize(performance)), 201


@sessions_bp.route("/<performance_id>/end", methods=["POST"])
def end_session(performance_id: str):
    performance = run(get_services().performances.end(performance_id))
    return jsonify(_serialize(performance))


@sessions_bp.route("/stats", methods=["GET"])
def session_stats():
    return jsonify(run(get_services().performances.stats()).to_dict())


@sessions_bp.route("/<performance_id>", methods=["GET"])
def get_session(performance_id: str):
    return jsonify(_serialize(run(get_services().performances.get(performance_id))))


@sessions_bp.route("", methods=["GET"])
def list_sessions():
    performances = run(get_services().performances.list_recent(limit_arg(100)))
    return jsonify({"sessions": [_serialize(p) for p in performances], "count": len(performances)})
