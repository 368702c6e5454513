"""Lottery draw and queue endpoints."""

from __future__ import annotations

from flask import Blueprint, jsonify

from core.exceptions import ValidationError
from web.routes.common import get_services, json_body, limit_arg, optional_int, run


lottery_bp = Blueprint("lottery", __name__, url_prefix="/api/lottery")


def _queue_payload(queue):
    return {"queue": [dj.to_dict() for dj in queue], "length": len(queue)}


@lottery_bp.route("/draw", methods=["POST"])
def draw():
    result = run(get_services().lottery.draw_next())
    if result is None:
        return jsonify({"draw": None, "message": "No eligible DJs to draw"})
    return jsonify({"draw": result.to_dict()}), 201


@lottery_bp.route("/queue", methods=["GET"])
def queue():
    return jsonify(_queue_payload(run(get_services().lottery.current_queue())))


@lottery_bp.route("/next", methods=["GET"])
def next_dj():
    dj = run(get_services().lottery.next_dj())
    return jsonify({"next_dj": dj.to_dict() if dj else None})


@lottery_bp.route("/queue/<dj_id>/move", methods=["POST"])
def move(dj_id: str):
    position = optional_int(json_body(), "position")
    if position is None:
        raise ValidationError("position is required")
    return jsonify(_queue_payload(run(get_services().lottery.move(dj_id, position))))


@lottery_bp.route("/queue/<dj_id>", methods=["DELETE"])
def remove(dj_id: str):
    removed = run(get_services().lottery.remove_from_queue(dj_id))
    return jsonify({"removed": removed})


@lottery_bp.route("/statistics", methods=["GET"])
def statistics():
    return jsonify(run(get_services().lottery.statistics()).to_dict())


@lottery_bp.route("/draws", methods=["GET"])
def draws():
    recent = run(get_services().lottery.recent_draws(limit_arg(50)))
    return jsonify({"draws": [d.to_dict() for d in recent], "count": len(recent)})


@lottery_bp.route("/reset", methods=["POST"])
def reset():
    cleared = run(get_services().lottery.reset())
    return jsonify({"cleared": cleared})
