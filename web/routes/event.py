"""Event session endpoints."""

from __future__ import annotations

from flask import Blueprint, jsonify

from core.exceptions import ValidationError
from utils.time_utils import parse_timestamp
from web.routes.common import get_services, json_body, optional_int, run


event_bp = Blueprint("event", __name__, url_prefix="/api/event")


@event_bp.route("/start", methods=["POST"])
def start_event():
    data = json_body()
    started_at = data.get("started_at")
    if started_at is not None and not isinstance(started_at, str):
        raise ValidationError("started_at must be an ISO-8601 string")
    try:
        started = parse_timestamp(started_at)
    except ValueError as e:
        raise ValidationError(f"Invalid started_at: {started_at}") from e

    result = run(
        get_services().events.start(
            slot_duration_minutes=optional_int(data, "slot_duration_minutes"),
            late_arrival_cutoff_hours=optional_int(data, "late_arrival_cutoff_hours"),
            started_at=started,
        )
    )
    return jsonify(result.to_dict()), 201


@event_bp.route("/current", methods=["GET"])
def current_event():
    status = run(get_services().events.status())
    return jsonify({"event": status.to_dict() if status else None})


@event_bp.route("/end", methods=["POST"])
def end_event():
    return jsonify(run(get_services().events.end()).to_dict())


@event_bp.route("/timetable", methods=["GET"])
def timetable():
    table = run(get_services().events.timetable())
    return jsonify({"timetable": table.to_dict() if table else None})
