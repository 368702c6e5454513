"""DJ pool endpoints."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from core.exceptions import CandidateNotFoundError, ValidationError
from web.routes.common import get_services, json_body, run


djs_bp = Blueprint("djs", __name__, url_prefix="/api/djs")


@djs_bp.route("", methods=["POST"])
def register_dj():
    data = json_body()
    name = data.get("name")
    if not isinstance(name, str):
        raise ValidationError("name is required")
    email = data.get("email")
    if email is not None and not isinstance(email, str):
        raise ValidationError("email must be a string")
    dj = run(get_services().candidates.register(name, email))
    return jsonify(dj.to_dict()), 201


@djs_bp.route("", methods=["GET"])
def list_djs():
    active_only = request.args.get("active", "").lower() in {"1", "true", "yes"}
    djs = run(get_services().candidates.list(active_only=active_only))
    return jsonify({"djs": [dj.to_dict() for dj in djs], "count": len(djs)})


@djs_bp.route("/pool", methods=["GET"])
def dj_pool():
    pool = run(get_services().candidates.pool_summary())
    return jsonify(pool.to_dict())


@djs_bp.route("/<dj_id>", methods=["GET"])
def get_dj(dj_id: str):
    dj = run(get_services().candidates.get(dj_id))
    return jsonify(dj.to_dict())


@djs_bp.route("/<dj_id>", methods=["PATCH"])
def update_dj(dj_id: str):
    dj = run(get_services().candidates.update(dj_id, json_body()))
    return jsonify(dj.to_dict())


@djs_bp.route("/<dj_id>", methods=["DELETE"])
def delete_dj(dj_id: str):
    if not run(get_services().candidates.delete(dj_id)):
        raise CandidateNotFoundError(f"DJ {dj_id} not found")
    return "", 204
