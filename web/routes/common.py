"""Helpers shared by the API blueprints."""

from __future__ import annotations

from typing import Any, Dict, Optional

from flask import current_app, request

from core.exceptions import ValidationError
from services import run_coroutine_sync
from services.registry import ServiceRegistry


def get_services() -> ServiceRegistry:
    return current_app.config["SERVICES"]


def run(coro):
    """Execute a service coroutine on the main loop."""
    return run_coroutine_sync(coro)


def json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def optional_int(data: Dict[str, Any], key: str) -> Optional[int]:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{key} must be an integer")
    return value


def limit_arg(default: int, maximum: int = 500) -> int:
    value = request.args.get("limit", type=int)
    if value is None:
        return default
    if value < 1:
        raise ValidationError("limit must be positive")
    return min(value, maximum)
