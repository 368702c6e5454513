"""Flask application factory exposing the DJ lottery JSON API."""

from __future__ import annotations

from flask import Flask, jsonify
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from werkzeug.exceptions import HTTPException

from core.exceptions import (
    ApplicationError,
    EmptyCandidatePoolError,
    InvalidWeightError,
    NotFoundError,
    PositionOutOfRangeError,
    ServiceError,
    ValidationError,
)
from web.config_middleware import (
    configure_app,
    setup_security_headers,
    setup_metrics,
)
from web.routes import register_routes


def create_app(config, services, testing=False) -> Flask:
    """Create and configure Flask application.

    Args:
        config: Application configuration
        services: Wired :class:`services.registry.ServiceRegistry`
        testing: Whether running in testing mode

    Returns:
        Configured Flask application
    """
    app = Flask(__name__)
    app.json.sort_keys = False

    # Configure application
    configure_app(app, config, testing)
    app.config["SERVICES"] = services

    # Setup middleware
    setup_security_headers(app)
    setup_metrics(app)

    # Register routes
    register_routes(app)

    # Setup additional handlers
    _setup_routes(app)
    _setup_error_handlers(app)

    return app


def _setup_routes(app: Flask) -> None:
    @app.route("/")
    def root():
        return jsonify({"service": "dj-lottery", "status": "ok"})

    @app.route("/metrics")
    def metrics():
        """Expose Prometheus metrics."""
        data = generate_latest()
        return data, 200, {"Content-Type": CONTENT_TYPE_LATEST}


def error_status(error: ApplicationError) -> int:
    """Map an application error to an HTTP status code."""
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, (ValidationError, PositionOutOfRangeError, InvalidWeightError, EmptyCandidatePoolError)):
        return 400
    if isinstance(error, ServiceError):
        return 409
    return 500


def _error_response(message: str, error_type: str, status: int):
    return jsonify({"error": message, "type": error_type}), status


def _setup_error_handlers(app: Flask) -> None:
    """Setup error handlers.

    Args:
        app: Flask application instance
    """
    @app.errorhandler(ApplicationError)
    def application_error(error: ApplicationError):
        status = error_status(error)
        if status >= 500:
            app.logger.error(f"Unhandled application error: {error}")
        return _error_response(str(error), type(error).__name__, status)

    @app.errorhandler(HTTPException)
    def http_error(error: HTTPException):
        return _error_response(error.description, error.name, error.code or 500)

    @app.errorhandler(Exception)
    def internal_error(error: Exception):
        app.logger.error(f"Internal server error: {error}", exc_info=True)
        return _error_response("Internal server error", "InternalServerError", 500)
