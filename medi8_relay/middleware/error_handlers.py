"""Global Flask error handlers for consistent JSON error responses.

Every error leaves the API as:
    { "error": "<message>" }

Usage:
    from medi8_relay.middleware.error_handlers import register_error_handlers
    register_error_handlers(app)
"""
from __future__ import annotations

import structlog
from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from medi8_relay.models.responses import ErrorResponse
from medi8_relay.utils.exceptions import (
    GENERIC_ERROR_MESSAGE,
    RelayError,
    UpstreamError,
    ValidationError,
)

logger = structlog.get_logger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests, please try again later."


def _error_response(message: str, code: int):
    """Create a JSON error response.

    Args:
        message: Human-readable error message.
        code: HTTP status code.

    Returns:
        Tuple of (response, status_code).
    """
    return jsonify(ErrorResponse(error=message).model_dump()), code


def register_error_handlers(app: Flask) -> None:
    """Register global error handlers on the Flask app.

    Args:
        app: Flask application instance.
    """

    # ── Standard HTTP Errors ──────────────────────────────────────────

    @app.errorhandler(404)
    def not_found(e):
        return _error_response("Not found", 404)

    @app.errorhandler(405)
    def method_not_allowed(e):
        return _error_response("Method not allowed", 405)

    @app.errorhandler(429)
    def rate_limited(e):
        logger.warning(
            "rate_limit_exceeded",
            client=request.remote_addr,
            limit=str(e.description),
        )
        return _error_response(RATE_LIMIT_MESSAGE, 429)

    @app.errorhandler(500)
    def internal_error(e):
        logger.error("unhandled_server_error", error=str(e), exc_info=True)
        return _error_response(GENERIC_ERROR_MESSAGE, 500)

    # ── Application Errors ────────────────────────────────────────────

    @app.errorhandler(ValidationError)
    def handle_validation_error(e: ValidationError):
        logger.warning("validation_error", error=e.message)
        return _error_response(e.message, e.status_code)

    @app.errorhandler(UpstreamError)
    def handle_upstream_error(e: UpstreamError):
        # detail stays in the log, the client only sees the generic message
        logger.error("chat_upstream_error", detail=e.detail)
        return _error_response(e.message, e.status_code)

    @app.errorhandler(RelayError)
    def handle_relay_error(e: RelayError):
        logger.warning(
            "relay_error",
            error=e.message,
            error_type=type(e).__name__,
            status_code=e.status_code,
        )
        return _error_response(e.message, e.status_code)

    # ── Catch-all for unexpected Werkzeug HTTP exceptions ─────────────

    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException):
        return _error_response(e.description or "Unknown error", e.code or 500)

    # ── Catch-all for truly unhandled exceptions ──────────────────────

    @app.errorhandler(Exception)
    def handle_unexpected_error(e: Exception):
        logger.error(
            "unexpected_error",
            error=str(e),
            error_type=type(e).__name__,
            exc_info=True,
        )
        return _error_response(GENERIC_ERROR_MESSAGE, 500)
