"""Medi8 chat relay — Flask Application Package.

The `create_app()` factory wires configuration, logging, boundary
middleware (request IDs, security headers, CORS, rate limiting), the
completion gateway and the blueprints.
"""
from __future__ import annotations

import structlog
from flask import Flask
from flask_cors import CORS

from medi8_relay.config import Settings, get_settings
from medi8_relay.middleware.error_handlers import register_error_handlers
from medi8_relay.middleware.ratelimit import init_rate_limiter
from medi8_relay.middleware.request_id import init_request_id_middleware
from medi8_relay.middleware.security_headers import init_security_headers
from medi8_relay.services.completion_gateway import CompletionGateway
from medi8_relay.utils.logger import setup_logging


def create_app(
    settings: Settings | None = None,
    gateway: CompletionGateway | None = None,
) -> Flask:
    """Application factory pattern.

    Creates and configures the Flask application with:
    - Pydantic-based configuration loading
    - Structured logging (structlog)
    - Request ID middleware
    - Security headers and permissive CORS
    - Per-client rate limiting (Flask-Limiter)
    - Global error handlers
    - Completion gateway
    - Blueprint registration (health, chat)

    Args:
        settings: Settings to use instead of `get_settings()`.
        gateway: Completion gateway to use instead of one built from settings.

    Returns:
        Configured Flask application instance.
    """
    settings = settings or get_settings()

    # ── Logging (must be first so all subsequent logs are formatted) ──
    setup_logging(log_level=settings.LOG_LEVEL, log_format=settings.LOG_FORMAT)
    logger = structlog.get_logger(__name__)

    # ── Flask app ─────────────────────────────────────────────────────
    app = Flask(__name__)
    app.config["FLASK_DEBUG"] = settings.FLASK_DEBUG
    app.config["SETTINGS"] = settings

    # ── Middleware ─────────────────────────────────────────────────────
    init_request_id_middleware(app)
    init_security_headers(app)
    CORS(app, send_wildcard=True)
    init_rate_limiter(app, settings)
    register_error_handlers(app)

    # ── Services ──────────────────────────────────────────────────────
    app.config["COMPLETION_GATEWAY"] = gateway or CompletionGateway.from_settings(settings)

    if not settings.has_api_key:
        logger.warning(
            "provider_credential_missing",
            hint="OPENAI_API_KEY is not set; /chat calls will fail upstream",
        )

    # ── Blueprints ────────────────────────────────────────────────────
    from medi8_relay.routes.chat import chat_bp
    from medi8_relay.routes.health import health_bp
    app.register_blueprint(health_bp)
    app.register_blueprint(chat_bp)

    logger.info(
        "app_started",
        env=settings.FLASK_ENV,
        model=settings.OPENAI_MODEL,
        rate_limit=settings.rate_limit,
        log_level=settings.LOG_LEVEL,
    )

    return app
