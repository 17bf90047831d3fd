"""Liveness endpoint.

GET / returns a static plain-text string. No body parsing, no dependency
checks.
"""
from __future__ import annotations

import structlog
from flask import Blueprint, current_app

logger = structlog.get_logger(__name__)

health_bp = Blueprint("health", __name__)


@health_bp.route("/", methods=["GET"])
def index():
    """Report that the service is up."""
    settings = current_app.config["SETTINGS"]
    logger.info("health_check")
    return f"{settings.APP_NAME} is running.", 200, {"Content-Type": "text/plain; charset=utf-8"}
