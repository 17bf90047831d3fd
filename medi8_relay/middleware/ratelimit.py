"""Per-client rate limiting with Flask-Limiter.

A fixed-window limit (100 requests per 15 minutes by default) is applied as
an application-wide limit, so one counter per client covers every route.
The check runs in a before_request hook, so rejected calls
never reach the request validator. Over-limit requests raise werkzeug's
TooManyRequests, rendered as 429 by the error handlers.

Usage:
    from medi8_relay.middleware.ratelimit import init_rate_limiter
    limiter = init_rate_limiter(app, settings)
"""
from __future__ import annotations

import structlog
from flask import Flask
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from medi8_relay.config import Settings

logger = structlog.get_logger(__name__)


def init_rate_limiter(app: Flask, settings: Settings) -> Limiter:
    """Create the rate limiter for this app and attach it.

    Each app gets its own Limiter (and counter storage), so tests and
    multiple app instances do not share counters.

    Args:
        app: Flask application instance.
        settings: Application settings.

    Returns:
        The initialized Limiter, also available as `app.extensions["limiter"]`.
    """
    limiter = Limiter(
        get_remote_address,
        app=app,
        application_limits=[settings.rate_limit],
        storage_uri=settings.RATE_LIMIT_STORAGE_URI,
        strategy="fixed-window",
    )

    logger.info(
        "rate_limiter_initialized",
        limit=settings.rate_limit,
        storage=settings.RATE_LIMIT_STORAGE_URI.split("://", 1)[0],
    )
    return limiter
