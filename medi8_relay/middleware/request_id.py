"""Request tracing middleware.

Each request gets a request id (the client's X-Request-ID when it is a
short token, a new UUID4 otherwise) that is bound to the structlog context
together with the client address, the same identity the rate limiter
counts by. One `request_completed` line with status and duration closes
every request, including rejected and failed ones.

Usage:
    from medi8_relay.middleware.request_id import init_request_id_middleware
    init_request_id_middleware(app)
"""
from __future__ import annotations

import re
import time
import uuid

import structlog
from flask import Flask, g, request

REQUEST_ID_HEADER = "X-Request-ID"

# Client-supplied ids end up in every log line; anything else is replaced
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._\-]{1,128}$")


def resolve_request_id(header_value: str | None) -> str:
    """Return the client's request id if acceptable, else a fresh UUID4."""
    if header_value and _VALID_REQUEST_ID.match(header_value):
        return header_value
    return str(uuid.uuid4())


def init_request_id_middleware(app: Flask) -> None:
    """Register before/after hooks for request tracing.

    Args:
        app: Flask application instance.
    """
    logger = structlog.get_logger(__name__)

    @app.before_request
    def start_request_trace() -> None:
        g.request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        g.request_started = time.monotonic()

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=g.request_id,
            method=request.method,
            path=request.path,
            client=request.remote_addr,
        )

    @app.after_request
    def finish_request_trace(response):
        response.headers[REQUEST_ID_HEADER] = g.get("request_id", "unknown")

        started = g.get("request_started")
        duration_ms = round((time.monotonic() - started) * 1000) if started else None
        logger.info(
            "request_completed",
            status=response.status_code,
            duration_ms=duration_ms,
        )
        return response
