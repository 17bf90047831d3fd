"""Structured logging configuration using structlog.

Every event passes through `redact_sensitive` before rendering, so
provider credentials and chat message text never reach the log sink:

- `authorization` / `api_key` style keys are replaced with "[REDACTED]"
- `content` values (and `content` inside `messages` lists) are replaced
  with their length, e.g. "[12 chars]"
- bearer tokens and `sk-...` keys embedded in free text (upstream error
  bodies, exception strings) are masked

Usage:
    from medi8_relay.utils.logger import setup_logging

    setup_logging(log_level="INFO", log_format="json")

    import structlog
    logger = structlog.get_logger(__name__)
    logger.info("event_name", key="value")
"""
from __future__ import annotations

import logging
import re
from typing import Any

import structlog

REDACTED = "[REDACTED]"

SECRET_KEYS = frozenset({"authorization", "api_key", "openai_api_key", "x-api-key"})

_SECRET_PATTERN = re.compile(r"(Bearer\s+)[^\s\"',]+|\bsk-[A-Za-z0-9_\-]{3,}", re.IGNORECASE)


def _mask_text(text: str) -> str:
    return _SECRET_PATTERN.sub(
        lambda m: f"{m.group(1)}{REDACTED}" if m.group(1) else REDACTED,
        text,
    )


def _scrub(key: str, value: Any) -> Any:
    if key.lower() in SECRET_KEYS:
        return REDACTED
    if key == "content" and isinstance(value, str):
        return f"[{len(value)} chars]"
    if isinstance(value, dict):
        return {k: _scrub(str(k), v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_scrub(key, item) for item in value]
    if isinstance(value, str):
        return _mask_text(value)
    return value


def redact_sensitive(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """structlog processor removing credentials and message text."""
    return {key: _scrub(key, value) for key, value in event_dict.items()}


def setup_logging(log_level: str = "INFO", log_format: str = "json") -> None:
    """Configure structlog for the entire application.

    Args:
        log_level: Logging level — DEBUG, INFO, WARNING, ERROR, CRITICAL.
        log_format: Output format — 'json' for production, 'console' for dev.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,       # request_id, client, ...
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        redact_sensitive,                              # must follow format_exc_info
    ]

    if log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # werkzeug, httpx and flask_limiter log through stdlib
    logging.basicConfig(format="%(message)s", level=level)
