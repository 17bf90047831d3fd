"""Custom exception hierarchy for the chat relay.

All application-specific exceptions inherit from RelayError, enabling
uniform error handling in the global error handlers.

Hierarchy:
    RelayError (base)
    ├── ValidationError   — Client payload does not match ChatRequest (400)
    └── UpstreamError     — Completion provider / transport failures (500)
"""
from __future__ import annotations

# Message returned to the caller for every upstream failure
GENERIC_ERROR_MESSAGE = "Internal Server Error"


class RelayError(Exception):
    """Base exception for the chat relay."""

    def __init__(self, message: str, status_code: int = 500) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


# ── Validation Errors ────────────────────────────────────────────────

class ValidationError(RelayError):
    """Raised when an incoming payload violates the ChatRequest shape.

    The message describes the first violated constraint and is returned
    to the client verbatim.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=400)


# ── Upstream Errors ──────────────────────────────────────────────────

class UpstreamError(RelayError):
    """Raised when the completion provider call fails for any reason.

    The public message is always generic; the underlying cause is kept on
    `detail` (and chained via `raise ... from`) for the operational log only.
    """

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(GENERIC_ERROR_MESSAGE, status_code=500)
