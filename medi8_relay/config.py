"""Centralized application configuration using Pydantic Settings.

Loads configuration from environment variables and `.env` file with
full validation, type coercion, and sensible defaults.

Usage:
    from medi8_relay.config import get_settings

    settings = get_settings()  # cached singleton
    print(settings.OPENAI_MODEL)
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file.

    OPENAI_API_KEY is optional at startup. A missing key is logged as a
    warning and surfaces on each /chat call as an upstream failure.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # silently ignore unknown env vars
    )

    # ── Server ─────────────────────────────────────────────────────────
    PORT: int = Field(default=4000, ge=1, le=65535, description="Port the HTTP server listens on")
    FLASK_ENV: str = Field(default="development", description="Flask environment (development/production)")
    FLASK_DEBUG: bool = Field(default=False, description="Enable Flask debug mode")
    APP_NAME: str = Field(default="Medi8 Final backend", description="Name reported by the liveness endpoint")

    # ── Completion Provider ───────────────────────────────────────────
    OPENAI_API_KEY: str = Field(default="", description="Completion provider API key")
    OPENAI_BASE_URL: str = Field(
        default="https://api.openai.com/v1",
        description="OpenAI-compatible API base URL",
    )
    OPENAI_MODEL: str = Field(default="gpt-4", description="Model identifier sent with every completion")
    OPENAI_MAX_TOKENS: int = Field(default=500, ge=1, description="Response-length cap (tokens)")
    OPENAI_TEMPERATURE: float = Field(default=0.7, ge=0.0, le=2.0, description="Sampling temperature")

    # ── HTTP Client ───────────────────────────────────────────────────
    HTTP_TIMEOUT: float = Field(default=600.0, gt=0, description="Outbound HTTP timeout (seconds)")

    # ── Rate Limiting ─────────────────────────────────────────────────
    RATE_LIMIT_MAX_REQUESTS: int = Field(default=100, ge=1, description="Max requests per client per window")
    RATE_LIMIT_WINDOW_MINUTES: int = Field(default=15, ge=1, description="Rate-limit window length (minutes)")
    RATE_LIMIT_STORAGE_URI: str = Field(default="memory://", description="Flask-Limiter storage backend URI")

    # ── Logging ───────────────────────────────────────────────────────
    LOG_LEVEL: str = Field(default="INFO", description="Logging level (DEBUG/INFO/WARNING/ERROR)")
    LOG_FORMAT: str = Field(default="json", description="Log output format ('json' for prod, 'console' for dev)")

    # ── Validators ────────────────────────────────────────────────────

    @field_validator("OPENAI_API_KEY")
    @classmethod
    def strip_api_key(cls, v: str) -> str:
        return v.strip()

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate log level."""
        v = v.upper().strip()
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}, got '{v}'")
        return v

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        v = v.lower().strip()
        if v not in ("json", "console"):
            raise ValueError("LOG_FORMAT must be 'json' or 'console'")
        return v

    @field_validator("OPENAI_BASE_URL")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Ensure the base URL has no trailing slash."""
        return v.rstrip("/")

    @property
    def rate_limit(self) -> str:
        """Default limit in Flask-Limiter notation, e.g. '100 per 15 minutes'."""
        return f"{self.RATE_LIMIT_MAX_REQUESTS} per {self.RATE_LIMIT_WINDOW_MINUTES} minutes"

    @property
    def has_api_key(self) -> bool:
        return bool(self.OPENAI_API_KEY)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton Settings instance.

    Uses `lru_cache` so the `.env` file is only read once.
    Call this everywhere instead of instantiating Settings directly.
    """
    return Settings()
