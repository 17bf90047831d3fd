"""Pydantic models for API response serialization."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ChatReply(BaseModel):
    """Assistant reply derived from the provider's first candidate.

    Serialized on the wire as `{"aiReply": "..."}`.

    Attributes:
        text: Trimmed reply text.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    text: str = Field(..., alias="aiReply", description="Assistant reply text")

    def to_payload(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
