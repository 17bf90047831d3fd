"""Pydantic models and validation for the /chat request body.

`validate_chat_request()` turns an arbitrary decoded JSON value into a typed
ChatRequest, or raises ValidationError describing the first violated
constraint. Fields are checked top-down: body shape, then `messages`
presence and length, then each message's `role` and `content` in order.
"""
from __future__ import annotations

from typing import Any, Literal, get_args

from pydantic import BaseModel, ConfigDict, Field, StrictStr
from pydantic import ValidationError as PydanticValidationError

from medi8_relay.utils.exceptions import ValidationError

Role = Literal["user", "assistant", "system"]

ALLOWED_ROLES: tuple[str, ...] = get_args(Role)


class ChatMessage(BaseModel):
    """A single chat turn.

    Attributes:
        role: Speaker of the message (user, assistant or system).
        content: Message text, must not be empty.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    role: Role
    content: StrictStr = Field(..., min_length=1)


class ChatRequest(BaseModel):
    """Incoming chat request.

    Attributes:
        messages: Ordered conversation, at least one message.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    messages: list[ChatMessage] = Field(..., min_length=1)

    def to_provider_messages(self) -> list[dict[str, str]]:
        """Return the messages in OpenAI chat format."""
        return [message.model_dump() for message in self.messages]


def validate_chat_request(payload: Any) -> ChatRequest:
    """Validate a decoded JSON body against the ChatRequest shape.

    Args:
        payload: Whatever the client sent, already JSON-decoded
            (None when the body was missing or not valid JSON).

    Returns:
        The typed ChatRequest.

    Raises:
        ValidationError: With a message describing the first violation.

    Examples:
        >>> validate_chat_request({"messages": []})
        Traceback (most recent call last):
            ...
        medi8_relay.utils.exceptions.ValidationError: "messages" must contain at least 1 item
    """
    if not isinstance(payload, dict):
        raise ValidationError("request body must be a JSON object")

    try:
        return ChatRequest.model_validate(payload)
    except PydanticValidationError as e:
        errors = e.errors()
        if not errors:
            raise ValidationError("Invalid request") from None
        raise ValidationError(_describe_error(errors[0])) from None


# ── Error formatting ──────────────────────────────────────────────────

def _format_location(loc: tuple[Any, ...]) -> str:
    """Render a pydantic error location as `messages[0].role`."""
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        elif path:
            path += f".{part}"
        else:
            path = str(part)
    return path


def _describe_error(error: dict[str, Any]) -> str:
    """Convert one pydantic error dict into a client-facing message."""
    field = _format_location(tuple(error.get("loc", ())))
    error_type = error.get("type", "")
    ctx = error.get("ctx") or {}

    if not field:
        return error.get("msg", "Invalid request")

    if error_type == "missing":
        return f'"{field}" is required'
    if error_type == "too_short":
        min_length = ctx.get("min_length", 1)
        noun = "item" if min_length == 1 else "items"
        return f'"{field}" must contain at least {min_length} {noun}'
    if error_type == "list_type":
        return f'"{field}" must be an array'
    if error_type in ("model_type", "model_attributes_type", "dict_type"):
        return f'"{field}" must be an object'
    if error_type == "literal_error":
        return f'"{field}" must be one of [{", ".join(ALLOWED_ROLES)}]'
    if error_type == "string_too_short":
        return f'"{field}" is not allowed to be empty'
    if error_type == "string_type":
        return f'"{field}" must be a string'
    if error_type == "extra_forbidden":
        return f'"{field}" is not allowed'

    return f'"{field}": {error.get("msg", "is invalid")}'
