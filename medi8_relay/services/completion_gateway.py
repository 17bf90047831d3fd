"""Completion gateway: forwards a validated ChatRequest to the provider.

Talks to an OpenAI-compatible `/chat/completions` endpoint with fixed
generation parameters taken from configuration. Exactly one attempt is made
per request; every failure (transport, non-2xx status, malformed body) is
logged with its detail and re-raised as a generic UpstreamError.

Usage:
    from medi8_relay.services.completion_gateway import CompletionGateway

    gateway = CompletionGateway(api_key="...", model="gpt-4")
    reply = await gateway.complete(chat_request)
"""
from __future__ import annotations

import time
from typing import Any

import httpx
import structlog

from medi8_relay.config import Settings
from medi8_relay.models.requests import ChatRequest
from medi8_relay.models.responses import ChatReply
from medi8_relay.utils.exceptions import UpstreamError

logger = structlog.get_logger(__name__)


class CompletionGateway:
    """Async client for the chat completions API.

    A fresh httpx.AsyncClient is opened per call, since Flask runs each
    async view in its own event loop.

    Args:
        api_key: Provider API key, sent as a bearer token.
        model: Model identifier.
        max_tokens: Response-length cap.
        temperature: Sampling temperature.
        base_url: API base URL.
        timeout: HTTP timeout in seconds.
        transport: Optional httpx transport (used by tests to stub the provider).
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4",
        max_tokens: int = 500,
        temperature: float = 0.7,
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 600.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> CompletionGateway:
        """Build a gateway from application settings."""
        return cls(
            api_key=settings.OPENAI_API_KEY,
            model=settings.OPENAI_MODEL,
            max_tokens=settings.OPENAI_MAX_TOKENS,
            temperature=settings.OPENAI_TEMPERATURE,
            base_url=settings.OPENAI_BASE_URL,
            timeout=settings.HTTP_TIMEOUT,
            transport=transport,
        )

    # ── Core API ──────────────────────────────────────────────────────

    async def complete(self, chat_request: ChatRequest) -> ChatReply:
        """Send the conversation to the provider and return its reply.

        Args:
            chat_request: Validated request.

        Returns:
            ChatReply holding the first candidate's text, whitespace-trimmed.

        Raises:
            UpstreamError: On any transport, status or parsing failure.
        """
        payload = self._build_payload(chat_request)

        logger.info(
            "llm_request",
            model=self._model,
            messages_count=len(payload["messages"]),
        )

        start = time.monotonic()
        try:
            async with self._make_client() as client:
                response = await client.post("/chat/completions", json=payload)
            duration_ms = round((time.monotonic() - start) * 1000)

            if not response.is_success:
                logger.error(
                    "llm_error",
                    status=response.status_code,
                    body=response.text[:500],
                    duration_ms=duration_ms,
                )
                raise UpstreamError(f"provider returned HTTP {response.status_code}")

            data = response.json()
            reply = self._parse_response(data)
        except UpstreamError:
            raise
        except httpx.TimeoutException as e:
            logger.error("llm_timeout", error=str(e))
            raise UpstreamError("provider request timed out") from e
        except httpx.HTTPError as e:
            logger.error("llm_transport_error", error=str(e), error_type=type(e).__name__)
            raise UpstreamError(f"transport error: {e}") from e
        except ValueError as e:
            # response.json() on a non-JSON body
            logger.error("llm_invalid_json", error=str(e))
            raise UpstreamError("provider returned invalid JSON") from e

        logger.info(
            "llm_response",
            model=data.get("model", self._model),
            finish_reason=data["choices"][0].get("finish_reason", ""),
            usage=data.get("usage", {}),
            reply_length=len(reply.text),
            duration_ms=duration_ms,
        )
        return reply

    # ── Helpers ───────────────────────────────────────────────────────

    def _make_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(self._timeout),
            headers={
                "Authorization": f"Bearer {self._api_key}",
                "Content-Type": "application/json",
            },
            transport=self._transport,
        )

    def _build_payload(self, chat_request: ChatRequest) -> dict[str, Any]:
        return {
            "model": self._model,
            "messages": chat_request.to_provider_messages(),
            "max_tokens": self._max_tokens,
            "temperature": self._temperature,
        }

    def _parse_response(self, data: Any) -> ChatReply:
        """Extract the first candidate's text from the raw provider JSON.

        Raises:
            UpstreamError: If the body does not carry a text candidate.
        """
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            logger.error("llm_malformed_response", error=repr(e))
            raise UpstreamError("provider response has no candidate") from e

        if not isinstance(content, str):
            logger.error("llm_malformed_response", content_type=type(content).__name__)
            raise UpstreamError("provider candidate has no text content")

        return ChatReply(text=content.strip())
