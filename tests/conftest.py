"""Shared pytest fixtures for the relay test suite.

Provides reusable fixtures for:
- Settings isolated from the environment / .env file
- A stub completion provider behind httpx.MockTransport
- Flask app and test client wired to the stub
"""
from __future__ import annotations

import httpx
import pytest

from medi8_relay import create_app
from medi8_relay.config import Settings
from medi8_relay.services.completion_gateway import CompletionGateway


def completion_body(content, model="gpt-4", finish_reason="stop"):
    """Build an OpenAI-style chat completion response body."""
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "model": model,
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": finish_reason,
            }
        ],
        "usage": {"prompt_tokens": 9, "completion_tokens": 4, "total_tokens": 13},
    }


class StubProvider:
    """Callable handler for httpx.MockTransport that records requests.

    Set `handler` to change what the provider answers.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.handler = lambda request: httpx.Response(200, json=completion_body("Hello!"))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    def reply_with(self, content) -> None:
        self.handler = lambda request: httpx.Response(200, json=completion_body(content))


@pytest.fixture
def settings():
    """Settings that ignore the developer's .env file."""
    return Settings(
        _env_file=None,
        OPENAI_API_KEY="sk-test-key",
        LOG_LEVEL="WARNING",
        LOG_FORMAT="console",
    )


@pytest.fixture
def provider():
    """Stub completion provider."""
    return StubProvider()


@pytest.fixture
def gateway(settings, provider):
    """CompletionGateway that talks to the stub provider."""
    return CompletionGateway.from_settings(settings, transport=httpx.MockTransport(provider))


@pytest.fixture
def app(settings, gateway):
    """Create a Flask application instance for testing."""
    app = create_app(settings=settings, gateway=gateway)
    app.config["TESTING"] = True
    yield app


@pytest.fixture
def client(app):
    """Create a Flask test client."""
    return app.test_client()
