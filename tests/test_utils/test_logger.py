"""Unit tests for the log redaction processor."""
import pytest

from medi8_relay.utils.logger import REDACTED, redact_sensitive


def _redact(**event):
    return redact_sensitive(None, "info", {"event": "test_event", **event})


class TestSecrets:
    """Credentials never survive the processor."""

    @pytest.mark.parametrize("key", ["authorization", "Authorization", "api_key", "OPENAI_API_KEY"])
    def test_secret_keys_replaced(self, key):
        assert _redact(**{key: "Bearer sk-live-abc123"})[key] == REDACTED

    def test_nested_headers(self):
        result = _redact(headers={"Authorization": "Bearer sk-abc", "Content-Type": "application/json"})

        assert result["headers"] == {"Authorization": REDACTED, "Content-Type": "application/json"}

    def test_key_in_upstream_error_body(self):
        body = '{"error": {"message": "Incorrect API key provided: sk-proj-XyZ987."}}'

        result = _redact(body=body)

        assert "XyZ987" not in result["body"]
        assert REDACTED in result["body"]
        assert "Incorrect API key provided" in result["body"]

    def test_bearer_token_in_text(self):
        result = _redact(error="401 for header Bearer abc.def.ghi")
        assert result["error"] == f"401 for header Bearer {REDACTED}"

    def test_exception_text_masked(self):
        result = _redact(exception="Traceback ...\nUpstreamError: key sk-test-key rejected")
        assert "sk-test-key" not in result["exception"]


class TestMessageContent:
    """Chat text is logged only as a length."""

    def test_content_replaced_with_length(self):
        assert _redact(content="I have chest pain")["content"] == "[17 chars]"

    def test_messages_list(self):
        result = _redact(messages=[
            {"role": "system", "content": "Be brief."},
            {"role": "user", "content": "hello"},
        ])

        assert result["messages"] == [
            {"role": "system", "content": "[9 chars]"},
            {"role": "user", "content": "[5 chars]"},
        ]


class TestPassThrough:
    def test_ordinary_fields_untouched(self):
        event = {
            "event": "llm_response",
            "model": "gpt-4",
            "usage": {"prompt_tokens": 9, "total_tokens": 13},
            "duration_ms": 412,
            "request_id": "abc-123",
            "finish_reason": "stop",
        }
        assert redact_sensitive(None, "info", dict(event)) == event

    def test_words_containing_sk_untouched(self):
        assert _redact(error="task-queue risk-free")["error"] == "task-queue risk-free"
