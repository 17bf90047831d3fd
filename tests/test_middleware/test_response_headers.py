"""Tests for security headers, CORS and request ID propagation."""
import pytest

from medi8_relay.middleware.request_id import resolve_request_id
from medi8_relay.middleware.security_headers import SECURITY_HEADERS


@pytest.mark.parametrize("method, path, kwargs", [
    ("get", "/", {}),
    ("post", "/chat", {"json": {"messages": [{"role": "user", "content": "hello"}]}}),
    ("post", "/chat", {"json": {"messages": []}}),
    ("get", "/missing", {}),
])
def test_security_headers_on_every_response(client, method, path, kwargs):
    resp = getattr(client, method)(path, **kwargs)

    for name, value in SECURITY_HEADERS.items():
        assert resp.headers[name] == value


def test_cors_allows_any_origin(client):
    resp = client.get("/", headers={"Origin": "https://medi8.example"})
    assert resp.headers["Access-Control-Allow-Origin"] == "*"


def test_cors_preflight(client):
    resp = client.options(
        "/chat",
        headers={
            "Origin": "https://medi8.example",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )
    assert resp.status_code == 200
    assert resp.headers["Access-Control-Allow-Origin"] == "*"
    assert "POST" in resp.headers["Access-Control-Allow-Methods"]


def test_request_id_generated(client):
    resp = client.get("/")
    assert len(resp.headers["X-Request-ID"]) == 36


def test_request_id_propagated(client):
    resp = client.get("/", headers={"X-Request-ID": "abc-123"})
    assert resp.headers["X-Request-ID"] == "abc-123"


@pytest.mark.parametrize("header", ["has spaces", "line\\nbreak", "x" * 129, "quote\"d"])
def test_unsafe_request_id_replaced(client, header):
    resp = client.get("/", headers={"X-Request-ID": header})

    assert resp.headers["X-Request-ID"] != header
    assert len(resp.headers["X-Request-ID"]) == 36


def test_request_id_on_rejected_requests(client):
    resp = client.post("/chat", json={"messages": []}, headers={"X-Request-ID": "trace-400"})

    assert resp.status_code == 400
    assert resp.headers["X-Request-ID"] == "trace-400"


def test_resolve_request_id():
    assert resolve_request_id("req_01.A-b") == "req_01.A-b"
    assert len(resolve_request_id(None)) == 36
    assert len(resolve_request_id("")) == 36
