"""Tests for the fixed-window request limit"""
from flask import Flask

from api import create_app


def test_requests_over_the_limit_get_429_envelope(app: Flask):
    limited = create_app("test", {"RATELIMIT_ENABLED": True, "RATELIMIT_DEFAULT": "3 per 15 minutes"})
    client = limited.test_client()

    responses = [client.get("/api/v1/health") for _ in range(5)]
    assert [r.status_code for r in responses] == [200, 200, 200, 429, 429]

    body = responses[3].get_json()
    assert body["success"] is False
    assert body["status"] == 429
    assert "data" not in body
    assert responses[3].headers["X-Frame-Options"] == "DENY"


def test_limit_is_per_client_address(app: Flask):
    limited = create_app("test", {"RATELIMIT_ENABLED": True, "RATELIMIT_DEFAULT": "1 per 15 minutes"})
    client = limited.test_client()

    assert client.get("/api/v1/health", environ_base={"REMOTE_ADDR": "10.0.0.1"}).status_code == 200
    assert client.get("/api/v1/health", environ_base={"REMOTE_ADDR": "10.0.0.1"}).status_code == 429
    assert client.get("/api/v1/health", environ_base={"REMOTE_ADDR": "10.0.0.2"}).status_code == 200


def test_limit_disabled_under_test_config(client):
    assert all(client.get("/api/v1/health").status_code == 200 for _ in range(150))
