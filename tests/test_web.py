"""Tests for the FastAPI cart endpoints."""

import pytest
from fastapi.testclient import TestClient

from bookcart.web import app as web


@pytest.fixture
def client():
    web.sessions.clear()
    yield TestClient(web.app)
    web.sessions.clear()


def test_health(client) -> None:
    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["sessions_active"] == 0


def test_create_cart_returns_books_newest_first(client, cart_lines) -> None:
    resp = client.post("/api/cart", json={"lines": cart_lines})
    assert resp.status_code == 200
    body = resp.json()
    assert body["summary"] == {"added": 3, "stopped_at_line": None, "error": None}
    assert [b["title"] for b in body["books"]] == ["Third", "First", "Second"]
    assert body["books"][0]["encoded"] == '"9780000000003", "Third", "Author C", 7.25'
    assert body["session_id"] in web.sessions


def test_create_cart_reports_bad_line(client, cart_lines) -> None:
    lines = [cart_lines[0], '"x", "y", "z", abc', cart_lines[1]]
    body = client.post("/api/cart", json={"lines": lines}).json()
    assert body["summary"]["added"] == 1
    assert body["summary"]["stopped_at_line"] == 2
    assert body["summary"]["error"]["status"] == "malformed_field"
    assert body["summary"]["error"]["line"] == '"x", "y", "z", abc'


@pytest.mark.parametrize("payload", [{"lines": []}, {"lines": ["  "]}, {"lines": "nope"}, {}])
def test_create_cart_rejects_empty_input(client, payload) -> None:
    resp = client.post("/api/cart", json=payload)
    assert resp.status_code == 400
    assert "error" in resp.json()


def test_create_cart_when_full(client, cart_lines, monkeypatch) -> None:
    monkeypatch.setattr(web, "MAX_SESSIONS", 0)
    resp = client.post("/api/cart", json={"lines": cart_lines})
    assert resp.status_code == 503


def test_download_orders(client, cart_lines) -> None:
    session_id = client.post("/api/cart", json={"lines": cart_lines}).json()["session_id"]

    resp = client.get("/api/cart/download", params={"session": session_id})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/plain")
    assert [line.split(",")[1].strip() for line in resp.text.splitlines()] == [
        '"Third"',
        '"First"',
        '"Second"',
    ]

    resp = client.get("/api/cart/download", params={"session": session_id, "order": "sorted"})
    assert [line.split(",")[0] for line in resp.text.splitlines()] == [
        '"9780000000001"',
        '"9780000000002"',
        '"9780000000003"',
    ]


def test_download_unknown_session(client) -> None:
    resp = client.get("/api/cart/download", params={"session": "missing"})
    assert resp.status_code == 404


def test_download_bad_order(client, cart_lines) -> None:
    session_id = client.post("/api/cart", json={"lines": cart_lines}).json()["session_id"]
    resp = client.get("/api/cart/download", params={"session": session_id, "order": "random"})
    assert resp.status_code == 400


def test_expired_session_is_dropped(client, cart_lines, monkeypatch) -> None:
    session_id = client.post("/api/cart", json={"lines": cart_lines}).json()["session_id"]
    monkeypatch.setattr(web, "SESSION_TTL", -1)
    resp = client.get("/api/cart/download", params={"session": session_id})
    assert resp.status_code == 404
    assert session_id not in web.sessions


@pytest.mark.parametrize(
    ("value", "expected"),
    [("", 2), ("3", 3), ("0", 0), ("two", 2), ("-1", 2)],
)
def test_price_precision_from_environment(monkeypatch, value, expected) -> None:
    monkeypatch.setenv("PRICE_PRECISION", value)
    assert web._price_precision() == expected
