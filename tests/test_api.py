"""Tests for the HTTP API in local-fallback and remote modes."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from hopecity.api.app import create_app
from hopecity.auth.identity import IdentityClient
from hopecity.config.settings import Settings
from hopecity.site_config.defaults import DEFAULT_CONFIG
from hopecity.site_config.merge import build_config

from test_auth import GOOD_TOKEN, identity_handler


def _identity() -> IdentityClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(identity_handler))
    return IdentityClient("http://identity.test", "anon-key", service_key="service-key", http_client=http)


def _new_config(*titles: str) -> dict:
    payload = build_config().to_canonical()
    payload["announcement"]["text"] = "Harvest Sunday"
    payload["events"] = [
        {"id": i + 1, "title": t, "date": "Oct 1", "time": "10 AM", "signupUrl": ""}
        for i, t in enumerate(titles)
    ]
    return payload


@pytest.fixture
def local_settings(storage_path) -> Settings:
    return Settings(storage_path=storage_path, database_url=None, identity_url=None, gemini_api_key=None)


@pytest.fixture
async def local_client(local_settings):
    app = create_app(local_settings)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
async def remote_client(storage_path, test_session_factory, seeded_settings):
    settings = Settings(storage_path=storage_path, database_url=None)
    app = create_app(settings, session_factory=test_session_factory, identity=_identity())
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


# ---------------------------------------------------------------------------
# Local mode
# ---------------------------------------------------------------------------


async def test_health_reports_mode(local_client, remote_client):
    assert (await local_client.get("/health")).json() == {"status": "ok", "mode": "local"}
    assert (await remote_client.get("/health")).json() == {"status": "ok", "mode": "remote"}


async def test_get_config_defaults(local_client):
    resp = await local_client.get("/api/config")
    assert resp.status_code == 200
    assert resp.json() == DEFAULT_CONFIG


async def test_put_config_requires_pin(local_client):
    resp = await local_client.put("/api/config", json=_new_config("A"))
    assert resp.status_code == 401
    assert resp.json()["detail"]["kind"] == "auth_required"

    resp = await local_client.put("/api/config", json=_new_config("A"), headers={"X-Admin-Pin": "9999"})
    assert resp.status_code == 401


async def test_put_config_with_default_pin(local_client):
    await local_client.get("/api/config")

    resp = await local_client.put(
        "/api/config", json=_new_config("A", "B"), headers={"X-Admin-Pin": "1234"}
    )
    assert resp.status_code == 200
    assert resp.json()["ok"] is True

    data = (await local_client.get("/api/config")).json()
    assert data["announcement"]["text"] == "Harvest Sunday"
    assert [e["title"] for e in data["events"]] == ["A", "B"]


async def test_put_partial_body_fills_defaults(local_client):
    resp = await local_client.put(
        "/api/config",
        json={"announcement": {"active": False}},
        headers={"X-Admin-Pin": "1234"},
    )
    assert resp.status_code == 200
    config = resp.json()["config"]
    assert config["announcement"]["active"] is False
    assert config["links"] == DEFAULT_CONFIG["links"]
    assert len(config["events"]) == 3


async def test_put_invalid_body(local_client):
    resp = await local_client.put(
        "/api/config",
        json={"announcement": {"active": "sometimes"}},
        headers={"X-Admin-Pin": "1234"},
    )
    assert resp.status_code == 422


async def test_pin_setup_and_change(local_client):
    assert (await local_client.post("/api/admin/pin", json={"pin": "12"})).status_code == 400
    assert (await local_client.post("/api/admin/pin", json={"pin": "2468"})).status_code == 200

    # Changing it now needs the current PIN
    resp = await local_client.post("/api/admin/pin", json={"pin": "1357"})
    assert resp.status_code == 401
    resp = await local_client.post("/api/admin/pin", json={"pin": "1357", "current_pin": "2468"})
    assert resp.status_code == 200

    assert (await local_client.post("/api/admin/pin/verify", json={"pin": "1234"})).status_code == 401
    resp = await local_client.post("/api/admin/pin/verify", json={"pin": "1357"})
    assert resp.json() == {"ok": True, "pin_set": True}


async def test_prayer_not_configured(local_client):
    resp = await local_client.post("/api/assistant/prayer", json={"input": "help"})
    assert resp.status_code == 503


async def test_invite_without_identity_provider(local_client):
    resp = await local_client.post("/api/admin/invite", json={"email": "a@b.test"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Server configuration error"}


# ---------------------------------------------------------------------------
# Remote mode
# ---------------------------------------------------------------------------


async def test_remote_put_requires_session(remote_client):
    resp = await remote_client.put("/api/config", json=_new_config("A"))
    assert resp.status_code == 401
    assert resp.json()["detail"]["kind"] == "auth_required"

    resp = await remote_client.put(
        "/api/config", json=_new_config("A"), headers={"Authorization": "Bearer expired"}
    )
    assert resp.status_code == 401


async def test_remote_put_and_read_back(remote_client):
    assert (await remote_client.get("/api/config")).json()["events"] == []

    resp = await remote_client.put(
        "/api/config",
        json=_new_config("A", "B", "C"),
        headers={"Authorization": f"Bearer {GOOD_TOKEN}"},
    )
    assert resp.status_code == 200
    saved = resp.json()["config"]
    assert [e["title"] for e in saved["events"]] == ["A", "B", "C"]
    assert all(isinstance(e["id"], str) for e in saved["events"])

    data = (await remote_client.get("/api/config")).json()
    assert data == saved


async def test_remote_pin_endpoints_disabled(remote_client):
    assert (await remote_client.post("/api/admin/pin", json={"pin": "2468"})).status_code == 409


async def test_login(remote_client):
    resp = await remote_client.post(
        "/api/admin/login", json={"email": "admin@hopecity.test", "password": "hunter22"}
    )
    assert resp.status_code == 200
    assert resp.json()["access_token"] == GOOD_TOKEN

    resp = await remote_client.post(
        "/api/admin/login", json={"email": "admin@hopecity.test", "password": "nope"}
    )
    assert resp.status_code == 401


@pytest.mark.parametrize(
    "headers, body, status, expected",
    [
        ({}, {"email": "new@hopecity.test"}, 401, {"error": "Missing or invalid Authorization header"}),
        ({"Authorization": "Bearer expired"}, {"email": "new@hopecity.test"}, 401, {"error": "Unauthorized"}),
        ({"Authorization": f"Bearer {GOOD_TOKEN}"}, {"email": "   "}, 400, {"error": "Email is required"}),
        ({"Authorization": f"Bearer {GOOD_TOKEN}"}, {"email": "x@blocked.test"}, 400, {"error": "Email rate limit exceeded"}),
        ({"Authorization": f"Bearer {GOOD_TOKEN}"}, {"email": " new@hopecity.test "}, 200, {"ok": True, "user": "new@hopecity.test"}),
    ],
)
async def test_invite_relay(remote_client, headers, body, status, expected):
    resp = await remote_client.post("/api/admin/invite", json=body, headers=headers)
    assert resp.status_code == status
    assert resp.json() == expected


async def test_invite_rejects_invalid_json(remote_client):
    resp = await remote_client.post(
        "/api/admin/invite",
        content=b"{not json",
        headers={"Authorization": f"Bearer {GOOD_TOKEN}", "Content-Type": "application/json"},
    )
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid JSON body"}


# ---------------------------------------------------------------------------
# Prayer assistant
# ---------------------------------------------------------------------------


async def test_prayer_endpoint(local_settings):
    gemini = MagicMock()
    gemini.aio.models.generate_content = AsyncMock(
        return_value=SimpleNamespace(text="A prayer. Psalm 23:1", usage_metadata=None)
    )
    app = create_app(local_settings, assistant_client=gemini)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        resp = await client.post("/api/assistant/prayer", json={"input": "lonely"})
        assert resp.status_code == 200
        assert resp.json() == {"text": "A prayer. Psalm 23:1"}

        assert (await client.post("/api/assistant/prayer", json={"input": " "})).status_code == 400

        gemini.aio.models.generate_content.side_effect = RuntimeError("quota")
        resp = await client.post("/api/assistant/prayer", json={"input": "lonely"})
        assert resp.status_code == 502
