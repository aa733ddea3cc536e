import asyncio
import uuid
from datetime import datetime, timezone

import pytest

ORIGIN = {"Origin": "https://app.example.com"}
CORS_ALLOW_HEADERS = "authorization, x-client-info, apikey, content-type"


def assert_cors(response):
    assert response.headers["access-control-allow-origin"] == "*"
    assert response.headers["access-control-allow-headers"] == CORS_ALLOW_HEADERS


@pytest.mark.asyncio
async def test_preflight_returns_empty_ok_with_cors(client, backend):
    r = await client.options("/")
    assert r.status_code == 200
    assert r.content == b""
    assert_cors(r)
    assert backend.requests == []


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    {"user_id": "", "email": "a@example.com"},
    {"user_id": "u1", "email": ""},
    {"email": "a@example.com"},
    {},
])
async def test_missing_fields_rejected_without_persisting(client, backend, body):
    r = await client.post("/", json=body, headers=ORIGIN)
    assert r.status_code == 400
    assert r.json() == {"error": "User ID and email are required"}
    assert_cors(r)
    assert backend.requests == []


@pytest.mark.asyncio
async def test_issue_persists_token_and_returns_link(client, backend):
    before = datetime.now(timezone.utc)
    r = await client.post("/", json={"user_id": "u1", "email": "a@example.com"}, headers=ORIGIN)
    assert r.status_code == 200
    assert_cors(r)
    data = r.json()
    assert data["success"] is True
    assert data["message"] == "Verification email sent"

    stored = backend.profiles["u1"]
    token = stored["email_verification_token"]
    assert str(uuid.UUID(token)) == token
    assert stored["email"] == "a@example.com"
    assert stored["email_verified"] is False
    assert datetime.fromisoformat(stored["email_verification_sent_at"]) >= before
    assert data["debug_link"] == f"https://app.example.com/verify-email?token={token}"
    assert data["debug_link"].endswith(f"?token={token}")


@pytest.mark.asyncio
async def test_backend_request_uses_service_credentials(client, backend):
    await client.post("/", json={"user_id": "u1", "email": "a@example.com"}, headers=ORIGIN)

    request = backend.requests[0]
    assert request.method == "PATCH"
    assert request.url.path == "/rest/v1/profiles"
    assert request.url.params["id"] == "eq.u1"
    assert request.headers["apikey"] == "service-role-key"
    assert request.headers["authorization"] == "Bearer service-role-key"


@pytest.mark.asyncio
async def test_link_falls_back_to_request_base_url(client, backend):
    r = await client.post("/", json={"user_id": "u1", "email": "a@example.com"})
    token = backend.profiles["u1"]["email_verification_token"]
    assert r.json()["debug_link"] == f"http://function.test/verify-email?token={token}"


@pytest.mark.asyncio
async def test_persistence_failure_hides_cause(client, backend):
    backend.status_code = 401
    r = await client.post("/", json={"user_id": "u1", "email": "a@example.com"}, headers=ORIGIN)
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to send verification"}
    assert_cors(r)


@pytest.mark.asyncio
async def test_malformed_body_surfaces_message(client, backend):
    r = await client.post(
        "/", content=b"{not json", headers={**ORIGIN, "Content-Type": "application/json"}
    )
    assert r.status_code == 500
    assert r.json()["error"]
    assert_cors(r)
    assert backend.requests == []


@pytest.mark.asyncio
async def test_concurrent_issues_last_write_wins(client, backend):
    body = {"user_id": "u1", "email": "a@example.com"}
    first, second = await asyncio.gather(
        client.post("/", json=body, headers=ORIGIN),
        client.post("/", json=body, headers=ORIGIN),
    )
    assert first.status_code == second.status_code == 200

    tokens = {first.json()["debug_link"].split("token=")[1],
              second.json()["debug_link"].split("token=")[1]}
    assert len(tokens) == 2
    last_written = backend.requests[-1]
    stored = backend.profiles["u1"]["email_verification_token"]
    assert stored in tokens
    assert last_written.content.decode().count(stored) == 1


@pytest.mark.asyncio
async def test_every_token_is_fresh(client, backend):
    body = {"user_id": "u1", "email": "a@example.com"}
    await client.post("/", json=body, headers=ORIGIN)
    first = backend.profiles["u1"]["email_verification_token"]
    await client.post("/", json=body, headers=ORIGIN)
    assert backend.profiles["u1"]["email_verification_token"] != first


@pytest.mark.asyncio
async def test_other_routes_carry_cors_headers(client):
    r = await client.get("/health")
    assert r.status_code == 200
    assert_cors(r)


@pytest.mark.asyncio
async def test_missing_backend_url_does_not_echo_service_key(client, backend, monkeypatch):
    monkeypatch.delenv("SUPABASE_URL")
    r = await client.post("/", json={"user_id": "u1", "email": "a@example.com"}, headers=ORIGIN)
    assert r.status_code == 500
    assert r.json() == {"error": "Server misconfigured"}
    assert "service-role-key" not in r.text
    assert_cors(r)
    assert backend.requests == []


def test_settings_error_names_fields_only(monkeypatch):
    from verify_email.config import get_settings
    from verify_email.errors import Misconfigured

    monkeypatch.delenv("SUPABASE_URL")
    with pytest.raises(Misconfigured) as excinfo:
        get_settings()
    assert "SUPABASE_URL" in excinfo.value.cause
    assert "service-role-key" not in excinfo.value.cause
    assert "service-role-key" not in str(excinfo.value)


def test_tracing_is_opt_in():
    from verify_email.telemetry import TelemetrySettings, setup_tracing

    assert setup_tracing(TelemetrySettings(otel_enabled=False)) is False
