"""
HTTP tests for authentication, error shapes and health.
"""

import pytest

from newsletter_api.core.security import create_access_token
from newsletter_api.models import User


BASE = "/api/v1/auth"
DEFAULT_PASSWORD = "secret123"


@pytest.mark.asyncio
async def test_login_returns_bearer_token(client, make_user):
    ana = await make_user("Ana")

    response = await client.post(f"{BASE}/login", json={"email": ana.email, "password": DEFAULT_PASSWORD})

    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["pending_password"] is False
    assert body["expires_in"] > 0

    me = await client.get(f"{BASE}/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.status_code == 200
    assert me.json()["id"] == ana.id


@pytest.mark.asyncio
async def test_login_email_is_case_insensitive(client, make_user):
    ana = await make_user("Ana")

    response = await client.post(
        f"{BASE}/login", json={"email": ana.email.upper(), "password": DEFAULT_PASSWORD}
    )

    assert response.status_code == 200


@pytest.mark.asyncio
@pytest.mark.parametrize("email_known", [True, False])
async def test_login_with_bad_credentials_is_unauthorized(client, make_user, email_known):
    ana = await make_user("Ana")
    email = ana.email if email_known else "nobody@example.com"

    response = await client.post(f"{BASE}/login", json={"email": email, "password": "wrong-password"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password"


@pytest.mark.asyncio
async def test_login_reports_pending_password(client, make_user):
    ana = await make_user("Ana", pending_password=True)

    response = await client.post(f"{BASE}/login", json={"email": ana.email, "password": DEFAULT_PASSWORD})

    assert response.status_code == 200
    assert response.json()["pending_password"] is True


@pytest.mark.asyncio
async def test_change_password_clears_pending_flag(client, make_user, auth_headers, fetch):
    ana = await make_user("Ana", pending_password=True)
    headers = auth_headers(ana)

    blocked = await client.get("/api/v1/newsletters", headers=headers)
    changed = await client.post(
        f"{BASE}/change-password",
        json={"current_password": DEFAULT_PASSWORD, "new_password": "brand-new-secret"},
        headers=headers,
    )
    unblocked = await client.get("/api/v1/newsletters", headers=headers)

    assert blocked.status_code == 403
    assert changed.status_code == 200
    assert unblocked.status_code == 200
    assert (await fetch(User, ana.id)).pending_password is False

    login = await client.post(f"{BASE}/login", json={"email": ana.email, "password": "brand-new-secret"})
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_change_password_requires_current_password(client, make_user, auth_headers):
    ana = await make_user("Ana")

    response = await client.post(
        f"{BASE}/change-password",
        json={"current_password": "not-it", "new_password": "brand-new-secret"},
        headers=auth_headers(ana),
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_change_password_rejects_same_password(client, make_user, auth_headers):
    ana = await make_user("Ana")

    response = await client.post(
        f"{BASE}/change-password",
        json={"current_password": DEFAULT_PASSWORD, "new_password": DEFAULT_PASSWORD},
        headers=auth_headers(ana),
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_me_is_available_while_password_is_pending(client, make_user, auth_headers):
    ana = await make_user("Ana", pending_password=True)

    response = await client.get(f"{BASE}/me", headers=auth_headers(ana))

    assert response.status_code == 200
    assert response.json()["pending_password"] is True


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "headers",
    [
        {},
        {"Authorization": "Bearer not-a-jwt"},
        {"Authorization": "Basic YW5hOnNlY3JldA=="},
    ],
)
async def test_me_without_valid_token_is_unauthorized(client, headers):
    response = await client.get(f"{BASE}/me", headers=headers)

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_token_for_unknown_user_is_unauthorized(client):
    token = create_access_token(subject=4242)

    response = await client.get(f"{BASE}/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Logged user cannot be found!"


@pytest.mark.asyncio
async def test_login_validation_errors_use_errors_envelope(client):
    response = await client.post(f"{BASE}/login", json={"email": "ana@example.com"})

    assert response.status_code == 422
    errors = response.json()["errors"]
    assert errors[0]["loc"] == ["body", "password"]


@pytest.mark.asyncio
async def test_responses_carry_request_id(client):
    response = await client.get(f"{BASE}/me", headers={"X-Request-ID": "abc-123"})

    assert response.headers["X-Request-ID"] == "abc-123"


@pytest.mark.asyncio
async def test_health_reports_database_state(client, monkeypatch):
    from newsletter_api import main

    async def healthy():
        return True

    monkeypatch.setattr(main, "check_database_health", healthy)

    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
