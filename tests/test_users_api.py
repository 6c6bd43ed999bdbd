"""
HTTP tests for the user endpoints.
"""

from unittest.mock import MagicMock

import pytest

from newsletter_api.models import User
from newsletter_api.services import activity

BASE = "/api/v1/users"


@pytest.fixture
def activity_log(monkeypatch):
    fake_logger = MagicMock()
    monkeypatch.setattr(activity, "activity_logger", fake_logger)
    return fake_logger


# ==================== List / Read ====================


@pytest.mark.asyncio
async def test_regular_caller_list_is_a_single_page_of_itself(client, make_user, auth_headers):
    ana = await make_user("Ana")
    await make_user("Bo")

    response = await client.get(BASE, headers=auth_headers(ana))

    assert response.status_code == 200
    body = response.json()
    assert body["total_items"] == 1
    assert body["total_pages"] == 1
    assert [item["id"] for item in body["items"]] == [ana.id]


@pytest.mark.asyncio
async def test_regular_caller_list_past_first_page_is_empty(client, make_user, auth_headers):
    ana = await make_user("Ana")

    response = await client.get(BASE, params={"page": 1}, headers=auth_headers(ana))

    assert response.status_code == 200
    assert response.json()["items"] == []


@pytest.mark.asyncio
async def test_super_lists_and_filters_users(client, make_user, auth_headers):
    admin = await make_user("Root", is_super=True)
    await make_user("Ana Silva")
    await make_user("Bo")

    everyone = await client.get(BASE, headers=auth_headers(admin))
    filtered = await client.get(BASE, params={"name": "silva"}, headers=auth_headers(admin))

    assert everyone.json()["total_items"] == 3
    assert [item["name"] for item in filtered.json()["items"]] == ["Ana Silva"]


@pytest.mark.asyncio
async def test_list_is_blocked_by_pending_password(client, make_user, auth_headers):
    ana = await make_user("Ana", pending_password=True)

    response = await client.get(BASE, headers=auth_headers(ana))

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_user_listing_never_exposes_password_hash(client, make_user, auth_headers):
    admin = await make_user("Root", is_super=True)

    response = await client.get(f"{BASE}/{admin.id}", headers=auth_headers(admin))

    assert response.status_code == 200
    assert "hashed_password" not in response.json()
    assert "password" not in response.json()


@pytest.mark.asyncio
async def test_regular_caller_reads_itself_only(client, make_user, auth_headers):
    ana = await make_user("Ana")
    bo = await make_user("Bo")

    own = await client.get(f"{BASE}/{ana.id}", headers=auth_headers(ana))
    other = await client.get(f"{BASE}/{bo.id}", headers=auth_headers(ana))

    assert own.status_code == 200
    assert own.json()["name"] == "Ana"
    assert other.status_code == 403


@pytest.mark.asyncio
async def test_regular_caller_reading_itself_with_pending_password_is_forbidden(client, make_user, auth_headers):
    ana = await make_user("Ana", pending_password=True)

    response = await client.get(f"{BASE}/{ana.id}", headers=auth_headers(ana))

    assert response.status_code == 403
    assert "change your password" in response.json()["detail"]


@pytest.mark.asyncio
async def test_super_read_of_missing_user_is_not_found(client, make_user, auth_headers):
    admin = await make_user(is_super=True)

    response = await client.get(f"{BASE}/999", headers=auth_headers(admin))

    assert response.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize("method, suffix", [("GET", ""), ("PUT", ""), ("DELETE", ""), ("PATCH", "/promote")])
async def test_user_id_beyond_integer_range_is_not_found(client, make_user, auth_headers, method, suffix):
    admin = await make_user(is_super=True)
    kwargs = {"json": {"name": "Ghost"}} if method == "PUT" else {}

    response = await client.request(
        method, f"{BASE}/99999999999999999999{suffix}", headers=auth_headers(admin), **kwargs
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_user_list_rejects_page_beyond_integer_range(client, make_user, auth_headers):
    admin = await make_user(is_super=True)

    response = await client.get(BASE, params={"page": 10**19}, headers=auth_headers(admin))

    assert response.status_code == 422


# ==================== Create ====================


@pytest.mark.asyncio
async def test_regular_caller_cannot_create_users(client, make_user, auth_headers):
    ana = await make_user("Ana")

    response = await client.post(
        BASE,
        json={"name": "New", "email": "new@example.com", "password": "secret123"},
        headers=auth_headers(ana),
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_super_creates_user_with_pending_flags(client, make_user, auth_headers, activity_log):
    admin = await make_user("Root", is_super=True)

    response = await client.post(
        BASE,
        json={"name": "Carla", "email": "Carla@Example.com", "password": "secret123", "is_super": True},
        headers=auth_headers(admin),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "carla@example.com"
    assert body["is_super"] is True
    assert body["pending_confirm"] is True
    assert body["pending_password"] is True
    activity_log.info.assert_called_once_with(
        f'User #{body["id"]} "Carla" was created.',
        logged_user={"id": admin.id, "name": "Root"},
    )


@pytest.mark.asyncio
async def test_create_with_taken_email_conflicts(client, make_user, auth_headers):
    admin = await make_user("Root", is_super=True)
    ana = await make_user("Ana")

    response = await client.post(
        BASE,
        json={"name": "Copy", "email": ana.email, "password": "secret123"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 409


# ==================== Edit ====================


@pytest.mark.asyncio
async def test_regular_caller_edits_itself(client, make_user, auth_headers, fetch):
    ana = await make_user("Ana")

    response = await client.put(
        f"{BASE}/{ana.id}",
        json={"name": "Ana Maria", "pending_confirm": True},
        headers=auth_headers(ana),
    )

    assert response.status_code == 200
    assert response.json()["name"] == "Ana Maria"
    stored = await fetch(User, ana.id)
    assert stored.pending_confirm is False


@pytest.mark.asyncio
async def test_regular_caller_cannot_edit_others(client, make_user, auth_headers):
    ana = await make_user("Ana")
    bo = await make_user("Bo")

    response = await client.put(f"{BASE}/{bo.id}", json={"name": "Hacked"}, headers=auth_headers(ana))

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_super_confirms_another_super(client, make_user, auth_headers):
    admin = await make_user("Root", is_super=True)
    pending = await make_user("Newbie", is_super=True, pending_confirm=True)

    response = await client.put(
        f"{BASE}/{pending.id}",
        json={"pending_confirm": False},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    assert response.json()["pending_confirm"] is False
    assert response.json()["name"] == "Newbie"


@pytest.mark.asyncio
async def test_super_edit_of_missing_user_is_not_found(client, make_user, auth_headers):
    admin = await make_user(is_super=True)

    response = await client.put(f"{BASE}/999", json={"name": "Ghost"}, headers=auth_headers(admin))

    assert response.status_code == 404


# ==================== Remove ====================


@pytest.mark.asyncio
async def test_super_removes_another_user(client, make_user, auth_headers, fetch, activity_log):
    admin = await make_user("Root", is_super=True)
    ana = await make_user("Ana")

    response = await client.delete(f"{BASE}/{ana.id}", headers=auth_headers(admin))

    assert response.status_code == 204
    assert (await fetch(User, ana.id)).is_deleted is True
    activity_log.info.assert_called_once_with(
        f'User #{ana.id} "Ana" was removed.',
        logged_user={"id": admin.id, "name": "Root"},
    )


@pytest.mark.asyncio
async def test_regular_caller_removes_itself(client, make_user, auth_headers, fetch, activity_log):
    ana = await make_user("Ana")

    response = await client.delete(f"{BASE}/{ana.id}", headers=auth_headers(ana))

    assert response.status_code == 204
    assert (await fetch(User, ana.id)).is_deleted is True
    activity_log.info.assert_called_once()


@pytest.mark.asyncio
async def test_removed_caller_token_is_rejected(client, make_user, auth_headers):
    ana = await make_user("Ana")
    headers = auth_headers(ana)

    await client.delete(f"{BASE}/{ana.id}", headers=headers)
    response = await client.get(f"{BASE}/{ana.id}", headers=headers)

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_regular_caller_cannot_remove_others(client, make_user, auth_headers, fetch):
    ana = await make_user("Ana")
    bo = await make_user("Bo")

    response = await client.delete(f"{BASE}/{bo.id}", headers=auth_headers(ana))

    assert response.status_code == 403
    assert (await fetch(User, bo.id)).is_deleted is False


@pytest.mark.asyncio
async def test_regular_caller_with_pending_password_cannot_remove_itself(client, make_user, auth_headers):
    ana = await make_user("Ana", pending_password=True)

    response = await client.delete(f"{BASE}/{ana.id}", headers=auth_headers(ana))

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_super_with_pending_password_can_remove_others(client, make_user, auth_headers, fetch):
    admin = await make_user("Root", is_super=True, pending_password=True)
    ana = await make_user("Ana")

    response = await client.delete(f"{BASE}/{ana.id}", headers=auth_headers(admin))

    assert response.status_code == 204
    assert (await fetch(User, ana.id)).is_deleted is True


@pytest.mark.asyncio
async def test_super_with_pending_password_cannot_remove_itself(client, make_user, auth_headers, fetch):
    admin = await make_user("Root", is_super=True, pending_password=True)

    response = await client.delete(f"{BASE}/{admin.id}", headers=auth_headers(admin))

    assert response.status_code == 403
    assert (await fetch(User, admin.id)).is_deleted is False


@pytest.mark.asyncio
async def test_super_remove_of_missing_user_is_not_found(client, make_user, auth_headers):
    admin = await make_user(is_super=True)

    response = await client.delete(f"{BASE}/999", headers=auth_headers(admin))

    assert response.status_code == 404


# ==================== Promote ====================


@pytest.mark.asyncio
async def test_super_promotes_regular_user(client, make_user, auth_headers, activity_log):
    admin = await make_user("Root", is_super=True)
    ana = await make_user("Ana")

    response = await client.patch(f"{BASE}/{ana.id}/promote", headers=auth_headers(admin))

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "User was promoted successfully"
    assert body["user"]["is_super"] is True
    assert body["user"]["pending_confirm"] is True
    activity_log.info.assert_called_once_with(
        f'User #{ana.id} "Ana" was promoted.',
        logged_user={"id": admin.id, "name": "Root"},
    )


@pytest.mark.asyncio
async def test_super_cannot_promote_itself(client, make_user, auth_headers):
    admin = await make_user(is_super=True)

    response = await client.patch(f"{BASE}/{admin.id}/promote", headers=auth_headers(admin))

    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.parametrize("pending_confirm", [False, True])
async def test_non_super_cannot_promote(client, make_user, auth_headers, pending_confirm):
    caller = await make_user("Caller", is_super=pending_confirm, pending_confirm=pending_confirm)
    ana = await make_user("Ana")

    response = await client.patch(f"{BASE}/{ana.id}/promote", headers=auth_headers(caller))

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_promote_missing_user_is_not_found(client, make_user, auth_headers):
    admin = await make_user(is_super=True)

    response = await client.patch(f"{BASE}/999/promote", headers=auth_headers(admin))

    assert response.status_code == 404
