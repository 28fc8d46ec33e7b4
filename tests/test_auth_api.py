from sqlalchemy import select

from app.models import IPUsageRecord, User
from app.services.abuse_prevention import abuse_prevention_service
from app.services.firebase.firebase_auth import TokenData

from conftest import auth_header


async def test_first_login_provisions_trial_user(client, tokens, session_factory):
    tokens["alice"] = TokenData(uid="uid-alice", email="alice@example.com", name="Alice")

    response = await client.post(
        "/api/v1/auth/login",
        headers={**auth_header("alice"), "X-Forwarded-For": "203.0.113.7, 10.0.0.1"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["is_new_user"] is True
    assert body["user"]["email"] == "alice@example.com"
    assert body["user"]["remaining_searches"] == 3

    async with session_factory() as session:
        user = (await session.execute(select(User))).scalar_one()
        usage = (await session.execute(select(IPUsageRecord))).scalar_one()
    assert user.registration_ip == "203.0.113.7"
    assert usage.ip_address == "203.0.113.7"
    assert usage.account_count == 1


async def test_second_login_is_not_new(client, tokens, make_user):
    await make_user(firebase_uid="uid-bob", email="bob@example.com")
    tokens["bob"] = TokenData(uid="uid-bob", email="bob@example.com")

    response = await client.post("/api/v1/auth/login", headers=auth_header("bob"))

    assert response.status_code == 200
    assert response.json()["is_new_user"] is False


async def test_banned_user_cannot_log_in(client, tokens, make_user):
    await make_user(firebase_uid="uid-eve", email="eve@example.com", is_banned=True)
    tokens["eve"] = TokenData(uid="uid-eve", email="eve@example.com")

    response = await client.post("/api/v1/auth/login", headers=auth_header("eve"))

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "PERMISSION_DENIED"


async def test_blocked_address_cannot_create_accounts(client, tokens, session_factory):
    async with session_factory() as session:
        await abuse_prevention_service.set_blocked("198.51.100.9", True, session)
    tokens["mallory"] = TokenData(uid="uid-mallory", email="mallory@example.com")

    response = await client.post(
        "/api/v1/auth/login",
        headers={**auth_header("mallory"), "X-Forwarded-For": "198.51.100.9"},
    )

    assert response.status_code == 403
    async with session_factory() as session:
        assert (await session.execute(select(User))).first() is None


async def test_missing_token_is_unauthenticated(client):
    response = await client.get("/api/v1/auth/me")

    assert response.status_code == 401
    assert response.json() == {
        "error": {"code": "UNAUTHENTICATED", "message": "User must be authenticated."}
    }


async def test_unregistered_identity_is_not_found(client, tokens):
    tokens["ghost"] = TokenData(uid="uid-ghost", email="ghost@example.com")

    response = await client.get("/api/v1/auth/me", headers=auth_header("ghost"))

    assert response.status_code == 404


async def test_delete_own_account(client, tokens, make_user, no_firebase_admin, session_factory):
    user = await make_user(firebase_uid="uid-carol", email="carol@example.com")
    tokens["carol"] = TokenData(uid="uid-carol", email="carol@example.com")

    response = await client.delete("/api/v1/users/me", headers=auth_header("carol"))

    assert response.status_code == 200
    assert no_firebase_admin == ["uid-carol"]
    async with session_factory() as session:
        assert await session.get(User, user.id) is None
