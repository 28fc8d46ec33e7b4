import pytest
from sqlalchemy import func, select

from app.models import BusinessResult, SearchRecord, User
from app.services.firebase.firebase_auth import TokenData

from conftest import auth_header

SEARCH_QUERY = {"city": "Springfield", "business_type": "cafe", "radius_km": 5}


@pytest.fixture
async def admin(tokens, make_user):
    user = await make_user(firebase_uid="uid-admin", email="admin@example.com", is_admin=True)
    tokens["admin"] = TokenData(uid="uid-admin", email="admin@example.com")
    return user


@pytest.fixture
async def member(tokens, make_user):
    user = await make_user(firebase_uid="uid-member", email="member@example.com")
    tokens["member"] = TokenData(uid="uid-member", email="member@example.com")
    return user


@pytest.mark.parametrize(
    "method,path",
    [
        ("get", "/api/v1/admin/stats"),
        ("get", "/api/v1/admin/users"),
        ("get", "/api/v1/admin/searches"),
        ("get", "/api/v1/admin/ip-usage"),
        ("post", "/api/v1/admin/users/1/ban"),
    ],
)
async def test_admin_routes_refuse_non_admins(client, member, method, path):
    response = await client.request(method, path, headers=auth_header("member"))

    assert response.status_code == 403
    assert response.json()["error"]["message"] == "Admin access required."


async def test_ban_and_unban(client, admin, member):
    banned = await client.post(
        f"/api/v1/admin/users/{member.id}/ban", headers=auth_header("admin")
    )
    assert banned.status_code == 200
    assert banned.json()["is_banned"] is True

    refused = await client.post(
        "/api/v1/search", json=SEARCH_QUERY, headers=auth_header("member")
    )
    assert refused.status_code == 403

    unbanned = await client.post(
        f"/api/v1/admin/users/{member.id}/unban", headers=auth_header("admin")
    )
    assert unbanned.json()["is_banned"] is False


async def test_update_user_quota_and_flags(client, admin, member):
    response = await client.patch(
        f"/api/v1/admin/users/{member.id}",
        json={"remaining_searches": 10, "is_premium": True},
        headers=auth_header("admin"),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["remaining_searches"] == 10
    assert body["is_premium"] is True
    assert body["is_admin"] is False


async def test_update_rejects_negative_quota(client, admin, member):
    response = await client.patch(
        f"/api/v1/admin/users/{member.id}",
        json={"remaining_searches": -1},
        headers=auth_header("admin"),
    )

    assert response.status_code == 400


async def test_unknown_user_is_not_found(client, admin):
    response = await client.post("/api/v1/admin/users/999/ban", headers=auth_header("admin"))

    assert response.status_code == 404


async def test_list_users_filters(client, admin, member, make_user):
    await make_user(email="banned@example.com", is_banned=True)

    banned = await client.get(
        "/api/v1/admin/users", params={"filter": "banned"}, headers=auth_header("admin")
    )
    admins = await client.get(
        "/api/v1/admin/users", params={"filter": "admin"}, headers=auth_header("admin")
    )
    text = await client.get(
        "/api/v1/admin/users", params={"q": "member"}, headers=auth_header("admin")
    )
    everyone = await client.get("/api/v1/admin/users", headers=auth_header("admin"))

    assert [u["email"] for u in banned.json()["items"]] == ["banned@example.com"]
    assert [u["email"] for u in admins.json()["items"]] == ["admin@example.com"]
    assert [u["email"] for u in text.json()["items"]] == ["member@example.com"]
    assert everyone.json()["pagination"]["total"] == 3


async def test_stats_and_search_history(client, admin, member):
    await client.post("/api/v1/search", json=SEARCH_QUERY, headers=auth_header("member"))

    stats = (await client.get("/api/v1/admin/stats", headers=auth_header("admin"))).json()

    assert stats["total_users"] == 2
    assert stats["active_users"] == 1
    assert stats["banned_users"] == 0
    assert stats["total_searches"] == 1
    assert stats["today_searches"] == 1
    assert stats["top_business_types"] == [{"key": "cafe", "count": 1}]
    assert stats["top_cities"] == [{"key": "Springfield", "count": 1}]
    assert stats["recent_searches"][0]["user_email"] == "member@example.com"

    searches = (await client.get("/api/v1/admin/searches", headers=auth_header("admin"))).json()
    assert len(searches) == 1
    assert searches[0]["user_email"] == "member@example.com"

    results = await client.get(
        f"/api/v1/admin/searches/{searches[0]['id']}/results", headers=auth_header("admin")
    )
    assert [b["name"] for b in results.json()] == ["Near Cafe", "Far Cafe"]


async def test_unknown_search_results_not_found(client, admin):
    response = await client.get(
        "/api/v1/admin/searches/42/results", headers=auth_header("admin")
    )

    assert response.status_code == 404


async def test_delete_user_cascades_to_searches(client, admin, member, session_factory):
    await client.post("/api/v1/search", json=SEARCH_QUERY, headers=auth_header("member"))

    response = await client.delete(
        f"/api/v1/admin/users/{member.id}", headers=auth_header("admin")
    )

    assert response.status_code == 200
    async with session_factory() as session:
        assert await session.get(User, member.id) is None
        for model in (SearchRecord, BusinessResult):
            count = (await session.execute(select(func.count()).select_from(model))).scalar()
            assert count == 0


async def test_ip_usage_block_and_list(client, admin, tokens):
    for name in ("a", "b", "c", "d"):
        tokens[name] = TokenData(uid=f"uid-{name}", email=f"{name}@example.com")
        await client.post(
            "/api/v1/auth/login",
            headers={**auth_header(name), "X-Forwarded-For": "203.0.113.50"},
        )
    await client.post(
        "/api/v1/admin/ip-usage/198.51.100.1/block", headers=auth_header("admin")
    )

    usage = (await client.get("/api/v1/admin/ip-usage", headers=auth_header("admin"))).json()

    assert usage[0]["ip_address"] == "203.0.113.50"
    assert usage[0]["account_count"] == 4
    assert usage[0]["is_suspicious"] is True
    blocked = next(u for u in usage if u["ip_address"] == "198.51.100.1")
    assert blocked["is_blocked"] is True

    unblocked = await client.post(
        "/api/v1/admin/ip-usage/198.51.100.1/unblock", headers=auth_header("admin")
    )
    assert unblocked.json()["is_blocked"] is False
