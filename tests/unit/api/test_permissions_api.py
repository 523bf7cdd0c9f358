"""Permissions endpoints: privilege managers only, own grants readable by everyone."""

from httpx import AsyncClient


async def test_grant_and_list(async_client: AsyncClient, auth_headers, unit_commander, patrol):
    headers = auth_headers(unit_commander)
    r = await async_client.post(
        f"/permissions/users/{patrol.id}/grants",
        json={"permission": "access_analytics"},
        headers=headers,
    )
    assert r.status_code == 201
    assert r.json()["granted_by"] == unit_commander.id

    own = await async_client.get(f"/permissions/users/{patrol.id}", headers=auth_headers(patrol))
    assert [g["permission"] for g in own.json()] == ["access_analytics"]


async def test_explicit_grant_opens_reviewer_endpoint(
    async_client: AsyncClient, auth_headers, unit_commander, patrol
):
    assert (await async_client.get("/action-reports/", headers=auth_headers(patrol))).status_code == 403
    await async_client.post(
        f"/permissions/users/{patrol.id}/grants",
        json={"permission": "access_action_reports"},
        headers=auth_headers(unit_commander),
    )
    assert (await async_client.get("/action-reports/", headers=auth_headers(patrol))).status_code == 200

    await async_client.delete(
        f"/permissions/users/{patrol.id}/grants/access_action_reports",
        headers=auth_headers(unit_commander),
    )
    assert (await async_client.get("/action-reports/", headers=auth_headers(patrol))).status_code == 403


async def test_grant_requires_privilege(async_client: AsyncClient, auth_headers, reviewer, patrol):
    r = await async_client.post(
        f"/permissions/users/{patrol.id}/grants",
        json={"permission": "access_analytics"},
        headers=auth_headers(reviewer),
    )
    assert r.status_code == 403


async def test_grant_unknown_user(async_client: AsyncClient, auth_headers, developer):
    r = await async_client.post(
        "/permissions/users/nobody/grants",
        json={"permission": "access_analytics"},
        headers=auth_headers(developer),
    )
    assert r.status_code == 404
    assert r.json()["kind"] == "not_found"


async def test_replace_permissions(async_client: AsyncClient, auth_headers, developer, patrol):
    r = await async_client.put(
        f"/permissions/users/{patrol.id}",
        json={"permissions": ["access_analytics", "access_summaries"]},
        headers=auth_headers(developer),
    )
    assert r.status_code == 200
    assert sorted(g["permission"] for g in r.json()) == ["access_analytics", "access_summaries"]


async def test_change_role_and_deactivate(async_client: AsyncClient, auth_headers, unit_commander, patrol):
    headers = auth_headers(unit_commander)
    r = await async_client.put(f"/permissions/users/{patrol.id}/role", json={"role": "מוקדן"}, headers=headers)
    assert r.json() == {"user_id": patrol.id, "role": "מוקדן", "is_active": True}

    r = await async_client.put(f"/permissions/users/{patrol.id}/active", json={"is_active": False}, headers=headers)
    assert r.json()["is_active"] is False
    assert (await async_client.get("/me/permissions", headers=auth_headers(patrol))).status_code == 401


async def test_manageable_roles(async_client: AsyncClient, auth_headers, reviewer):
    r = await async_client.get("/permissions/manageable-roles", headers=auth_headers(reviewer))
    assert r.status_code == 200
    assert r.json() == {
        "current_role": 'מפקד משל"ט',
        "manageable_roles": ["מוקדן", "סייר"],
        "can_modify_privileges": False,
    }


async def test_available_permissions(async_client: AsyncClient, auth_headers, patrol, unit_commander):
    assert (await async_client.get("/permissions/available", headers=auth_headers(patrol))).status_code == 403
    r = await async_client.get("/permissions/available", headers=auth_headers(unit_commander))
    assert "access_action_reports" in {p["key"] for p in r.json()}


async def test_wildcard_grant_is_422(async_client: AsyncClient, auth_headers, unit_commander, patrol):
    headers = auth_headers(unit_commander)
    r = await async_client.post(
        f"/permissions/users/{unit_commander.id}/grants", json={"permission": "*"}, headers=headers
    )
    assert r.status_code == 422
    assert r.json()["kind"] == "validation:permission"

    r = await async_client.put(
        f"/permissions/users/{patrol.id}", json={"permissions": ["*"]}, headers=headers
    )
    assert r.status_code == 422

    me = (await async_client.get("/me/permissions", headers=auth_headers(patrol))).json()
    assert "*" not in me["permissions"]
    assert me["is_super_role"] is False
