"""
User account endpoint tests.
"""

import uuid

import pytest

BASE = "/api/v1"


@pytest.mark.asyncio
async def test_get_me(client, make_user, auth_headers):
    alice = await make_user(first_name="Alice")
    resp = await client.get(f"{BASE}/users/me", headers=auth_headers(alice))
    assert resp.status_code == 200
    data = resp.json()
    assert data["id"] == str(alice.id)
    assert data["role"] == "member"


@pytest.mark.asyncio
async def test_directory_is_admin_only(client, admin, make_user, auth_headers):
    alice = await make_user()

    resp = await client.get(f"{BASE}/users", headers=auth_headers(alice))
    assert resp.status_code == 403

    resp = await client.get(f"{BASE}/users", headers=auth_headers(admin))
    assert resp.status_code == 200
    assert resp.json()["total"] == 2


@pytest.mark.asyncio
async def test_read_other_user(client, admin, make_user, auth_headers):
    alice = await make_user()
    bob = await make_user()

    resp = await client.get(f"{BASE}/users/{bob.id}", headers=auth_headers(alice))
    assert resp.status_code == 403
    assert resp.json()["detail"]["message"] == "can only access your own account"

    resp = await client.get(f"{BASE}/users/{bob.id}", headers=auth_headers(admin))
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_unknown_user_is_not_found(client, make_user, auth_headers):
    alice = await make_user()
    resp = await client.get(f"{BASE}/users/{uuid.uuid4()}", headers=auth_headers(alice))
    assert resp.status_code == 404
    assert resp.json()["detail"]["code"] == "USER_NOT_FOUND"


@pytest.mark.asyncio
async def test_update_self(client, make_user, auth_headers):
    alice = await make_user()
    resp = await client.patch(
        f"{BASE}/users/{alice.id}",
        json={"first_name": "Alicia", "email": "alicia@example.com"},
        headers=auth_headers(alice),
    )
    assert resp.status_code == 200
    assert resp.json()["first_name"] == "Alicia"
    assert resp.json()["email"] == "alicia@example.com"


@pytest.mark.asyncio
async def test_update_cannot_change_role(client, make_user, auth_headers):
    alice = await make_user()
    resp = await client.patch(
        f"{BASE}/users/{alice.id}", json={"role": "admin"}, headers=auth_headers(alice)
    )
    assert resp.status_code == 200
    assert resp.json()["role"] == "member"


@pytest.mark.asyncio
async def test_update_email_conflict(client, make_user, auth_headers):
    alice = await make_user()
    bob = await make_user()
    resp = await client.patch(
        f"{BASE}/users/{alice.id}", json={"email": bob.email}, headers=auth_headers(alice)
    )
    assert resp.status_code == 409
    assert resp.json()["detail"]["code"] == "EMAIL_TAKEN"


@pytest.mark.asyncio
async def test_member_cannot_update_others(client, make_user, auth_headers):
    alice = await make_user()
    bob = await make_user()
    resp = await client.patch(
        f"{BASE}/users/{bob.id}", json={"first_name": "Hacked"}, headers=auth_headers(alice)
    )
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_promote_is_admin_only(client, admin, make_user, auth_headers):
    alice = await make_user()

    resp = await client.post(f"{BASE}/users/{alice.id}/promote", headers=auth_headers(alice))
    assert resp.status_code == 403

    for _ in range(2):
        resp = await client.post(f"{BASE}/users/{alice.id}/promote", headers=auth_headers(admin))
        assert resp.status_code == 200
        assert resp.json()["role"] == "admin"

    resp = await client.get(f"{BASE}/users", headers=auth_headers(alice))
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_delete_user(client, admin, make_user, make_project, make_task, auth_headers):
    alice = await make_user()
    bob = await make_user()
    project = await make_project(bob, members=[alice])
    task = await make_task(project, assignee=alice)

    resp = await client.delete(f"{BASE}/users/{bob.id}", headers=auth_headers(alice))
    assert resp.status_code == 403

    resp = await client.delete(f"{BASE}/users/{alice.id}", headers=auth_headers(admin))
    assert resp.status_code == 200

    resp = await client.get(f"{BASE}/tasks/{task.id}", headers=auth_headers(bob))
    assert resp.status_code == 200
    assert resp.json()["assignee_id"] is None

    resp = await client.get(f"{BASE}/projects/{project.id}/members", headers=auth_headers(bob))
    assert resp.json()["members"] == []

    resp = await client.get(f"{BASE}/users/me", headers=auth_headers(alice))
    assert resp.status_code == 401
    assert resp.json()["detail"]["code"] == "USER_NOT_FOUND"


@pytest.mark.asyncio
async def test_user_related_listings(
    client, admin, make_user, make_project, make_task, make_comment, auth_headers
):
    alice = await make_user()
    bob = await make_user()
    created = await make_project(alice)
    joined = await make_project(bob, members=[alice])
    await make_project(bob)
    task = await make_task(joined, assignee=alice)
    await make_task(joined)
    await make_comment(task, alice)
    await make_comment(task, bob)

    headers = auth_headers(alice)
    resp = await client.get(f"{BASE}/users/{alice.id}/projects", headers=headers)
    assert resp.status_code == 200
    assert {p["id"] for p in resp.json()["projects"]} == {str(created.id), str(joined.id)}

    resp = await client.get(f"{BASE}/users/{alice.id}/tasks", headers=headers)
    assert [t["id"] for t in resp.json()["tasks"]] == [str(task.id)]

    resp = await client.get(f"{BASE}/users/{alice.id}/comments", headers=headers)
    assert resp.json()["total"] == 1

    resp = await client.get(f"{BASE}/users/{bob.id}/projects", headers=headers)
    assert resp.status_code == 403

    resp = await client.get(f"{BASE}/users/{alice.id}/tasks", headers=auth_headers(admin))
    assert resp.status_code == 200
