"""
Project endpoint tests.

Verifies that:
- Only admins create, update, delete projects and manage members
- Project listing is scoped to created or joined projects
- Unknown projects report 404 before any permission check
- Membership changes take effect on the next request
"""

import uuid

import pytest

BASE = "/api/v1"


@pytest.mark.asyncio
async def test_admin_creates_project_with_members(client, admin, make_user, auth_headers):
    alice = await make_user()
    resp = await client.post(
        f"{BASE}/projects",
        json={"name": "Apollo", "description": "Moonshot", "member_ids": [str(alice.id)]},
        headers=auth_headers(admin),
    )
    assert resp.status_code == 201, resp.text
    data = resp.json()
    assert data["name"] == "Apollo"
    assert data["created_by"] == str(admin.id)
    assert data["creator"]["id"] == str(admin.id)
    assert [m["id"] for m in data["members"]] == [str(alice.id)]
    assert data["task_count"] == 0


@pytest.mark.asyncio
async def test_member_cannot_create_project(client, make_user, auth_headers):
    alice = await make_user()
    resp = await client.post(
        f"{BASE}/projects", json={"name": "Nope"}, headers=auth_headers(alice)
    )
    assert resp.status_code == 403
    assert resp.json()["detail"]["code"] == "FORBIDDEN"
    assert resp.json()["detail"]["message"] == "admin role required"


@pytest.mark.asyncio
async def test_create_project_with_unknown_member(client, admin, auth_headers):
    resp = await client.post(
        f"{BASE}/projects",
        json={"name": "Apollo", "member_ids": [str(uuid.uuid4())]},
        headers=auth_headers(admin),
    )
    assert resp.status_code == 404
    assert resp.json()["detail"]["code"] == "USER_NOT_FOUND"


@pytest.mark.asyncio
async def test_list_projects_is_scoped(client, admin, make_user, make_project, auth_headers):
    alice = await make_user()
    bob = await make_user()
    created = await make_project(alice, name="created")
    joined = await make_project(bob, members=[alice], name="joined")
    await make_project(bob, name="foreign")

    resp = await client.get(f"{BASE}/projects", headers=auth_headers(alice))
    assert resp.status_code == 200
    ids = {p["id"] for p in resp.json()["projects"]}
    assert ids == {str(created.id), str(joined.id)}

    resp = await client.get(f"{BASE}/projects", headers=auth_headers(admin))
    assert resp.json()["total"] == 3


@pytest.mark.asyncio
async def test_get_project_access(client, make_user, make_project, make_task, auth_headers):
    creator = await make_user()
    alice = await make_user()
    outsider = await make_user()
    project = await make_project(creator, members=[alice])
    await make_task(project)

    for user in (creator, alice):
        resp = await client.get(f"{BASE}/projects/{project.id}", headers=auth_headers(user))
        assert resp.status_code == 200
        assert resp.json()["task_count"] == 1

    resp = await client.get(f"{BASE}/projects/{project.id}", headers=auth_headers(outsider))
    assert resp.status_code == 403
    assert resp.json()["detail"]["message"] == "not a project member"


@pytest.mark.asyncio
async def test_unknown_project_is_not_found_for_everyone(client, admin, make_user, auth_headers):
    outsider = await make_user()
    for user in (admin, outsider):
        resp = await client.get(f"{BASE}/projects/{uuid.uuid4()}", headers=auth_headers(user))
        assert resp.status_code == 404
        assert resp.json()["detail"] == {
            "code": "PROJECT_NOT_FOUND",
            "message": "Project not found",
        }


@pytest.mark.asyncio
async def test_creator_cannot_update_project(client, admin, make_user, make_project, auth_headers):
    creator = await make_user()
    project = await make_project(creator)

    resp = await client.patch(
        f"{BASE}/projects/{project.id}", json={"name": "Renamed"}, headers=auth_headers(creator)
    )
    assert resp.status_code == 403

    resp = await client.patch(
        f"{BASE}/projects/{project.id}",
        json={"name": "Renamed", "description": None},
        headers=auth_headers(admin),
    )
    assert resp.status_code == 200
    assert resp.json()["name"] == "Renamed"
    assert resp.json()["description"] is None


@pytest.mark.asyncio
async def test_delete_project_cascades(
    client, admin, make_user, make_project, make_task, make_comment, auth_headers
):
    creator = await make_user()
    project = await make_project(creator)
    task = await make_task(project)
    comment = await make_comment(task, creator)

    resp = await client.delete(f"{BASE}/projects/{project.id}", headers=auth_headers(creator))
    assert resp.status_code == 403

    resp = await client.delete(f"{BASE}/projects/{project.id}", headers=auth_headers(admin))
    assert resp.status_code == 200

    for path, code in (
        (f"/projects/{project.id}", "PROJECT_NOT_FOUND"),
        (f"/tasks/{task.id}", "TASK_NOT_FOUND"),
        (f"/comments/{comment.id}", "COMMENT_NOT_FOUND"),
    ):
        resp = await client.get(f"{BASE}{path}", headers=auth_headers(admin))
        assert resp.status_code == 404
        assert resp.json()["detail"]["code"] == code


@pytest.mark.asyncio
async def test_manage_members(client, admin, make_user, make_project, auth_headers):
    creator = await make_user()
    alice = await make_user()
    project = await make_project(creator)

    resp = await client.post(
        f"{BASE}/projects/{project.id}/members",
        json={"user_ids": [str(alice.id)]},
        headers=auth_headers(creator),
    )
    assert resp.status_code == 403

    for _ in range(2):
        resp = await client.post(
            f"{BASE}/projects/{project.id}/members",
            json={"user_ids": [str(alice.id)]},
            headers=auth_headers(admin),
        )
        assert resp.status_code == 200
        assert [m["id"] for m in resp.json()["members"]] == [str(alice.id)]

    resp = await client.get(f"{BASE}/projects/{project.id}", headers=auth_headers(alice))
    assert resp.status_code == 200

    resp = await client.get(f"{BASE}/projects/{project.id}/members", headers=auth_headers(alice))
    assert resp.status_code == 200
    assert resp.json()["creator"]["id"] == str(creator.id)
    assert resp.json()["total"] == 1

    resp = await client.delete(
        f"{BASE}/projects/{project.id}/members/{alice.id}", headers=auth_headers(admin)
    )
    assert resp.status_code == 200
    assert resp.json()["members"] == []

    resp = await client.get(f"{BASE}/projects/{project.id}", headers=auth_headers(alice))
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_remove_non_member_is_noop(client, admin, make_user, make_project, auth_headers):
    creator = await make_user()
    bystander = await make_user()
    project = await make_project(creator)

    resp = await client.delete(
        f"{BASE}/projects/{project.id}/members/{bystander.id}", headers=auth_headers(admin)
    )
    assert resp.status_code == 200
    assert resp.json()["total"] == 0


@pytest.mark.asyncio
async def test_add_unknown_member(client, admin, make_user, make_project, auth_headers):
    project = await make_project(await make_user())
    resp = await client.post(
        f"{BASE}/projects/{project.id}/members",
        json={"user_ids": [str(uuid.uuid4())]},
        headers=auth_headers(admin),
    )
    assert resp.status_code == 404
    assert resp.json()["detail"]["code"] == "USER_NOT_FOUND"


@pytest.mark.asyncio
async def test_requests_without_token_are_rejected(client):
    resp = await client.get(f"{BASE}/projects")
    assert resp.status_code == 401
    assert resp.json()["detail"]["code"] == "MISSING_TOKEN"

    resp = await client.get(f"{BASE}/projects", headers={"Authorization": "Bearer garbage"})
    assert resp.status_code == 401
    assert resp.json()["detail"]["code"] == "INVALID_TOKEN"
