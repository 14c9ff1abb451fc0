"""
Comment endpoint tests.
"""

import uuid

import pytest

BASE = "/api/v1"


@pytest.fixture
async def thread(make_user, make_project, make_task, make_comment):
    creator = await make_user(first_name="Creator")
    alice = await make_user(first_name="Alice")
    outsider = await make_user(first_name="Outsider")
    project = await make_project(creator, members=[alice])
    task = await make_task(project)
    comment = await make_comment(task, alice, content="First!")
    return {
        "creator": creator,
        "alice": alice,
        "outsider": outsider,
        "task": task,
        "comment": comment,
    }


@pytest.mark.asyncio
async def test_member_comments_on_task(client, thread, auth_headers):
    resp = await client.post(
        f"{BASE}/tasks/{thread['task'].id}/comments",
        json={"content": "Looks good"},
        headers=auth_headers(thread["creator"]),
    )
    assert resp.status_code == 201, resp.text
    data = resp.json()
    assert data["content"] == "Looks good"
    assert data["author_id"] == str(thread["creator"].id)
    assert data["author"]["first_name"] == "Creator"

    resp = await client.get(
        f"{BASE}/tasks/{thread['task'].id}", headers=auth_headers(thread["creator"])
    )
    assert resp.json()["comment_count"] == 2


@pytest.mark.asyncio
async def test_list_comments(client, thread, auth_headers):
    resp = await client.get(
        f"{BASE}/tasks/{thread['task'].id}/comments", headers=auth_headers(thread["alice"])
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["total"] == 1
    assert data["comments"][0]["content"] == "First!"


@pytest.mark.asyncio
async def test_outsider_cannot_read_or_write_comments(client, thread, auth_headers):
    headers = auth_headers(thread["outsider"])
    task_id = thread["task"].id

    resp = await client.get(f"{BASE}/tasks/{task_id}/comments", headers=headers)
    assert resp.status_code == 403
    resp = await client.post(f"{BASE}/tasks/{task_id}/comments", json={"content": "hi"}, headers=headers)
    assert resp.status_code == 403
    resp = await client.get(f"{BASE}/comments/{thread['comment'].id}", headers=headers)
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_comment_on_unknown_task(client, thread, auth_headers):
    resp = await client.post(
        f"{BASE}/tasks/{uuid.uuid4()}/comments",
        json={"content": "hello?"},
        headers=auth_headers(thread["alice"]),
    )
    assert resp.status_code == 404
    assert resp.json()["detail"]["code"] == "TASK_NOT_FOUND"


@pytest.mark.asyncio
async def test_author_edits_comment(client, thread, auth_headers):
    resp = await client.patch(
        f"{BASE}/comments/{thread['comment'].id}",
        json={"content": "Edited"},
        headers=auth_headers(thread["alice"]),
    )
    assert resp.status_code == 200
    assert resp.json()["content"] == "Edited"


@pytest.mark.asyncio
async def test_project_creator_cannot_edit_others_comment(client, thread, auth_headers):
    headers = auth_headers(thread["creator"])
    comment_id = thread["comment"].id

    resp = await client.get(f"{BASE}/comments/{comment_id}", headers=headers)
    assert resp.status_code == 200

    resp = await client.patch(f"{BASE}/comments/{comment_id}", json={"content": "Mine now"}, headers=headers)
    assert resp.status_code == 403
    assert resp.json()["detail"]["message"] == "only the comment author can modify this comment"

    resp = await client.delete(f"{BASE}/comments/{comment_id}", headers=headers)
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_admin_and_author_delete_comments(client, admin, thread, make_comment, auth_headers):
    resp = await client.delete(
        f"{BASE}/comments/{thread['comment'].id}", headers=auth_headers(admin)
    )
    assert resp.status_code == 200

    second = await make_comment(thread["task"], thread["alice"], content="Second")
    resp = await client.delete(f"{BASE}/comments/{second.id}", headers=auth_headers(thread["alice"]))
    assert resp.status_code == 200

    resp = await client.get(
        f"{BASE}/tasks/{thread['task'].id}/comments", headers=auth_headers(admin)
    )
    assert resp.json()["total"] == 0


@pytest.mark.asyncio
async def test_unknown_comment_is_not_found(client, thread, auth_headers):
    resp = await client.patch(
        f"{BASE}/comments/{uuid.uuid4()}",
        json={"content": "?"},
        headers=auth_headers(thread["outsider"]),
    )
    assert resp.status_code == 404
    assert resp.json()["detail"] == {"code": "COMMENT_NOT_FOUND", "message": "Comment not found"}
