import pytest
from unittest.mock import patch

from app.core.policy import CommitteeRole, Role


REQUEST = {"request_type": "lab_access", "subject": "Late lab hours", "description": "Need the lab until 9pm"}


@pytest.fixture
def reviewer(make_user):
    async def _make(committee_role=CommitteeRole.Representative, username="rep"):
        return await make_user(username, is_committee=True, committee_role=committee_role)
    return _make


@pytest.mark.asyncio
async def test_create_requires_all_fields(client, student):
    _, headers = student
    res = await client.post("/api/permissions/", json={**REQUEST, "subject": "   "}, headers=headers)
    assert res.status_code == 422


@pytest.mark.asyncio
async def test_my_requests(client, student, admin):
    _, headers = student
    res = await client.post("/api/permissions/", json=REQUEST, headers=headers)
    assert res.status_code == 201
    assert res.json()["status"] == "pending"

    await client.post("/api/permissions/", json=REQUEST, headers=admin[1])

    mine = await client.get("/api/permissions/my", headers=headers)
    assert len(mine.json()) == 1


@pytest.mark.asyncio
async def test_vice_chair_lists_but_cannot_respond(client, student, reviewer):
    created = (await client.post("/api/permissions/", json=REQUEST, headers=student[1])).json()
    _, headers = await reviewer(CommitteeRole.ViceChair, "vice")

    assert (await client.get("/api/permissions/", headers=headers)).status_code == 200

    res = await client.put(f"/api/permissions/{created['id']}", json={"status": "approved"}, headers=headers)
    assert res.status_code == 403
    assert res.json()["detail"] == {"action": "respond_permission", "reason": "insufficient_committee_role"}


@pytest.mark.asyncio
async def test_student_cannot_list(client, student):
    res = await client.get("/api/permissions/", headers=student[1])
    assert res.status_code == 403


@pytest.mark.asyncio
async def test_respond_records_handler_and_notifies(client, student, reviewer):
    created = (await client.post("/api/permissions/", json=REQUEST, headers=student[1])).json()
    rep, headers = await reviewer()

    with patch("app.api.endpoints.permissions.send_permission_update_email") as mock_send:
        res = await client.put(
            f"/api/permissions/{created['id']}",
            json={"status": "rejected", "response": "Lab closes at 6"},
            headers=headers,
        )

    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "rejected"
    assert body["handled_by"] == str(rep.id)

    mock_send.assert_called_once()
    payload = mock_send.call_args[0][0]
    assert payload["email"] == "student1@example.com"
    assert payload["status"] == "rejected"
    assert payload["response"] == "Lab closes at 6"


@pytest.mark.asyncio
async def test_respond_unknown_request(client, reviewer):
    _, headers = await reviewer()
    res = await client.put(
        "/api/permissions/00000000-0000-0000-0000-000000000000",
        json={"status": "approved"},
        headers=headers,
    )
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_assign_guide_approves(client, student, reviewer, make_user):
    created = (await client.post("/api/permissions/", json=REQUEST, headers=student[1])).json()
    guide, _ = await make_user("iyer", role=Role.Faculty)
    _, headers = await reviewer(CommitteeRole.Chair, "chair")

    with patch("app.api.endpoints.permissions.send_permission_update_email"):
        res = await client.post(
            f"/api/permissions/{created['id']}/assign-guide",
            json={"guide_id": str(guide.id)},
            headers=headers,
        )

    assert res.status_code == 200
    assert res.json()["status"] == "approved"
    assert res.json()["assigned_guide"] == str(guide.id)


@pytest.mark.asyncio
async def test_guide_must_be_faculty(client, student, reviewer):
    user, student_headers = student
    created = (await client.post("/api/permissions/", json=REQUEST, headers=student_headers)).json()
    _, headers = await reviewer()

    res = await client.post(
        f"/api/permissions/{created['id']}/assign-guide",
        json={"guide_id": str(user.id)},
        headers=headers,
    )
    assert res.status_code == 400
