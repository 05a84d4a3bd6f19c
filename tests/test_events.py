import pytest

from app.core.policy import Role


EVENT = {"title": "Robotics Workshop", "location": "Lab 3", "event_date": "2030-03-01T10:00:00"}


@pytest.mark.asyncio
async def test_event_lifecycle(client, make_user):
    _, exec_headers = await make_user("exec", role=Role.ExecutiveHead)
    _, chair_headers = await make_user("chair", role=Role.CommitteeChair)

    created = await client.post("/api/events/", json=EVENT, headers=exec_headers)
    assert created.status_code == 201
    event = created.json()
    assert event["approved_by_chair"] is False
    assert event["status"] == "pending"

    # Executive head cannot approve their own event
    res = await client.post(f"/api/events/{event['id']}/approve", headers=exec_headers)
    assert res.status_code == 403

    res = await client.post(f"/api/events/{event['id']}/approve", headers=chair_headers)
    assert res.status_code == 200
    assert res.json()["approved_by_chair"] is True
    assert res.json()["status"] == "upcoming"

    res = await client.post(f"/api/events/{event['id']}/approve", headers=chair_headers)
    assert res.status_code == 400


@pytest.mark.asyncio
async def test_committee_member_updates_event(client, admin, make_user):
    _, admin_headers = admin
    _, member_headers = await make_user("member", is_committee=True)

    event = (await client.post("/api/events/", json=EVENT, headers=admin_headers)).json()

    res = await client.put(f"/api/events/{event['id']}", json={"location": "Auditorium"}, headers=member_headers)
    assert res.status_code == 200
    assert res.json()["location"] == "Auditorium"
    assert res.json()["title"] == EVENT["title"]

    res = await client.delete(f"/api/events/{event['id']}", headers=member_headers)
    assert res.status_code == 403


@pytest.mark.asyncio
async def test_student_cannot_create_event(client, student):
    _, headers = student
    res = await client.post("/api/events/", json=EVENT, headers=headers)
    assert res.status_code == 403


@pytest.mark.asyncio
async def test_list_and_get_are_public(client, admin):
    _, headers = admin
    event = (await client.post("/api/events/", json=EVENT, headers=headers)).json()

    assert (await client.get("/api/events/")).status_code == 200
    res = await client.get(f"/api/events/{event['id']}")
    assert res.status_code == 200
    assert res.json()["title"] == EVENT["title"]

    missing = await client.get("/api/events/00000000-0000-0000-0000-000000000000")
    assert missing.status_code == 404
