import pytest

from app.core.policy import Role


@pytest.mark.asyncio
async def test_committee_flag_creates_course(client, make_user):
    _, headers = await make_user("member", is_committee=True)
    res = await client.post("/api/courses/", json={"title": "Intro to Arduino", "instructor": "Dr. Iyer"}, headers=headers)
    assert res.status_code == 201

    listing = await client.get("/api/courses/")
    assert [c["title"] for c in listing.json()] == ["Intro to Arduino"]


@pytest.mark.asyncio
async def test_vice_secretary_role_creates_course(client, make_user):
    _, headers = await make_user("vsec", role=Role.ViceSecretary)
    res = await client.post("/api/courses/", json={"title": "Git Basics"}, headers=headers)
    assert res.status_code == 201


@pytest.mark.asyncio
async def test_student_cannot_create_course(client, student):
    _, headers = student
    res = await client.post("/api/courses/", json={"title": "Nope"}, headers=headers)
    assert res.status_code == 403


@pytest.mark.asyncio
async def test_only_admin_deletes_course(client, admin, make_user):
    _, admin_headers = admin
    _, member_headers = await make_user("member", is_committee=True)

    course = (await client.post("/api/courses/", json={"title": "Soldering"}, headers=member_headers)).json()

    assert (await client.delete(f"/api/courses/{course['id']}", headers=member_headers)).status_code == 403
    assert (await client.delete(f"/api/courses/{course['id']}", headers=admin_headers)).status_code == 200
