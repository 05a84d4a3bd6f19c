import pytest

from app.core.policy import CommitteeRole


@pytest.mark.asyncio
async def test_query_flow(client, student, make_user):
    _, student_headers = student
    rep, rep_headers = await make_user(
        "rep",
        is_committee=True,
        committee_role=CommitteeRole.Representative,
        committee_post="Representative (IT)",
    )

    created = await client.post("/api/queries/", json={"query": "When is the next meetup?"}, headers=student_headers)
    assert created.status_code == 201
    query_id = created.json()["id"]

    listing = await client.get("/api/queries/", headers=rep_headers)
    assert listing.status_code == 200
    assert len(listing.json()) == 1

    res = await client.put(f"/api/queries/{query_id}/respond", json={"response": "Friday 5pm"}, headers=rep_headers)
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "resolved"
    assert body["assigned_to"] == str(rep.id)
    assert body["resolved_at"] is not None

    mine = await client.get("/api/queries/my", headers=student_headers)
    assert mine.json()[0]["response"] == "Friday 5pm"


@pytest.mark.asyncio
async def test_committee_member_views_but_cannot_respond(client, student, make_user):
    created = (await client.post("/api/queries/", json={"query": "?"}, headers=student[1])).json()
    _, headers = await make_user("treasurer", is_committee=True, committee_post="Treasurer")

    assert (await client.get("/api/queries/", headers=headers)).status_code == 200

    res = await client.put(f"/api/queries/{created['id']}/respond", json={"response": "x"}, headers=headers)
    assert res.status_code == 403


@pytest.mark.asyncio
async def test_student_cannot_view_all(client, student):
    res = await client.get("/api/queries/", headers=student[1])
    assert res.status_code == 403
