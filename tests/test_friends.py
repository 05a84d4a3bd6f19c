import pytest
from sqlmodel import select

from app.core.policy import CommitteeRole, Role
from app.models.friendship import Friendship
from app.services.friendship_service import ordered_pair


@pytest.mark.asyncio
async def test_request_accept_and_remove(client, session, student, make_user):
    alice, alice_headers = student
    bob, bob_headers = await make_user("bob")

    res = await client.post("/api/friends/requests", json={"receiver_id": str(bob.id)}, headers=alice_headers)
    assert res.status_code == 201
    request_id = res.json()["id"]

    sent = await client.get("/api/friends/requests/sent", headers=alice_headers)
    received = await client.get("/api/friends/requests/received", headers=bob_headers)
    assert [r["id"] for r in sent.json()] == [request_id]
    assert [r["id"] for r in received.json()] == [request_id]

    # only the receiver may accept
    res = await client.post(f"/api/friends/requests/{request_id}/accept", headers=alice_headers)
    assert res.status_code == 403

    res = await client.post(f"/api/friends/requests/{request_id}/accept", headers=bob_headers)
    assert res.status_code == 200

    user1, user2 = ordered_pair(alice.id, bob.id)
    row = (await session.execute(select(Friendship))).scalar_one()
    assert (row.user1_id, row.user2_id) == (user1, user2)

    friends = await client.get("/api/friends/", headers=alice_headers)
    assert [f["username"] for f in friends.json()] == ["bob"]

    # removing yourself is never a friendship
    res = await client.delete(f"/api/friends/{bob.id}", headers=bob_headers)
    assert res.status_code == 404

    res = await client.delete(f"/api/friends/{alice.id}", headers=bob_headers)
    assert res.status_code == 200
    assert (await client.get("/api/friends/", headers=alice_headers)).json() == []

    res = await client.delete(f"/api/friends/{alice.id}", headers=bob_headers)
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_request_rules(client, student, make_user):
    alice, headers = student
    bob, bob_headers = await make_user("bob")

    res = await client.post("/api/friends/requests", json={"receiver_id": str(alice.id)}, headers=headers)
    assert res.status_code == 400

    await client.post("/api/friends/requests", json={"receiver_id": str(bob.id)}, headers=headers)
    res = await client.post("/api/friends/requests", json={"receiver_id": str(bob.id)}, headers=headers)
    assert res.status_code == 400

    # reverse direction while one is pending
    res = await client.post("/api/friends/requests", json={"receiver_id": str(alice.id)}, headers=bob_headers)
    assert res.status_code == 400

    res = await client.post(
        "/api/friends/requests",
        json={"receiver_id": "00000000-0000-0000-0000-000000000000"},
        headers=headers,
    )
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_reject_request(client, student, make_user):
    alice, headers = student
    bob, bob_headers = await make_user("bob")

    request_id = (await client.post("/api/friends/requests", json={"receiver_id": str(bob.id)}, headers=headers)).json()["id"]

    res = await client.post(f"/api/friends/requests/{request_id}/reject", headers=bob_headers)
    assert res.status_code == 200
    assert res.json()["status"] == "rejected"

    res = await client.post(f"/api/friends/requests/{request_id}/accept", headers=bob_headers)
    assert res.status_code == 400

    # a fresh request is allowed after a rejection
    res = await client.post("/api/friends/requests", json={"receiver_id": str(bob.id)}, headers=headers)
    assert res.status_code == 201


@pytest.mark.asyncio
async def test_directory_excludes_self(client, student, make_user):
    await make_user("bob")
    res = await client.get("/api/friends/directory", headers=student[1])
    assert [u["username"] for u in res.json()] == ["bob"]


@pytest.mark.asyncio
async def test_sync_committee_mesh(client, admin, student, make_user):
    await make_user("chair", is_committee=True, committee_role=CommitteeRole.Chair)
    await make_user("sec", role=Role.Secretary, is_committee=True)

    res = await client.post("/api/friends/sync-committee", headers=student[1])
    assert res.status_code == 403

    res = await client.post("/api/friends/sync-committee", headers=admin[1])
    assert res.status_code == 200
    # admin, chair, sec -> 3 pairs
    assert res.json() == {"created": 3}

    res = await client.post("/api/friends/sync-committee", headers=admin[1])
    assert res.json() == {"created": 0}

    friends = await client.get("/api/friends/", headers=admin[1])
    assert {f["username"] for f in friends.json()} == {"chair", "sec"}
