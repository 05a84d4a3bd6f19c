import pytest


@pytest.mark.asyncio
async def test_change_password(client, student):
    _, headers = student
    res = await client.post(
        "/api/account/change-password",
        json={"old_password": "password123", "new_password": "newpass456"},
        headers=headers,
    )
    assert res.status_code == 200

    login = await client.post("/api/auth/login", json={"username": "student1", "password": "newpass456"})
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_change_password_wrong_old(client, student):
    _, headers = student
    res = await client.post(
        "/api/account/change-password",
        json={"old_password": "wrong", "new_password": "newpass456"},
        headers=headers,
    )
    assert res.status_code == 400
    assert res.json()["detail"] == "Old password incorrect"


@pytest.mark.asyncio
async def test_change_password_same_as_old(client, student):
    _, headers = student
    res = await client.post(
        "/api/account/change-password",
        json={"old_password": "password123", "new_password": "password123"},
        headers=headers,
    )
    assert res.status_code == 400


@pytest.mark.asyncio
async def test_change_password_requires_auth(client):
    res = await client.post(
        "/api/account/change-password",
        json={"old_password": "a", "new_password": "b"},
    )
    assert res.status_code == 401
