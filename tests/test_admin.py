import pytest
from datetime import date
from unittest.mock import patch

from app.services.user_service import build_faculty_username, build_student_username


def test_student_username_is_surname_plus_dob():
    assert build_student_username(" Rao ", date(2004, 2, 1)) == "rao010204"


def test_faculty_username_is_email():
    assert build_faculty_username("Prof.Iyer@Example.com ") == "prof.iyer@example.com"


@pytest.mark.asyncio
async def test_dashboard_stats(client, admin, student):
    _, headers = admin
    res = await client.get("/api/admin/dashboard-stats", headers=headers)
    assert res.status_code == 200
    body = res.json()
    assert body["total_users"] == 2
    assert body["students"] == 1
    assert body["total_courses"] == 0


@pytest.mark.asyncio
async def test_dashboard_stats_forbidden_for_students(client, student):
    _, headers = student
    res = await client.get("/api/admin/dashboard-stats", headers=headers)
    assert res.status_code == 403


@pytest.mark.asyncio
async def test_add_student_sends_welcome_email(client, admin):
    _, headers = admin
    payload = {
        "surname": "Rao",
        "full_name": "Asha Rao",
        "dob": "2004-02-01",
        "email": "asha@example.com",
        "department": "ECE",
        "year": 1,
        "password": "password123",
    }
    with patch("app.api.endpoints.admin.send_welcome_email") as mock_send:
        res = await client.post("/api/admin/students", json=payload, headers=headers)

    assert res.status_code == 201
    assert res.json()["username"] == "rao010204"
    assert res.json()["role"] == "student"
    mock_send.assert_called_once()
    assert mock_send.call_args[0][0]["email"] == "asha@example.com"

    login = await client.post("/api/auth/login", json={"username": "rao010204", "password": "password123"})
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_add_student_duplicate(client, admin):
    _, headers = admin
    payload = {"surname": "Rao", "dob": "2004-02-01", "department": "ECE", "password": "password123"}
    with patch("app.api.endpoints.admin.send_welcome_email"):
        first = await client.post("/api/admin/students", json=payload, headers=headers)
        second = await client.post("/api/admin/students", json=payload, headers=headers)
    assert first.status_code == 201
    assert second.status_code == 400


@pytest.mark.asyncio
async def test_add_faculty(client, admin):
    _, headers = admin
    payload = {"full_name": "Dr. Iyer", "email": "iyer@example.com", "password": "password123"}
    with patch("app.api.endpoints.admin.send_welcome_email"):
        res = await client.post("/api/admin/faculty", json=payload, headers=headers)
    assert res.status_code == 201
    assert res.json()["username"] == "iyer@example.com"
    assert res.json()["role"] == "faculty"


@pytest.mark.asyncio
async def test_reset_password(client, admin, student):
    _, headers = admin
    res = await client.post(
        "/api/admin/reset-password",
        json={"username": "student1", "new_password": "reset789"},
        headers=headers,
    )
    assert res.status_code == 200

    login = await client.post("/api/auth/login", json={"username": "student1", "password": "reset789"})
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_reset_password_unknown_user(client, admin):
    _, headers = admin
    res = await client.post(
        "/api/admin/reset-password",
        json={"username": "ghost", "new_password": "reset789"},
        headers=headers,
    )
    assert res.status_code == 404
