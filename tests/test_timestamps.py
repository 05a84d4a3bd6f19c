import pytest
from datetime import timezone

from app.models.announcement import Announcement
from app.models.messaging import Message
from app.models.query import MemberQuery
from app.schemas.event import EventCreate, EventUpdate


def test_default_timestamps_are_timezone_aware():
    announcement = Announcement(title="Welcome", content="Hello members")
    assert announcement.created_at.tzinfo is not None
    assert announcement.created_at.utcoffset().total_seconds() == 0


def test_naive_event_date_is_taken_as_utc():
    created = EventCreate(title="Hackathon", event_date="2030-03-01T10:00:00")
    assert created.event_date.tzinfo == timezone.utc

    updated = EventUpdate(event_date="2030-03-01T10:00:00+05:30")
    assert updated.event_date.utcoffset().total_seconds() == 5.5 * 3600


@pytest.mark.asyncio
async def test_rows_with_timestamps_persist(client, session, admin, student):
    _, headers = student

    res = await client.post("/api/queries/", json={"query": "When does the lab open?"}, headers=headers)
    assert res.status_code == 201

    res = await client.post(
        "/api/events/",
        json={"title": "Robotics Workshop", "event_date": "2030-03-01T10:00:00"},
        headers=admin[1],
    )
    assert res.status_code == 201
    assert res.json()["event_date"].startswith("2030-03-01T10:00:00")

    query_id = (await client.get("/api/queries/my", headers=headers)).json()[0]["id"]
    res = await client.put(f"/api/queries/{query_id}/respond", json={"response": "9am"}, headers=admin[1])
    assert res.status_code == 200
    assert res.json()["resolved_at"] is not None

    rows = (await session.execute(MemberQuery.__table__.select())).all()
    assert len(rows) == 1
    assert Message.__table__.c.created_at.type.timezone is True
