from __future__ import annotations

from council.core.config import get_settings
from council.models import AgendaItem, Meeting, MeetingParticipant, MeetingType


def _create_meeting(client, headers, **overrides) -> dict:
    payload = {"title": "Conseil de juin", "date": "2024-06-12T09:00:00Z", **overrides}
    response = client.post("/api/meetings", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_meeting_adds_opening_agenda_item(client, admin_headers) -> None:
    meeting = _create_meeting(client, admin_headers)

    assert meeting["status"] == "draft"
    agenda = client.get(f"/api/meetings/{meeting['id']}/agenda", headers=admin_headers).json()
    assert len(agenda) == 1
    opening = agenda[0]
    settings = get_settings()
    assert opening["title"] == settings.default_opening_item_title
    assert opening["duration"] == settings.default_opening_item_duration
    assert opening["type"] == "procedural"
    assert opening["order_index"] == 0


def test_create_meeting_requires_permission(client, make_user, headers_for) -> None:
    member = make_user("member@example.com")

    response = client.post(
        "/api/meetings",
        json={"title": "Nope", "date": "2024-06-12T09:00:00Z"},
        headers=headers_for(member),
    )

    assert response.status_code == 403


def test_create_meeting_with_inactive_type_is_rejected(client, db_session, admin_headers) -> None:
    meeting_type = MeetingType(name="Archived", is_active=False)
    db_session.add(meeting_type)
    db_session.commit()

    response = client.post(
        "/api/meetings",
        json={"title": "Old", "date": "2024-06-12T09:00:00Z", "meeting_type_id": meeting_type.id},
        headers=admin_headers,
    )

    assert response.status_code == 422
    missing = client.post(
        "/api/meetings",
        json={"title": "Old", "date": "2024-06-12T09:00:00Z", "meeting_type_id": 999},
        headers=admin_headers,
    )
    assert missing.status_code == 404


def test_list_meetings_returns_created_and_joined_newest_first(
    client, db_session, admin, admin_headers, make_user, headers_for
) -> None:
    member = make_user("member@example.com", permissions=("can_create_meetings",))
    older = _create_meeting(client, admin_headers, title="Older", date="2024-01-10T09:00:00Z")
    newer = _create_meeting(client, admin_headers, title="Newer", date="2024-05-10T09:00:00Z")
    _create_meeting(client, admin_headers, title="Private", date="2024-03-10T09:00:00Z")
    own = _create_meeting(client, headers_for(member), title="Own", date="2024-02-10T09:00:00Z")
    for meeting in (older, newer):
        db_session.add(MeetingParticipant(meeting_id=meeting["id"], user_id=member.id))
    db_session.commit()

    listing = client.get("/api/meetings", headers=headers_for(member)).json()

    assert [meeting["title"] for meeting in listing] == ["Newer", "Own", "Older"]
    assert own["created_by"] == member.id


def test_meeting_status_only_moves_forward(client, admin_headers) -> None:
    meeting = _create_meeting(client, admin_headers)
    url = f"/api/meetings/{meeting['id']}"

    assert client.put(url, json={"status": "in_progress"}, headers=admin_headers).status_code == 200
    backwards = client.put(url, json={"status": "scheduled"}, headers=admin_headers)
    assert backwards.status_code == 409
    assert client.get(url, headers=admin_headers).json()["status"] == "in_progress"

    done = client.put(url, json={"status": "completed", "title": "Clos"}, headers=admin_headers)
    assert done.json()["status"] == "completed"
    assert done.json()["title"] == "Clos"


def test_delete_meeting_cascades(client, db_session, admin, admin_headers) -> None:
    meeting = _create_meeting(client, admin_headers)
    db_session.add(MeetingParticipant(meeting_id=meeting["id"], user_id=admin.id))
    db_session.commit()

    response = client.delete(f"/api/meetings/{meeting['id']}", headers=admin_headers)

    assert response.status_code == 204
    db_session.expire_all()
    assert db_session.get(Meeting, meeting["id"]) is None
    assert db_session.query(AgendaItem).filter_by(meeting_id=meeting["id"]).count() == 0
    assert db_session.query(MeetingParticipant).filter_by(meeting_id=meeting["id"]).count() == 0
    assert client.get(f"/api/meetings/{meeting['id']}", headers=admin_headers).status_code == 404
