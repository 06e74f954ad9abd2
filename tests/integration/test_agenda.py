from __future__ import annotations

from datetime import UTC, datetime

import pytest

from council.models import Meeting


@pytest.fixture()
def meeting(db_session, admin) -> Meeting:
    meeting = Meeting(title="Conseil", date=datetime(2024, 6, 12, 9, tzinfo=UTC), created_by=admin.id)
    db_session.add(meeting)
    db_session.commit()
    db_session.refresh(meeting)
    return meeting


def _create_item(client, headers, meeting_id: int, **overrides) -> dict:
    payload = {"title": "Point", "duration": 10, "type": "discussion", **overrides}
    response = client.post(f"/api/meetings/{meeting_id}/agenda", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_agenda_tree_groups_subsections(client, admin_headers, meeting) -> None:
    budget = _create_item(client, admin_headers, meeting.id, title="Budget", order_index=1)
    _create_item(client, admin_headers, meeting.id, title="Vote", order_index=2)
    _create_item(client, admin_headers, meeting.id, title="Détails", order_index=1, parent_id=budget["id"])

    flat = client.get(f"/api/meetings/{meeting.id}/agenda", headers=admin_headers).json()
    tree = client.get(f"/api/meetings/{meeting.id}/agenda/tree", headers=admin_headers).json()

    assert [item["title"] for item in flat] == ["Budget", "Détails", "Vote"]
    assert [item["title"] for item in tree] == ["Budget", "Vote"]
    assert [child["title"] for child in tree[0]["subsections"]] == ["Détails"]


def test_parent_must_be_top_level_item_of_same_meeting(client, db_session, admin, admin_headers, meeting) -> None:
    parent = _create_item(client, admin_headers, meeting.id, title="Parent")
    child = _create_item(client, admin_headers, meeting.id, title="Child", parent_id=parent["id"])
    other = Meeting(title="Autre", date=datetime(2024, 7, 1, tzinfo=UTC), created_by=admin.id)
    db_session.add(other)
    db_session.commit()
    foreign = _create_item(client, admin_headers, other.id, title="Ailleurs")
    url = f"/api/meetings/{meeting.id}/agenda"

    grandchild = client.post(
        url, json={"title": "Trop", "duration": 1, "type": "discussion", "parent_id": child["id"]}, headers=admin_headers
    )
    cross = client.post(
        url, json={"title": "X", "duration": 1, "type": "discussion", "parent_id": foreign["id"]}, headers=admin_headers
    )

    assert grandchild.status_code == 422
    assert cross.status_code == 422


def test_reparenting_cannot_create_cycles(client, admin_headers, meeting) -> None:
    parent = _create_item(client, admin_headers, meeting.id, title="Parent")
    child = _create_item(client, admin_headers, meeting.id, title="Child", parent_id=parent["id"])

    self_parent = client.put(f"/api/agenda/{parent['id']}", json={"parent_id": parent["id"]}, headers=admin_headers)
    under_child = client.put(f"/api/agenda/{parent['id']}", json={"parent_id": child["id"]}, headers=admin_headers)

    assert self_parent.status_code == 422
    assert under_child.status_code == 422

    promoted = client.put(f"/api/agenda/{child['id']}", json={"parent_id": None}, headers=admin_headers)
    assert promoted.status_code == 200
    assert promoted.json()["parent_id"] is None


def test_agenda_status_moves_forward_with_timestamps(client, admin_headers, meeting) -> None:
    item = _create_item(client, admin_headers, meeting.id)
    url = f"/api/agenda/{item['id']}"

    started = client.put(url, json={"status": "in_progress"}, headers=admin_headers).json()
    assert started["started_at"] is not None
    assert started["completed_at"] is None

    completed = client.put(url, json={"status": "completed"}, headers=admin_headers).json()
    assert completed["completed_at"] is not None

    assert client.put(url, json={"status": "pending"}, headers=admin_headers).status_code == 409


def test_content_update_requires_edit_permission(client, admin_headers, meeting, make_user, headers_for) -> None:
    item = _create_item(client, admin_headers, meeting.id)
    url = f"/api/agenda/{item['id']}/content"
    reader = make_user("reader@example.com", permissions=("can_manage_agenda",))

    assert client.put(url, json={"content": "<p>x</p>"}, headers=headers_for(reader)).status_code == 403
    response = client.put(url, json={"content": "<p>Ordre du jour</p>"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["content"] == "<p>Ordre du jour</p>"


def test_delete_item_removes_subsections_and_votes(client, admin_headers, meeting) -> None:
    parent = _create_item(client, admin_headers, meeting.id, title="Parent")
    child = _create_item(client, admin_headers, meeting.id, title="Child", parent_id=parent["id"])
    vote = client.post(
        f"/api/agenda/{child['id']}/votes", json={"question": "OK ?", "options": ["Oui", "Non"]}, headers=admin_headers
    ).json()

    assert client.delete(f"/api/agenda/{parent['id']}", headers=admin_headers).status_code == 204

    assert client.get(f"/api/agenda/{child['id']}", headers=admin_headers).status_code == 404
    assert client.delete(f"/api/votes/{vote['id']}", headers=admin_headers).status_code == 404
