from __future__ import annotations

from datetime import UTC, datetime
from types import SimpleNamespace

import pytest
from sqlalchemy.exc import IntegrityError

from council.models import AgendaItem, AgendaItemType, Meeting, MeetingParticipant, ParticipantStatus, Vote, VoteResponse


@pytest.fixture()
def setup(db_session, admin, make_company, make_user, headers_for) -> SimpleNamespace:
    """A meeting with one agenda item and a roster covering every seat kind."""

    acme = make_company("Acme")
    beta = make_company("Beta")
    outsider = make_company("Outsider")
    alice = make_user("alice@example.com", company=acme, permissions=("can_vote",), first_name="Alice")
    bob = make_user("bob@example.com", company=beta, permissions=("can_vote",), first_name="Bob")
    carol = make_user("carol@example.com", company=outsider, permissions=("can_vote",), first_name="Carol")
    mute = make_user("mute@example.com", company=acme)

    meeting = Meeting(title="Conseil", date=datetime(2024, 6, 12, 9, tzinfo=UTC), created_by=admin.id)
    meeting.agenda_items.append(AgendaItem(title="Budget", duration=15, type=AgendaItemType.DISCUSSION))
    db_session.add(meeting)
    db_session.flush()
    db_session.add_all(
        [
            MeetingParticipant(meeting_id=meeting.id, user_id=alice.id, status=ParticipantStatus.PRESENT),
            MeetingParticipant(
                meeting_id=meeting.id,
                user_id=bob.id,
                status=ParticipantStatus.PROXY,
                proxy_company_id=acme.id,
            ),
            MeetingParticipant(meeting_id=meeting.id, user_id=carol.id, status=ParticipantStatus.ABSENT),
        ]
    )
    db_session.commit()
    item_id = meeting.agenda_items[0].id

    return SimpleNamespace(
        meeting=meeting,
        item_id=item_id,
        acme=acme,
        beta=beta,
        outsider=outsider,
        alice=alice,
        bob=bob,
        carol=carol,
        alice_headers=headers_for(alice),
        bob_headers=headers_for(bob),
        carol_headers=headers_for(carol),
        mute_headers=headers_for(mute),
    )


@pytest.fixture()
def vote(client, admin_headers, setup) -> dict:
    response = client.post(
        f"/api/agenda/{setup.item_id}/votes",
        json={"question": "Adopter le budget ?", "options": ["Oui", "Non", "Abstention"]},
        headers=admin_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


def _cast(client, vote_id: int, headers: dict, option: str = "Oui", **extra):
    return client.post(f"/api/votes/{vote_id}/cast", json={"option": option, **extra}, headers=headers)


def test_create_vote_validates_options(client, admin_headers, setup) -> None:
    url = f"/api/agenda/{setup.item_id}/votes"

    assert client.post(url, json={"question": "Q", "options": ["Seule"]}, headers=admin_headers).status_code == 422
    assert client.post(url, json={"question": "Q", "options": ["A", "A"]}, headers=admin_headers).status_code == 422
    assert client.post(url, json={"question": " ", "options": ["A", "B"]}, headers=admin_headers).status_code == 422
    too_long = {"question": "Q", "options": ["A" * 101, "Non"]}
    assert client.post(url, json=too_long, headers=admin_headers).status_code == 422
    assert client.post("/api/agenda/999/votes", json={"question": "Q", "options": ["A", "B"]}, headers=admin_headers).status_code == 404


def test_create_vote_requires_agenda_permission(client, setup) -> None:
    response = client.post(
        f"/api/agenda/{setup.item_id}/votes",
        json={"question": "Q", "options": ["A", "B"]},
        headers=setup.alice_headers,
    )
    assert response.status_code == 403


def test_member_casts_once(client, vote, setup) -> None:
    first = _cast(client, vote["id"], setup.alice_headers)
    assert first.status_code == 201
    assert first.json()["user_id"] == setup.alice.id
    assert first.json()["voting_for_company_id"] is None

    second = _cast(client, vote["id"], setup.alice_headers, option="Non")
    assert second.status_code == 409

    listing = client.get(f"/api/agenda/{setup.item_id}/votes", headers=setup.alice_headers).json()
    (entry,) = listing
    assert entry["total_votes"] == 1
    assert entry["results"][0] == {"option": "Oui", "count": 1, "percentage": 100.0}
    assert entry["user_vote"]["option"] == "Oui"


def test_cast_preconditions(client, admin_headers, vote, setup) -> None:
    assert _cast(client, 999, setup.alice_headers).status_code == 404
    assert _cast(client, vote["id"], setup.alice_headers, option="Peut-être").status_code == 422
    assert _cast(client, vote["id"], setup.mute_headers).status_code == 403

    assert client.post(f"/api/votes/{vote['id']}/close", headers=admin_headers).status_code == 200
    assert _cast(client, vote["id"], setup.alice_headers).status_code == 409


def test_proxy_holder_casts_for_their_seat(client, vote, setup) -> None:
    for_acme = _cast(client, vote["id"], setup.bob_headers, voting_for_company_id=setup.acme.id)
    personal = _cast(client, vote["id"], setup.bob_headers, option="Non")

    assert for_acme.status_code == 201
    assert for_acme.json()["voting_for_company_id"] == setup.acme.id
    assert for_acme.json()["cast_by_user_id"] is None
    assert personal.status_code == 201
    assert personal.json()["voting_for_company_id"] is None

    again = _cast(client, vote["id"], setup.bob_headers, voting_for_company_id=setup.acme.id)
    assert again.status_code == 409


def test_non_staff_company_choice_is_ignored_without_proxy_seat(client, vote, setup) -> None:
    response = _cast(client, vote["id"], setup.alice_headers, voting_for_company_id=setup.beta.id)

    assert response.status_code == 201
    assert response.json()["voting_for_company_id"] is None
    assert response.json()["user_id"] == setup.alice.id


def test_staff_casts_for_represented_company(client, admin, admin_headers, vote, setup) -> None:
    response = _cast(client, vote["id"], admin_headers, voting_for_company_id=setup.acme.id)

    assert response.status_code == 201
    body = response.json()
    assert body["user_id"] == admin.id
    assert body["cast_by_user_id"] == admin.id
    assert body["voting_for_company_id"] == setup.acme.id

    duplicate = _cast(client, vote["id"], setup.bob_headers, voting_for_company_id=setup.acme.id)
    assert duplicate.status_code == 409

    own_ballot = _cast(client, vote["id"], setup.alice_headers)
    assert own_ballot.status_code == 201


def test_staff_ballot_after_representative_keeps_both_voters(client, admin, admin_headers, vote, setup) -> None:
    assert _cast(client, vote["id"], setup.alice_headers, option="Oui").status_code == 201
    staff = _cast(client, vote["id"], admin_headers, option="Non", voting_for_company_id=setup.acme.id)
    assert staff.status_code == 201

    section = client.get(f"/api/sections/{setup.item_id}/votes/enhanced", headers=admin_headers).json()

    (entry,) = section["votes"]
    (acme,) = [group for group in entry["companies_votes"] if group["company_name"] == "Acme"]
    assert [(v["voter_id"], v["option"], v["is_proxy"], v["cast_by_user_id"]) for v in acme["votes"]] == [
        (setup.alice.id, "Oui", False, None),
        (admin.id, "Non", True, admin.id),
    ]
    assert acme["votes"][1]["voter_on_roster"] is True


def test_staff_cannot_cast_for_unrepresented_company(client, admin_headers, vote, setup) -> None:
    assert _cast(client, vote["id"], admin_headers, voting_for_company_id=setup.outsider.id).status_code == 403
    assert _cast(client, vote["id"], admin_headers, voting_for_company_id=999).status_code == 404


def test_unique_constraint_backs_duplicate_detection(db_session, vote, setup) -> None:
    db_session.add(VoteResponse(vote_id=vote["id"], user_id=setup.alice.id, option="Oui", voter_key="user:1"))
    db_session.add(VoteResponse(vote_id=vote["id"], user_id=setup.bob.id, option="Non", voter_key="user:1"))

    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()


def test_close_vote_once(client, db_session, admin_headers, vote) -> None:
    url = f"/api/votes/{vote['id']}/close"

    closed = client.post(url, headers=admin_headers)
    assert closed.status_code == 200
    assert closed.json()["is_open"] is False
    closed_at = closed.json()["closed_at"]
    assert closed_at is not None

    assert client.put(url, headers=admin_headers).status_code == 409
    db_session.expire_all()
    assert db_session.get(Vote, vote["id"]).closed_at is not None
    assert client.get(f"/api/votes/{vote['id']}/results", headers=admin_headers).json()["vote"]["closed_at"] == closed_at
    assert client.post("/api/votes/999/close", headers=admin_headers).status_code == 404


def test_delete_vote_removes_responses(client, db_session, admin_headers, vote, setup) -> None:
    _cast(client, vote["id"], setup.alice_headers)

    assert client.delete(f"/api/votes/{vote['id']}", headers=admin_headers).status_code == 204

    db_session.expire_all()
    assert db_session.query(VoteResponse).filter_by(vote_id=vote["id"]).count() == 0
    assert client.delete(f"/api/votes/{vote['id']}", headers=admin_headers).status_code == 404


def test_results_require_permission(client, admin_headers, vote, setup) -> None:
    _cast(client, vote["id"], setup.alice_headers)
    _cast(client, vote["id"], setup.bob_headers, option="Non")
    _cast(client, vote["id"], setup.bob_headers, voting_for_company_id=setup.acme.id)

    assert client.get(f"/api/votes/{vote['id']}/results", headers=setup.alice_headers).status_code == 403
    results = client.get(f"/api/votes/{vote['id']}/results", headers=admin_headers).json()

    assert results["total_votes"] == 3
    assert [(r["option"], r["count"], r["percentage"]) for r in results["results"]] == [
        ("Oui", 2, 66.7),
        ("Non", 1, 33.3),
        ("Abstention", 0, 0.0),
    ]
    assert len(results["responses"]) == 3


def test_enhanced_section_reports_company_breakdown(client, admin_headers, vote, setup) -> None:
    _cast(client, vote["id"], setup.alice_headers, option="Oui")
    _cast(client, vote["id"], setup.bob_headers, option="Non", voting_for_company_id=setup.acme.id)
    _cast(client, vote["id"], setup.carol_headers, option="Abstention")
    client.delete(f"/api/meetings/{setup.meeting.id}/participants/{setup.carol.id}", headers=admin_headers)

    section = client.get(f"/api/sections/{setup.item_id}/votes/enhanced", headers=admin_headers).json()

    assert section["can_vote_for_companies"] is True
    assert section["user_role"] == "salaried"
    assert [seat["company_name"] for seat in section["votable_companies"]] == ["Acme", "Beta"]

    (entry,) = section["votes"]
    groups = {group["company_name"]: group["votes"] for group in entry["companies_votes"]}
    assert list(groups) == ["Acme", "Outsider"]
    assert [(v["voter_name"], v["option"], v["is_proxy"]) for v in groups["Acme"]] == [
        ("Alice Test", "Oui", False),
        ("Bob Test", "Non", True),
    ]
    (carol_vote,) = groups["Outsider"]
    assert carol_vote["voter_on_roster"] is False
    assert entry["total_votes"] == 3


def test_member_view_of_section(client, vote, setup) -> None:
    _cast(client, vote["id"], setup.bob_headers, voting_for_company_id=setup.acme.id)

    section = client.get(f"/api/sections/{setup.item_id}/votes/enhanced", headers=setup.bob_headers).json()

    assert section["can_vote_for_companies"] is False
    assert section["user_role"] == "council_member"
    (entry,) = section["votes"]
    assert entry["user_vote"] is None
    assert [response["voting_for_company_id"] for response in entry["user_votes"]] == [setup.acme.id]


def test_longest_allowed_option_can_be_cast(client, admin_headers, setup) -> None:
    longest = "A" * 100
    created = client.post(
        f"/api/agenda/{setup.item_id}/votes",
        json={"question": "Q", "options": [longest, "Non"]},
        headers=admin_headers,
    )
    assert created.status_code == 201

    cast = _cast(client, created.json()["id"], setup.alice_headers, option=longest)
    assert cast.status_code == 201
    assert cast.json()["option"] == longest
