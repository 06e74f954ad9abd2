from __future__ import annotations

import pytest


@pytest.fixture()
def meeting_type(client, admin_headers) -> dict:
    response = client.post(
        "/api/meeting-types",
        json={"name": "Conseil d'administration", "color": "#112233"},
        headers=admin_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


def test_meeting_type_crud_uses_soft_delete(client, admin_headers, meeting_type) -> None:
    type_id = meeting_type["id"]
    assert meeting_type["is_active"] is True

    updated = client.put(
        f"/api/meeting-types/{type_id}", json={"description": "Trimestriel"}, headers=admin_headers
    )
    assert updated.json()["description"] == "Trimestriel"
    assert updated.json()["name"] == "Conseil d'administration"

    assert client.delete(f"/api/meeting-types/{type_id}", headers=admin_headers).status_code == 204

    active = client.get("/api/meeting-types", headers=admin_headers).json()
    everything = client.get("/api/meeting-types", params={"include_inactive": True}, headers=admin_headers).json()
    assert active == []
    assert [row["id"] for row in everything] == [type_id]
    assert client.get(f"/api/meeting-types/{type_id}", headers=admin_headers).json()["is_active"] is False
    assert client.get("/api/meeting-types/999", headers=admin_headers).status_code == 404


def test_meeting_type_validation_and_permissions(client, admin_headers, make_user, headers_for) -> None:
    member = make_user("member@example.com")

    assert client.post("/api/meeting-types", json={"name": "Bureau"}, headers=headers_for(member)).status_code == 403
    bad_color = client.post("/api/meeting-types", json={"name": "Bureau", "color": "blue"}, headers=admin_headers)
    assert bad_color.status_code == 422


def test_access_rules_need_exactly_one_grantee(client, admin_headers, make_company, make_user, meeting_type) -> None:
    company = make_company("Acme")
    user = make_user("alice@example.com")
    url = f"/api/meeting-types/{meeting_type['id']}/access"

    assert client.post(url, json={}, headers=admin_headers).status_code == 422
    both = client.post(url, json={"user_id": user.id, "company_id": company.id}, headers=admin_headers)
    assert both.status_code == 422

    granted = client.post(url, json={"company_id": company.id}, headers=admin_headers)
    assert granted.status_code == 201
    assert granted.json()["company"]["name"] == "Acme"
    assert granted.json()["access_level"] == "participant"

    assert client.post(url, json={"company_id": company.id}, headers=admin_headers).status_code == 409
    assert client.post(url, json={"user_id": 999}, headers=admin_headers).status_code == 404

    rule_id = granted.json()["id"]
    assert client.delete(f"/api/meeting-type-access/{rule_id}", headers=admin_headers).status_code == 204
    assert client.get(url, headers=admin_headers).json() == []
    assert client.delete(f"/api/meeting-type-access/{rule_id}", headers=admin_headers).status_code == 404


def test_role_rules(client, admin_headers, meeting_type) -> None:
    url = f"/api/meeting-types/{meeting_type['id']}/roles"

    granted = client.post(url, json={"role": "board_member"}, headers=admin_headers)
    assert granted.status_code == 201
    assert client.post(url, json={"role": "board_member"}, headers=admin_headers).status_code == 409
    assert [rule["role"] for rule in client.get(url, headers=admin_headers).json()] == ["board_member"]

    assert client.delete(f"/api/meeting-type-roles/{granted.json()['id']}", headers=admin_headers).status_code == 204
    assert client.get(url, headers=admin_headers).json() == []


def test_user_meeting_types_follow_every_grant_kind(client, admin_headers, make_company, make_user) -> None:
    acme = make_company("Acme")
    alice = make_user("alice@example.com", company=acme, roles=["board_member"])

    ids = {}
    for name in ("Direct", "Par société", "Par rôle", "Inactif", "Autre"):
        ids[name] = client.post("/api/meeting-types", json={"name": name}, headers=admin_headers).json()["id"]

    client.post(f"/api/meeting-types/{ids['Direct']}/access", json={"user_id": alice.id}, headers=admin_headers)
    client.post(f"/api/meeting-types/{ids['Par société']}/access", json={"company_id": acme.id}, headers=admin_headers)
    client.post(f"/api/meeting-types/{ids['Par rôle']}/roles", json={"role": "board_member"}, headers=admin_headers)
    client.post(f"/api/meeting-types/{ids['Inactif']}/access", json={"user_id": alice.id}, headers=admin_headers)
    client.delete(f"/api/meeting-types/{ids['Inactif']}", headers=admin_headers)

    response = client.get(f"/api/users/{alice.id}/meeting-types", headers=admin_headers)

    assert response.status_code == 200
    assert sorted(row["name"] for row in response.json()) == ["Direct", "Par rôle", "Par société"]
    assert client.get("/api/users/999/meeting-types", headers=admin_headers).status_code == 404


def test_eligible_users_open_and_restricted(client, admin, admin_headers, make_company, make_user, meeting_type) -> None:
    acme = make_company("Acme")
    alice = make_user("alice@example.com", company=acme)
    bob = make_user("bob@example.com")
    carol = make_user("carol@example.com", role="observer")
    url = f"/api/meeting-types/{meeting_type['id']}/eligible-users"

    open_to_all = {row["email"] for row in client.get(url, headers=admin_headers).json()}
    assert open_to_all == {admin.email, alice.email, bob.email, carol.email}

    client.post(f"/api/meeting-types/{meeting_type['id']}/access", json={"company_id": acme.id}, headers=admin_headers)
    client.post(f"/api/meeting-types/{meeting_type['id']}/roles", json={"role": "observer"}, headers=admin_headers)

    restricted = {row["email"] for row in client.get(url, headers=admin_headers).json()}
    assert restricted == {alice.email, carol.email}
