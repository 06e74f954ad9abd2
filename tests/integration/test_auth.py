from __future__ import annotations

from urllib.parse import parse_qs, urlparse

from council.core.config import get_settings
from council.models import UserSession

PASSWORD = "s3cret-pass"


def test_login_sets_session_cookie_and_returns_profile(client, make_user) -> None:
    make_user("camille@example.com", permissions=("can_vote",))

    response = client.post("/api/auth/login", json={"email": "Camille@Example.com", "password": PASSWORD})

    assert response.status_code == 200
    body = response.json()
    assert body["email"] == "camille@example.com"
    assert "hashed_password" not in body and "password" not in body
    assert get_settings().session_cookie_name in response.cookies

    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json()["id"] == body["id"]


def test_login_rejects_wrong_password(client, make_user) -> None:
    make_user("camille@example.com")

    response = client.post("/api/auth/login", json={"email": "camille@example.com", "password": "nope"})

    assert response.status_code == 401


def test_me_requires_authentication(client) -> None:
    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"}).status_code == 401


def test_logout_invalidates_session(client, db_session, make_user, headers_for) -> None:
    user = make_user("camille@example.com")
    headers = headers_for(user)
    assert client.get("/api/auth/me", headers=headers).status_code == 200

    response = client.post("/api/auth/logout", headers=headers)

    assert response.status_code == 200
    db_session.expire_all()
    assert db_session.query(UserSession).count() == 0
    assert client.get("/api/auth/me", headers=headers).status_code == 401


def test_logout_without_session_still_succeeds(client) -> None:
    assert client.post("/api/auth/logout").status_code == 200


def test_magic_link_response_does_not_reveal_accounts(client, make_user, mailer) -> None:
    make_user("camille@example.com")

    known = client.post("/api/auth/send-magic-link", json={"email": "camille@example.com"})
    unknown = client.post("/api/auth/send-magic-link", json={"email": "ghost@example.com"})

    assert known.status_code == unknown.status_code == 200
    assert known.json() == unknown.json()
    assert [mail["to_email"] for mail in mailer.sent] == ["camille@example.com"]


def test_magic_link_opens_session_and_redirects(client, make_user, mailer) -> None:
    make_user("camille@example.com")
    client.post("/api/auth/send-magic-link", json={"email": "camille@example.com"})
    link = urlparse(mailer.sent[0]["link"])
    token = parse_qs(link.query)["token"][0]

    response = client.get("/api/auth/magic-link", params={"token": token}, follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == "/dashboard"
    assert get_settings().session_cookie_name in response.cookies
    assert client.get("/api/auth/me").json()["email"] == "camille@example.com"


def test_magic_link_with_invalid_token_is_rejected(client) -> None:
    response = client.get("/api/auth/magic-link", params={"token": "not-a-token"}, follow_redirects=False)

    assert response.status_code == 401


def test_missing_permission_is_forbidden(client, make_user, headers_for) -> None:
    member = make_user("member@example.com")

    response = client.post("/api/companies", json={"name": "Acme"}, headers=headers_for(member))

    assert response.status_code == 403
