from __future__ import annotations

from types import SimpleNamespace

import pytest

from council.core.config import Settings
from council.services.sessions import (
    InvalidTokenError,
    create_magic_link_token,
    decode_token,
    hash_password,
    verify_password,
)

settings = Settings(session_secret="unit-test-secret", database_url="sqlite+pysqlite:///:memory:")


def test_password_hash_round_trip() -> None:
    hashed = hash_password("correct horse")

    assert hashed != "correct horse"
    assert verify_password("correct horse", hashed) is True
    assert verify_password("wrong", hashed) is False


def test_magic_link_token_is_not_a_session_token() -> None:
    token = create_magic_link_token(user=SimpleNamespace(id=7), settings=settings)

    payload = decode_token(token, settings=settings, expected_type="magic-link")
    assert payload["sub"] == "7"
    with pytest.raises(InvalidTokenError):
        decode_token(token, settings=settings, expected_type="session")


def test_token_signed_with_another_secret_is_rejected() -> None:
    other = Settings(session_secret="another-secret", database_url="sqlite+pysqlite:///:memory:")
    token = create_magic_link_token(user=SimpleNamespace(id=7), settings=other)

    with pytest.raises(InvalidTokenError):
        decode_token(token, settings=settings, expected_type="magic-link")


def test_expired_magic_link_is_rejected() -> None:
    expired = Settings(
        session_secret="unit-test-secret",
        database_url="sqlite+pysqlite:///:memory:",
        magic_link_ttl_minutes=-1,
    )
    token = create_magic_link_token(user=SimpleNamespace(id=7), settings=expired)

    with pytest.raises(InvalidTokenError):
        decode_token(token, settings=settings, expected_type="magic-link")
