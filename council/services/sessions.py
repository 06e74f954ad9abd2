"""Password hashing, persisted sessions and signed magic-link tokens."""
from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Literal

import bcrypt
from jose import JWTError, jwt  # type: ignore[import-untyped]
from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from council.core.config import Settings
from council.models import User, UserSession

logger = logging.getLogger(__name__)

TokenType = Literal["session", "magic-link"]


class AuthError(RuntimeError):
    """Base exception for authentication failures."""


class InvalidCredentialsError(AuthError):
    """Raised when an e-mail/password pair does not match a user."""


class InvalidTokenError(AuthError):
    """Raised when a token is malformed, expired or of the wrong type."""


class SessionExpiredError(AuthError):
    """Raised when the token's backing session row is gone or expired."""


class UnknownUserError(AuthError):
    """Raised when a valid token names a user that no longer exists."""


@dataclass(slots=True, frozen=True)
class IssuedSession:
    token: str
    session_id: str
    expires_at: datetime
    user: User


def hash_password(raw_password: str) -> str:
    return bcrypt.hashpw(raw_password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(raw_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(raw_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:  # pragma: no cover - invalid hash format
        return False


def _encode(
    *,
    settings: Settings,
    subject: str,
    token_type: TokenType,
    expires_at: datetime,
    token_id: str,
) -> str:
    payload = {
        "sub": subject,
        "type": token_type,
        "iat": int(datetime.now(UTC).timestamp()),
        "exp": int(expires_at.timestamp()),
        "jti": token_id,
    }
    return jwt.encode(payload, settings.session_secret, algorithm=settings.session_algorithm)


def decode_token(token: str, *, settings: Settings, expected_type: TokenType) -> dict:
    try:
        payload = jwt.decode(token, settings.session_secret, algorithms=[settings.session_algorithm])
    except JWTError as exc:
        raise InvalidTokenError("Invalid or expired token") from exc
    if payload.get("type") != expected_type or "sub" not in payload or "jti" not in payload:
        raise InvalidTokenError("Invalid token type")
    return payload


def authenticate(session: Session, *, email: str, password: str) -> User:
    user = find_user_by_email(session, email)
    if user is None or not verify_password(password, user.hashed_password):
        raise InvalidCredentialsError("Invalid credentials")
    return user


def create_session(session: Session, *, user: User, settings: Settings) -> IssuedSession:
    """Persist a session row and return the signed token pointing at it."""

    session_id = secrets.token_hex(32)
    expires_at = datetime.now(UTC) + timedelta(days=settings.session_ttl_days)
    session.add(UserSession(id=session_id, user_id=user.id, expires_at=expires_at))
    session.commit()
    token = _encode(
        settings=settings,
        subject=str(user.id),
        token_type="session",
        expires_at=expires_at,
        token_id=session_id,
    )
    logger.info("session created", extra={"user_id": user.id})
    return IssuedSession(token=token, session_id=session_id, expires_at=expires_at, user=user)


def resolve_session(session: Session, *, token: str, settings: Settings) -> tuple[User, str]:
    """Return the user and session id behind a session token."""

    payload = decode_token(token, settings=settings, expected_type="session")
    record = session.get(UserSession, payload["jti"])
    if record is None or str(record.user_id) != str(payload["sub"]):
        raise SessionExpiredError("Session not found")
    expires_at = record.expires_at
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=UTC)
    if expires_at <= datetime.now(UTC):
        session.delete(record)
        session.commit()
        raise SessionExpiredError("Session expired")
    user = session.get(User, record.user_id)
    if user is None:  # pragma: no cover - cascades remove the session with the user
        raise SessionExpiredError("Session user missing")
    return user, record.id


def revoke_session(session: Session, *, token: str, settings: Settings) -> bool:
    """Delete the session behind ``token``; returns False when there was none."""

    try:
        payload = decode_token(token, settings=settings, expected_type="session")
    except InvalidTokenError:
        return False
    result = session.execute(delete(UserSession).where(UserSession.id == payload["jti"]))
    session.commit()
    return bool(result.rowcount)


def create_magic_link_token(*, user: User, settings: Settings) -> str:
    expires_at = datetime.now(UTC) + timedelta(minutes=settings.magic_link_ttl_minutes)
    return _encode(
        settings=settings,
        subject=str(user.id),
        token_type="magic-link",
        expires_at=expires_at,
        token_id=secrets.token_hex(16),
    )


def consume_magic_link(session: Session, *, token: str, settings: Settings) -> IssuedSession:
    payload = decode_token(token, settings=settings, expected_type="magic-link")
    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError) as exc:
        raise InvalidTokenError("Invalid token subject") from exc
    user = session.get(User, user_id)
    if user is None:
        raise UnknownUserError("User not found")
    return create_session(session, user=user, settings=settings)


def find_user_by_email(session: Session, email: str) -> User | None:
    return session.scalars(select(User).where(func.lower(User.email) == email.strip().lower())).first()


__all__ = [
    "AuthError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "IssuedSession",
    "SessionExpiredError",
    "UnknownUserError",
    "authenticate",
    "consume_magic_link",
    "create_magic_link_token",
    "create_session",
    "decode_token",
    "find_user_by_email",
    "hash_password",
    "resolve_session",
    "revoke_session",
    "verify_password",
]
