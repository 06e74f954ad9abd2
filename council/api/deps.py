"""Common dependencies for API routes."""
from __future__ import annotations

from collections.abc import Iterator

from sqlalchemy.orm import Session

from council.core.config import get_settings
from council.db.session import SessionLocal
from council.services.mailer import BrevoMailer


def get_db_session() -> Iterator[Session]:
    """Yield a database session for FastAPI dependencies."""

    session: Session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def get_mailer() -> Iterator[BrevoMailer]:
    mailer = BrevoMailer.from_settings(get_settings())
    try:
        yield mailer
    finally:
        mailer.close()


__all__ = ["get_db_session", "get_mailer"]
