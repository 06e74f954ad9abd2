from __future__ import annotations

import os
import sys
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("ENABLE_TRACING", "false")

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from council.api.deps import get_db_session, get_mailer  # noqa: E402
from council.core.config import get_settings  # noqa: E402
from council.db.session import enable_sqlite_foreign_keys  # noqa: E402
from council.main import app  # noqa: E402
from council.models import PERMISSION_FLAGS, Base, Company, User  # noqa: E402
from council.services.sessions import create_session, hash_password  # noqa: E402

DATABASE_URL = "sqlite+pysqlite:///:memory:"
PASSWORD = "s3cret-pass"
PASSWORD_HASH = hash_password(PASSWORD)

engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(engine)
TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


class RecordingMailer:
    """Collects magic links instead of calling the e-mail provider."""

    def __init__(self) -> None:
        self.sent: list[dict[str, str]] = []

    def send_magic_link(self, *, to_email: str, to_name: str, link: str) -> bool:
        self.sent.append({"to_email": to_email, "to_name": to_name, "link": link})
        return True


@pytest.fixture()
def db_session() -> Iterator[Session]:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture()
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture()
def client(db_session: Session, mailer: RecordingMailer) -> Iterator[TestClient]:
    def override_get_db() -> Iterator[Session]:
        try:
            yield db_session
        finally:
            db_session.rollback()

    app.dependency_overrides[get_db_session] = override_get_db
    app.dependency_overrides[get_mailer] = lambda: mailer

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.pop(get_db_session, None)
    app.dependency_overrides.pop(get_mailer, None)


@pytest.fixture()
def make_company(db_session: Session) -> Callable[..., Company]:
    def _make(name: str, *, siret: str | None = None) -> Company:
        company = Company(name=name, siret=siret)
        db_session.add(company)
        db_session.commit()
        db_session.refresh(company)
        return company

    return _make


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    def _make(
        email: str,
        *,
        role: str = "council_member",
        roles: list[str] | None = None,
        company: Company | None = None,
        permissions: tuple[str, ...] = (),
        first_name: str | None = None,
        last_name: str = "Test",
    ) -> User:
        user = User(
            email=email,
            first_name=first_name or email.split("@")[0].capitalize(),
            last_name=last_name,
            role=role,
            roles=roles,
            company_id=company.id if company is not None else None,
            permissions={flag: True for flag in permissions},
            hashed_password=PASSWORD_HASH,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture()
def headers_for(db_session: Session) -> Callable[[User], dict[str, str]]:
    def _headers(user: User) -> dict[str, str]:
        issued = create_session(db_session, user=user, settings=get_settings())
        return {"Authorization": f"Bearer {issued.token}"}

    return _headers


@pytest.fixture()
def admin(make_user: Callable[..., User]) -> User:
    return make_user("admin@example.com", role="salaried", permissions=PERMISSION_FLAGS)


@pytest.fixture()
def admin_headers(admin: User, headers_for: Callable[[User], dict[str, str]]) -> dict[str, str]:
    return headers_for(admin)
