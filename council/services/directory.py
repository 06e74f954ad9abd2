"""Company and user directory operations."""
from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from council.models import Company, User
from council.schemas.company import CompanyCreate, CompanyUpdate
from council.schemas.user import UserCreate, UserUpdate
from council.services.sessions import hash_password

logger = logging.getLogger(__name__)


class DirectoryError(RuntimeError):
    """Base exception for directory operations."""


class CompanyNotFoundError(DirectoryError):
    """Raised when a company identifier does not exist."""


class UserNotFoundError(DirectoryError):
    """Raised when a user identifier does not exist."""


class DuplicateCompanyError(DirectoryError):
    """Raised when a SIRET is already registered."""


class DuplicateUserError(DirectoryError):
    """Raised when an e-mail address is already registered."""


def get_company(session: Session, company_id: int) -> Company:
    company = session.get(Company, company_id)
    if company is None:
        raise CompanyNotFoundError(f"Company {company_id} not found")
    return company


def get_user(session: Session, user_id: int) -> User:
    user = session.get(User, user_id)
    if user is None:
        raise UserNotFoundError(f"User {user_id} not found")
    return user


def list_companies(session: Session) -> list[Company]:
    return list(session.scalars(select(Company).order_by(Company.name, Company.id)))


def create_company(session: Session, payload: CompanyCreate) -> Company:
    company = Company(**payload.model_dump())
    session.add(company)
    _commit_company(session)
    session.refresh(company)
    logger.info("company created", extra={"company_id": company.id})
    return company


def update_company(session: Session, company_id: int, payload: CompanyUpdate) -> Company:
    company = get_company(session, company_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(company, field, value)
    _commit_company(session)
    session.refresh(company)
    return company


def delete_company(session: Session, company_id: int) -> None:
    company = get_company(session, company_id)
    session.delete(company)
    session.commit()
    logger.info("company deleted", extra={"company_id": company_id})


def _commit_company(session: Session) -> None:
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise DuplicateCompanyError("A company with this SIRET already exists") from exc


def list_users(session: Session) -> list[User]:
    return list(session.scalars(select(User).order_by(User.last_name, User.first_name, User.id)))


def create_user(session: Session, payload: UserCreate) -> User:
    if payload.company_id is not None:
        get_company(session, payload.company_id)
    data = payload.model_dump(exclude={"password"})
    data["email"] = data["email"].strip().lower()
    user = User(**data, hashed_password=hash_password(payload.password))
    session.add(user)
    _commit_user(session)
    session.refresh(user)
    logger.info("user created", extra={"user_id": user.id})
    return user


def update_user(session: Session, user_id: int, payload: UserUpdate) -> User:
    user = get_user(session, user_id)
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("company_id") is not None:
        get_company(session, changes["company_id"])
    password = changes.pop("password", None)
    if password:
        user.hashed_password = hash_password(password)
    if changes.get("email"):
        changes["email"] = changes["email"].strip().lower()
    for field, value in changes.items():
        if field in {"email", "first_name", "last_name", "role", "permissions"} and value is None:
            continue
        setattr(user, field, value)
    _commit_user(session)
    session.refresh(user)
    return user


def _commit_user(session: Session) -> None:
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise DuplicateUserError("A user with this e-mail already exists") from exc


__all__ = [
    "CompanyNotFoundError",
    "DirectoryError",
    "DuplicateCompanyError",
    "DuplicateUserError",
    "UserNotFoundError",
    "create_company",
    "create_user",
    "delete_company",
    "get_company",
    "get_user",
    "list_companies",
    "list_users",
    "update_company",
    "update_user",
]
