"""Meeting type catalogue and access rules."""
from __future__ import annotations

import logging

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from council.models import MeetingType, MeetingTypeAccess, MeetingTypeRole, User
from council.schemas.meeting_type import (
    MeetingTypeAccessCreate,
    MeetingTypeCreate,
    MeetingTypeRoleCreate,
    MeetingTypeUpdate,
)
from council.services.directory import get_company, get_user

logger = logging.getLogger(__name__)


class MeetingTypeError(RuntimeError):
    """Base exception for meeting type operations."""


class MeetingTypeNotFoundError(MeetingTypeError):
    """Raised when a meeting type identifier does not exist."""


class AccessRuleNotFoundError(MeetingTypeError):
    """Raised when an access or role grant does not exist."""


class DuplicateAccessRuleError(MeetingTypeError):
    """Raised when the same grantee is granted twice."""


def get_meeting_type(session: Session, meeting_type_id: int) -> MeetingType:
    meeting_type = session.get(MeetingType, meeting_type_id)
    if meeting_type is None:
        raise MeetingTypeNotFoundError(f"Meeting type {meeting_type_id} not found")
    return meeting_type


def list_meeting_types(session: Session, *, include_inactive: bool = False) -> list[MeetingType]:
    statement = select(MeetingType).order_by(MeetingType.name, MeetingType.id)
    if not include_inactive:
        statement = statement.where(MeetingType.is_active.is_(True))
    return list(session.scalars(statement))


def create_meeting_type(session: Session, payload: MeetingTypeCreate) -> MeetingType:
    meeting_type = MeetingType(**payload.model_dump(), is_active=True)
    session.add(meeting_type)
    session.commit()
    session.refresh(meeting_type)
    return meeting_type


def update_meeting_type(session: Session, meeting_type_id: int, payload: MeetingTypeUpdate) -> MeetingType:
    meeting_type = get_meeting_type(session, meeting_type_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is None and field != "description":
            continue
        setattr(meeting_type, field, value)
    session.commit()
    session.refresh(meeting_type)
    return meeting_type


def deactivate_meeting_type(session: Session, meeting_type_id: int) -> MeetingType:
    """Soft delete: existing meetings keep pointing at the type."""

    meeting_type = get_meeting_type(session, meeting_type_id)
    meeting_type.is_active = False
    session.commit()
    logger.info("meeting type deactivated", extra={"meeting_type_id": meeting_type_id})
    return meeting_type


def list_access_rules(session: Session, meeting_type_id: int) -> list[MeetingTypeAccess]:
    get_meeting_type(session, meeting_type_id)
    statement = (
        select(MeetingTypeAccess)
        .where(MeetingTypeAccess.meeting_type_id == meeting_type_id)
        .order_by(MeetingTypeAccess.id)
    )
    return list(session.scalars(statement))


def grant_access(
    session: Session, meeting_type_id: int, payload: MeetingTypeAccessCreate
) -> MeetingTypeAccess:
    get_meeting_type(session, meeting_type_id)
    if payload.user_id is not None:
        get_user(session, payload.user_id)
    if payload.company_id is not None:
        get_company(session, payload.company_id)

    # NULL grantee columns are distinct in unique indexes, so check explicitly.
    existing = session.scalars(
        select(MeetingTypeAccess).where(
            MeetingTypeAccess.meeting_type_id == meeting_type_id,
            MeetingTypeAccess.user_id.is_(None)
            if payload.user_id is None
            else MeetingTypeAccess.user_id == payload.user_id,
            MeetingTypeAccess.company_id.is_(None)
            if payload.company_id is None
            else MeetingTypeAccess.company_id == payload.company_id,
        )
    ).first()
    if existing is not None:
        raise DuplicateAccessRuleError("Access already granted")

    rule = MeetingTypeAccess(meeting_type_id=meeting_type_id, **payload.model_dump())
    session.add(rule)
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise DuplicateAccessRuleError("Access already granted") from exc
    session.refresh(rule)
    return rule


def revoke_access(session: Session, access_id: int) -> None:
    rule = session.get(MeetingTypeAccess, access_id)
    if rule is None:
        raise AccessRuleNotFoundError(f"Access rule {access_id} not found")
    session.delete(rule)
    session.commit()


def list_role_rules(session: Session, meeting_type_id: int) -> list[MeetingTypeRole]:
    get_meeting_type(session, meeting_type_id)
    statement = (
        select(MeetingTypeRole)
        .where(MeetingTypeRole.meeting_type_id == meeting_type_id)
        .order_by(MeetingTypeRole.id)
    )
    return list(session.scalars(statement))


def grant_role(session: Session, meeting_type_id: int, payload: MeetingTypeRoleCreate) -> MeetingTypeRole:
    get_meeting_type(session, meeting_type_id)
    rule = MeetingTypeRole(meeting_type_id=meeting_type_id, role=payload.role.strip())
    session.add(rule)
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise DuplicateAccessRuleError("Role already granted") from exc
    session.refresh(rule)
    return rule


def revoke_role(session: Session, role_rule_id: int) -> None:
    rule = session.get(MeetingTypeRole, role_rule_id)
    if rule is None:
        raise AccessRuleNotFoundError(f"Role rule {role_rule_id} not found")
    session.delete(rule)
    session.commit()


def accessible_meeting_types(session: Session, user: User) -> list[MeetingType]:
    """Active types granted to the user, the user's company or one of the user's roles."""

    grantee_filters = [MeetingTypeAccess.user_id == user.id]
    if user.company_id is not None:
        grantee_filters.append(MeetingTypeAccess.company_id == user.company_id)
    granted_ids = select(MeetingTypeAccess.meeting_type_id).where(or_(*grantee_filters))
    role_ids = select(MeetingTypeRole.meeting_type_id).where(
        MeetingTypeRole.role.in_(sorted(user.role_names()))
    )
    statement = (
        select(MeetingType)
        .where(
            MeetingType.is_active.is_(True),
            or_(MeetingType.id.in_(granted_ids), MeetingType.id.in_(role_ids)),
        )
        .order_by(MeetingType.name, MeetingType.id)
    )
    return list(session.scalars(statement))


def eligible_users(session: Session, meeting_type_id: int) -> list[User]:
    """Users allowed to attend meetings of this type.

    A type without any access or role rule is open to every user.
    """

    meeting_type = get_meeting_type(session, meeting_type_id)
    all_users = list(session.scalars(select(User).order_by(User.last_name, User.first_name, User.id)))
    if not meeting_type.access_rules and not meeting_type.role_rules:
        return all_users

    user_ids = {rule.user_id for rule in meeting_type.access_rules if rule.user_id is not None}
    company_ids = {rule.company_id for rule in meeting_type.access_rules if rule.company_id is not None}
    roles = {rule.role for rule in meeting_type.role_rules}
    return [
        user
        for user in all_users
        if user.id in user_ids
        or (user.company_id is not None and user.company_id in company_ids)
        or bool(user.role_names() & roles)
    ]


__all__ = [
    "AccessRuleNotFoundError",
    "DuplicateAccessRuleError",
    "MeetingTypeError",
    "MeetingTypeNotFoundError",
    "accessible_meeting_types",
    "create_meeting_type",
    "deactivate_meeting_type",
    "eligible_users",
    "get_meeting_type",
    "grant_access",
    "grant_role",
    "list_access_rules",
    "list_meeting_types",
    "list_role_rules",
    "revoke_access",
    "revoke_role",
    "update_meeting_type",
]
