"""Meeting type and access-rule endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from council.api.deps import get_db_session
from council.api.routes.auth import AuthenticatedUser, get_current_user, require_permission
from council.schemas.meeting_type import (
    MeetingTypeAccessCreate,
    MeetingTypeAccessRead,
    MeetingTypeCreate,
    MeetingTypeRead,
    MeetingTypeRoleCreate,
    MeetingTypeRoleRead,
    MeetingTypeUpdate,
)
from council.schemas.user import UserSummary
from council.services import directory, meeting_types

router = APIRouter()


def _http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, meeting_types.DuplicateAccessRuleError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.get("/meeting-types", response_model=list[MeetingTypeRead])
def list_meeting_types(
    include_inactive: bool = False,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> list[MeetingTypeRead]:
    return [
        MeetingTypeRead.model_validate(meeting_type)
        for meeting_type in meeting_types.list_meeting_types(session, include_inactive=include_inactive)
    ]


@router.post("/meeting-types", response_model=MeetingTypeRead, status_code=status.HTTP_201_CREATED)
def create_meeting_type(
    payload: MeetingTypeCreate,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(require_permission("can_manage_users")),
) -> MeetingTypeRead:
    return MeetingTypeRead.model_validate(meeting_types.create_meeting_type(session, payload))


@router.get("/meeting-types/{meeting_type_id}", response_model=MeetingTypeRead)
def get_meeting_type(
    meeting_type_id: int,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> MeetingTypeRead:
    try:
        meeting_type = meeting_types.get_meeting_type(session, meeting_type_id)
    except meeting_types.MeetingTypeError as exc:
        raise _http_error(exc) from exc
    return MeetingTypeRead.model_validate(meeting_type)


@router.put("/meeting-types/{meeting_type_id}", response_model=MeetingTypeRead)
def update_meeting_type(
    meeting_type_id: int,
    payload: MeetingTypeUpdate,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(require_permission("can_manage_users")),
) -> MeetingTypeRead:
    try:
        meeting_type = meeting_types.update_meeting_type(session, meeting_type_id, payload)
    except meeting_types.MeetingTypeError as exc:
        raise _http_error(exc) from exc
    return MeetingTypeRead.model_validate(meeting_type)


@router.delete("/meeting-types/{meeting_type_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_meeting_type(
    meeting_type_id: int,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(require_permission("can_manage_users")),
) -> Response:
    try:
        meeting_types.deactivate_meeting_type(session, meeting_type_id)
    except meeting_types.MeetingTypeError as exc:
        raise _http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/meeting-types/{meeting_type_id}/access", response_model=list[MeetingTypeAccessRead])
def list_access(
    meeting_type_id: int,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> list[MeetingTypeAccessRead]:
    try:
        rules = meeting_types.list_access_rules(session, meeting_type_id)
    except meeting_types.MeetingTypeError as exc:
        raise _http_error(exc) from exc
    return [MeetingTypeAccessRead.model_validate(rule) for rule in rules]


@router.post(
    "/meeting-types/{meeting_type_id}/access",
    response_model=MeetingTypeAccessRead,
    status_code=status.HTTP_201_CREATED,
)
def grant_access(
    meeting_type_id: int,
    payload: MeetingTypeAccessCreate,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(require_permission("can_manage_users")),
) -> MeetingTypeAccessRead:
    try:
        rule = meeting_types.grant_access(session, meeting_type_id, payload)
    except (meeting_types.MeetingTypeError, directory.DirectoryError) as exc:
        raise _http_error(exc) from exc
    return MeetingTypeAccessRead.model_validate(rule)


@router.delete("/meeting-type-access/{access_id}", status_code=status.HTTP_204_NO_CONTENT)
def revoke_access(
    access_id: int,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(require_permission("can_manage_users")),
) -> Response:
    try:
        meeting_types.revoke_access(session, access_id)
    except meeting_types.MeetingTypeError as exc:
        raise _http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/meeting-types/{meeting_type_id}/roles", response_model=list[MeetingTypeRoleRead])
def list_roles(
    meeting_type_id: int,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> list[MeetingTypeRoleRead]:
    try:
        rules = meeting_types.list_role_rules(session, meeting_type_id)
    except meeting_types.MeetingTypeError as exc:
        raise _http_error(exc) from exc
    return [MeetingTypeRoleRead.model_validate(rule) for rule in rules]


@router.post(
    "/meeting-types/{meeting_type_id}/roles",
    response_model=MeetingTypeRoleRead,
    status_code=status.HTTP_201_CREATED,
)
def grant_role(
    meeting_type_id: int,
    payload: MeetingTypeRoleCreate,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(require_permission("can_manage_users")),
) -> MeetingTypeRoleRead:
    try:
        rule = meeting_types.grant_role(session, meeting_type_id, payload)
    except meeting_types.MeetingTypeError as exc:
        raise _http_error(exc) from exc
    return MeetingTypeRoleRead.model_validate(rule)


@router.delete("/meeting-type-roles/{role_rule_id}", status_code=status.HTTP_204_NO_CONTENT)
def revoke_role(
    role_rule_id: int,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(require_permission("can_manage_users")),
) -> Response:
    try:
        meeting_types.revoke_role(session, role_rule_id)
    except meeting_types.MeetingTypeError as exc:
        raise _http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/meeting-types/{meeting_type_id}/eligible-users", response_model=list[UserSummary])
def eligible_users(
    meeting_type_id: int,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> list[UserSummary]:
    try:
        users = meeting_types.eligible_users(session, meeting_type_id)
    except meeting_types.MeetingTypeError as exc:
        raise _http_error(exc) from exc
    return [UserSummary.model_validate(user) for user in users]


__all__ = ["router"]
