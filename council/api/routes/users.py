"""User directory endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from council.api.deps import get_db_session
from council.api.routes.auth import AuthenticatedUser, get_current_user, require_permission
from council.schemas.meeting_type import MeetingTypeRead
from council.schemas.user import UserCreate, UserRead, UserUpdate
from council.services import directory, meeting_types

router = APIRouter(prefix="/users")


def _http_error(exc: directory.DirectoryError) -> HTTPException:
    if isinstance(exc, directory.DuplicateUserError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.get("", response_model=list[UserRead])
def list_users(
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> list[UserRead]:
    return [UserRead.model_validate(user) for user in directory.list_users(session)]


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreate,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(require_permission("can_manage_users")),
) -> UserRead:
    try:
        user = directory.create_user(session, payload)
    except directory.DirectoryError as exc:
        raise _http_error(exc) from exc
    return UserRead.model_validate(user)


@router.get("/{user_id}", response_model=UserRead)
def get_user(
    user_id: int,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> UserRead:
    try:
        user = directory.get_user(session, user_id)
    except directory.DirectoryError as exc:
        raise _http_error(exc) from exc
    return UserRead.model_validate(user)


@router.put("/{user_id}", response_model=UserRead)
def update_user(
    user_id: int,
    payload: UserUpdate,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(require_permission("can_manage_users")),
) -> UserRead:
    try:
        user = directory.update_user(session, user_id, payload)
    except directory.DirectoryError as exc:
        raise _http_error(exc) from exc
    return UserRead.model_validate(user)


@router.get("/{user_id}/meeting-types", response_model=list[MeetingTypeRead])
def user_meeting_types(
    user_id: int,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> list[MeetingTypeRead]:
    try:
        user = directory.get_user(session, user_id)
    except directory.DirectoryError as exc:
        raise _http_error(exc) from exc
    return [
        MeetingTypeRead.model_validate(meeting_type)
        for meeting_type in meeting_types.accessible_meeting_types(session, user)
    ]


__all__ = ["router"]
