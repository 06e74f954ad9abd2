"""Meeting endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from council.api.deps import get_db_session
from council.api.routes.auth import AuthenticatedUser, get_current_user, require_permission
from council.core.config import get_settings
from council.schemas.meeting import MeetingCreate, MeetingRead, MeetingUpdate
from council.services import meeting_types, meetings

router = APIRouter(prefix="/meetings")


def _http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, meetings.InvalidMeetingTransitionError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    if isinstance(exc, meetings.InactiveMeetingTypeError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.get("", response_model=list[MeetingRead])
def list_meetings(
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> list[MeetingRead]:
    return [
        MeetingRead.model_validate(meeting)
        for meeting in meetings.list_meetings_for_user(session, user.user_id)
    ]


@router.post("", response_model=MeetingRead, status_code=status.HTTP_201_CREATED)
def create_meeting(
    payload: MeetingCreate,
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(require_permission("can_create_meetings")),
) -> MeetingRead:
    try:
        meeting = meetings.create_meeting(
            session, payload, created_by=user.user_id, settings=get_settings()
        )
    except (meetings.MeetingError, meeting_types.MeetingTypeError) as exc:
        raise _http_error(exc) from exc
    return MeetingRead.model_validate(meeting)


@router.get("/{meeting_id}", response_model=MeetingRead)
def get_meeting(
    meeting_id: int,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> MeetingRead:
    try:
        meeting = meetings.get_meeting(session, meeting_id)
    except meetings.MeetingError as exc:
        raise _http_error(exc) from exc
    return MeetingRead.model_validate(meeting)


@router.put("/{meeting_id}", response_model=MeetingRead)
def update_meeting(
    meeting_id: int,
    payload: MeetingUpdate,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(require_permission("can_create_meetings")),
) -> MeetingRead:
    try:
        meeting = meetings.update_meeting(session, meeting_id, payload)
    except (meetings.MeetingError, meeting_types.MeetingTypeError) as exc:
        raise _http_error(exc) from exc
    return MeetingRead.model_validate(meeting)


@router.delete("/{meeting_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_meeting(
    meeting_id: int,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(require_permission("can_create_meetings")),
) -> Response:
    try:
        meetings.delete_meeting(session, meeting_id)
    except meetings.MeetingError as exc:
        raise _http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["router"]
