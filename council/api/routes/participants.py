"""Meeting roster endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from council.api.deps import get_db_session
from council.api.routes.auth import AuthenticatedUser, get_current_user, require_permission
from council.schemas.participant import (
    CompanySeatRead,
    ParticipantAdd,
    ParticipantRead,
    ParticipantStatusUpdate,
    ParticipantWithStatus,
)
from council.services import directory, meetings, participants

router = APIRouter(prefix="/meetings/{meeting_id}")

_LOOKUP_ERRORS = (
    meetings.MeetingNotFoundError,
    directory.DirectoryError,
    participants.ParticipantNotFoundError,
)


def _http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, participants.ProxyCompanyRequiredError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.get("/participants", response_model=list[ParticipantRead])
def list_participants(
    meeting_id: int,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> list[ParticipantRead]:
    try:
        rows = participants.list_participants(session, meeting_id)
    except _LOOKUP_ERRORS as exc:
        raise _http_error(exc) from exc
    return [ParticipantRead.model_validate(row) for row in rows]


@router.post("/participants", response_model=ParticipantRead, status_code=status.HTTP_201_CREATED)
def add_participant(
    meeting_id: int,
    payload: ParticipantAdd,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(require_permission("can_manage_participants")),
) -> ParticipantRead:
    try:
        participant = participants.add_participant(session, meeting_id, payload.user_id)
    except _LOOKUP_ERRORS as exc:
        raise _http_error(exc) from exc
    return ParticipantRead.model_validate(participant)


@router.post(
    "/participants/with-status", response_model=ParticipantRead, status_code=status.HTTP_201_CREATED
)
def add_participant_with_status(
    meeting_id: int,
    payload: ParticipantWithStatus,
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(require_permission("can_manage_participants")),
) -> ParticipantRead:
    try:
        participant = participants.set_participant_status(
            session,
            meeting_id,
            payload.user_id,
            payload.status,
            proxy_company_id=payload.proxy_company_id,
            updated_by=user.user_id,
        )
    except (*_LOOKUP_ERRORS, participants.ProxyCompanyRequiredError) as exc:
        raise _http_error(exc) from exc
    return ParticipantRead.model_validate(participant)


@router.put("/participants/{user_id}/status", response_model=ParticipantRead)
def update_participant_status(
    meeting_id: int,
    user_id: int,
    payload: ParticipantStatusUpdate,
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(require_permission("can_manage_participants")),
) -> ParticipantRead:
    try:
        participant = participants.set_participant_status(
            session,
            meeting_id,
            user_id,
            payload.status,
            proxy_company_id=payload.proxy_company_id,
            updated_by=user.user_id,
        )
    except (*_LOOKUP_ERRORS, participants.ProxyCompanyRequiredError) as exc:
        raise _http_error(exc) from exc
    return ParticipantRead.model_validate(participant)


@router.delete("/participants/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_participant(
    meeting_id: int,
    user_id: int,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(require_permission("can_manage_participants")),
) -> Response:
    try:
        participants.remove_participant(session, meeting_id, user_id)
    except _LOOKUP_ERRORS as exc:
        raise _http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/represented-companies", response_model=list[CompanySeatRead])
def represented_companies(
    meeting_id: int,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> list[CompanySeatRead]:
    try:
        meetings.get_meeting(session, meeting_id)
    except meetings.MeetingNotFoundError as exc:
        raise _http_error(exc) from exc
    return [
        CompanySeatRead.model_validate(seat)
        for seat in participants.represented_companies(session, meeting_id)
    ]


__all__ = ["router"]
