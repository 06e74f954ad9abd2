"""Agenda endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from council.api.deps import get_db_session
from council.api.routes.auth import AuthenticatedUser, get_current_user, require_permission
from council.schemas.agenda import (
    AgendaContentUpdate,
    AgendaItemCreate,
    AgendaItemRead,
    AgendaItemTree,
    AgendaItemUpdate,
)
from council.services import agenda, meetings

router = APIRouter()


def _http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, agenda.InvalidAgendaTransitionError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    if isinstance(exc, (agenda.InvalidParentError, agenda.AgendaCycleError)):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.get("/meetings/{meeting_id}/agenda", response_model=list[AgendaItemRead])
def list_agenda(
    meeting_id: int,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> list[AgendaItemRead]:
    try:
        items = agenda.list_agenda_items(session, meeting_id)
    except meetings.MeetingNotFoundError as exc:
        raise _http_error(exc) from exc
    return [AgendaItemRead.model_validate(item) for item in items]


@router.get("/meetings/{meeting_id}/agenda/tree", response_model=list[AgendaItemTree])
def agenda_tree(
    meeting_id: int,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> list[AgendaItemTree]:
    try:
        nodes = agenda.build_agenda_tree(agenda.list_agenda_items(session, meeting_id))
    except (meetings.MeetingNotFoundError, agenda.AgendaError) as exc:
        raise _http_error(exc) from exc
    return [
        AgendaItemTree(
            **AgendaItemRead.model_validate(node.item).model_dump(),
            subsections=[AgendaItemRead.model_validate(child) for child in node.subsections],
        )
        for node in nodes
    ]


@router.post(
    "/meetings/{meeting_id}/agenda",
    response_model=AgendaItemRead,
    status_code=status.HTTP_201_CREATED,
)
def create_agenda_item(
    meeting_id: int,
    payload: AgendaItemCreate,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(require_permission("can_manage_agenda")),
) -> AgendaItemRead:
    try:
        item = agenda.create_agenda_item(session, meeting_id, payload)
    except (meetings.MeetingNotFoundError, agenda.AgendaError) as exc:
        raise _http_error(exc) from exc
    return AgendaItemRead.model_validate(item)


@router.get("/agenda/{item_id}", response_model=AgendaItemRead)
def get_agenda_item(
    item_id: int,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(get_current_user),
) -> AgendaItemRead:
    try:
        item = agenda.get_agenda_item(session, item_id)
    except agenda.AgendaError as exc:
        raise _http_error(exc) from exc
    return AgendaItemRead.model_validate(item)


@router.put("/agenda/{item_id}", response_model=AgendaItemRead)
def update_agenda_item(
    item_id: int,
    payload: AgendaItemUpdate,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(require_permission("can_manage_agenda")),
) -> AgendaItemRead:
    try:
        item = agenda.update_agenda_item(session, item_id, payload)
    except agenda.AgendaError as exc:
        raise _http_error(exc) from exc
    return AgendaItemRead.model_validate(item)


@router.put("/agenda/{item_id}/content", response_model=AgendaItemRead)
def update_agenda_content(
    item_id: int,
    payload: AgendaContentUpdate,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(require_permission("can_edit")),
) -> AgendaItemRead:
    try:
        item = agenda.update_content(session, item_id, payload.content)
    except agenda.AgendaError as exc:
        raise _http_error(exc) from exc
    return AgendaItemRead.model_validate(item)


@router.delete("/agenda/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_agenda_item(
    item_id: int,
    session: Session = Depends(get_db_session),
    _: AuthenticatedUser = Depends(require_permission("can_manage_agenda")),
) -> Response:
    try:
        agenda.delete_agenda_item(session, item_id)
    except agenda.AgendaError as exc:
        raise _http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["router"]
