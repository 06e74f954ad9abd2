"""Meeting scheduling and lifecycle."""
from __future__ import annotations

import logging

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from council.core.config import Settings
from council.models import (
    MEETING_STATUS_ORDER,
    AgendaItem,
    AgendaItemType,
    Meeting,
    MeetingParticipant,
    MeetingStatus,
)
from council.schemas.meeting import MeetingCreate, MeetingUpdate
from council.services.meeting_types import get_meeting_type

logger = logging.getLogger(__name__)


class MeetingError(RuntimeError):
    """Base exception for meeting operations."""


class MeetingNotFoundError(MeetingError):
    """Raised when a meeting identifier does not exist."""


class InvalidMeetingTransitionError(MeetingError):
    """Raised when a status change would move a meeting backwards."""


class InactiveMeetingTypeError(MeetingError):
    """Raised when scheduling against a deactivated meeting type."""


def get_meeting(session: Session, meeting_id: int) -> Meeting:
    meeting = session.get(Meeting, meeting_id)
    if meeting is None:
        raise MeetingNotFoundError(f"Meeting {meeting_id} not found")
    return meeting


def _ensure_active_type(session: Session, meeting_type_id: int | None) -> None:
    if meeting_type_id is None:
        return
    if not get_meeting_type(session, meeting_type_id).is_active:
        raise InactiveMeetingTypeError(f"Meeting type {meeting_type_id} is inactive")


def check_meeting_transition(current: MeetingStatus, target: MeetingStatus) -> None:
    if MEETING_STATUS_ORDER.index(target) < MEETING_STATUS_ORDER.index(current):
        raise InvalidMeetingTransitionError(
            f"Cannot move meeting from {current.value} back to {target.value}"
        )


def create_meeting(
    session: Session, payload: MeetingCreate, *, created_by: int, settings: Settings
) -> Meeting:
    """Create a meeting together with its procedural opening agenda item."""

    _ensure_active_type(session, payload.meeting_type_id)
    meeting = Meeting(**payload.model_dump(), created_by=created_by)
    meeting.agenda_items.append(
        AgendaItem(
            title=settings.default_opening_item_title,
            duration=settings.default_opening_item_duration,
            type=AgendaItemType.PROCEDURAL,
            order_index=0,
        )
    )
    session.add(meeting)
    session.commit()
    session.refresh(meeting)
    logger.info("meeting created", extra={"meeting_id": meeting.id, "created_by": created_by})
    return meeting


def list_meetings_for_user(session: Session, user_id: int) -> list[Meeting]:
    participant_meetings = select(MeetingParticipant.meeting_id).where(
        MeetingParticipant.user_id == user_id
    )
    statement = (
        select(Meeting)
        .where(or_(Meeting.created_by == user_id, Meeting.id.in_(participant_meetings)))
        .order_by(Meeting.date.desc(), Meeting.id.desc())
    )
    return list(session.scalars(statement).unique())


def update_meeting(session: Session, meeting_id: int, payload: MeetingUpdate) -> Meeting:
    meeting = get_meeting(session, meeting_id)
    changes = payload.model_dump(exclude_unset=True)
    if "meeting_type_id" in changes:
        _ensure_active_type(session, changes["meeting_type_id"])
    if changes.get("status") is not None:
        check_meeting_transition(meeting.status, changes["status"])
    for field, value in changes.items():
        if value is None and field in {"title", "date", "status"}:
            continue
        setattr(meeting, field, value)
    session.commit()
    session.refresh(meeting)
    return meeting


def delete_meeting(session: Session, meeting_id: int) -> None:
    meeting = get_meeting(session, meeting_id)
    session.delete(meeting)
    session.commit()
    logger.info("meeting deleted", extra={"meeting_id": meeting_id})


__all__ = [
    "InactiveMeetingTypeError",
    "InvalidMeetingTransitionError",
    "MeetingError",
    "MeetingNotFoundError",
    "check_meeting_transition",
    "create_meeting",
    "delete_meeting",
    "get_meeting",
    "list_meetings_for_user",
    "update_meeting",
]
