"""Meeting rosters, attendance and company seats."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

from sqlalchemy import select
from sqlalchemy.orm import Session

from council.models import MeetingParticipant, ParticipantStatus, utcnow
from council.services.directory import get_company, get_user
from council.services.meetings import get_meeting

logger = logging.getLogger(__name__)

SeatType = Literal["present", "proxy"]
_REPRESENTING_STATUSES = (ParticipantStatus.PRESENT, ParticipantStatus.PROXY)


class ParticipantError(RuntimeError):
    """Base exception for roster operations."""


class ParticipantNotFoundError(ParticipantError):
    """Raised when the user is not on the meeting's roster."""


class ProxyCompanyRequiredError(ParticipantError):
    """Raised when a proxy status is set without naming the company represented."""


@dataclass(frozen=True, slots=True)
class CompanySeat:
    """A company entitled to vote in a meeting and the user holding its seat."""

    company_id: int
    company_name: str
    type: SeatType
    representative_id: int
    representative_name: str


def list_participants(session: Session, meeting_id: int) -> list[MeetingParticipant]:
    get_meeting(session, meeting_id)
    statement = (
        select(MeetingParticipant)
        .where(MeetingParticipant.meeting_id == meeting_id)
        .order_by(MeetingParticipant.user_id)
    )
    return list(session.scalars(statement))


def get_participant(session: Session, meeting_id: int, user_id: int) -> MeetingParticipant | None:
    return session.get(MeetingParticipant, (meeting_id, user_id))


def add_participant(session: Session, meeting_id: int, user_id: int) -> MeetingParticipant:
    """Invite a user; inviting someone already on the roster changes nothing."""

    get_meeting(session, meeting_id)
    get_user(session, user_id)
    participant = get_participant(session, meeting_id, user_id)
    if participant is not None:
        return participant
    participant = MeetingParticipant(
        meeting_id=meeting_id, user_id=user_id, status=ParticipantStatus.INVITED
    )
    session.add(participant)
    session.commit()
    session.refresh(participant)
    logger.info("participant invited", extra={"meeting_id": meeting_id, "user_id": user_id})
    return participant


def set_participant_status(
    session: Session,
    meeting_id: int,
    user_id: int,
    status: ParticipantStatus,
    *,
    proxy_company_id: int | None = None,
    updated_by: int | None = None,
) -> MeetingParticipant:
    """Upsert the roster row with a new attendance status."""

    get_meeting(session, meeting_id)
    get_user(session, user_id)
    if status == ParticipantStatus.PROXY:
        if proxy_company_id is None:
            raise ProxyCompanyRequiredError("A proxy participant must name the company represented")
        get_company(session, proxy_company_id)
    else:
        proxy_company_id = None

    participant = get_participant(session, meeting_id, user_id)
    if participant is None:
        participant = MeetingParticipant(meeting_id=meeting_id, user_id=user_id)
        session.add(participant)
    participant.status = status
    participant.proxy_company_id = proxy_company_id
    participant.updated_by = updated_by
    if status == ParticipantStatus.PRESENT and participant.joined_at is None:
        participant.joined_at = utcnow()
    session.commit()
    session.refresh(participant)
    logger.info(
        "participant status set",
        extra={
            "meeting_id": meeting_id,
            "user_id": user_id,
            "status": status.value,
            "proxy_company_id": proxy_company_id,
        },
    )
    return participant


def remove_participant(session: Session, meeting_id: int, user_id: int) -> None:
    """Drop a user from the roster; ballots already cast are kept."""

    get_meeting(session, meeting_id)
    participant = get_participant(session, meeting_id, user_id)
    if participant is None:
        raise ParticipantNotFoundError(f"User {user_id} is not a participant of meeting {meeting_id}")
    session.delete(participant)
    session.commit()
    logger.info("participant removed", extra={"meeting_id": meeting_id, "user_id": user_id})


def roster_user_ids(session: Session, meeting_id: int) -> set[int]:
    statement = select(MeetingParticipant.user_id).where(MeetingParticipant.meeting_id == meeting_id)
    return set(session.scalars(statement))


def represented_companies(session: Session, meeting_id: int) -> list[CompanySeat]:
    """Companies with a seat in the meeting.

    Present and proxy participants seat their own company; proxy
    participants additionally seat the company they hold a proxy for. A
    ``present`` seat takes precedence over a ``proxy`` seat, and among seats
    of the same kind the participant with the lowest user id wins.
    """

    statement = (
        select(MeetingParticipant)
        .where(
            MeetingParticipant.meeting_id == meeting_id,
            MeetingParticipant.status.in_(_REPRESENTING_STATUSES),
        )
        .order_by(MeetingParticipant.user_id)
    )
    seats: dict[int, CompanySeat] = {}

    def offer(company_id: int, company_name: str, seat_type: SeatType, participant: MeetingParticipant) -> None:
        current = seats.get(company_id)
        if current is not None and (current.type == "present" or seat_type == "proxy"):
            return
        seats[company_id] = CompanySeat(
            company_id=company_id,
            company_name=company_name,
            type=seat_type,
            representative_id=participant.user_id,
            representative_name=participant.user.display_name,
        )

    for participant in session.scalars(statement):
        company = participant.user.company
        if company is not None:
            offer(company.id, company.name, "present", participant)
        if participant.status == ParticipantStatus.PROXY and participant.proxy_company is not None:
            offer(participant.proxy_company.id, participant.proxy_company.name, "proxy", participant)

    return sorted(seats.values(), key=lambda seat: (seat.company_name, seat.company_id))


def proxy_seat_company_id(session: Session, meeting_id: int, user_id: int) -> int | None:
    participant = get_participant(session, meeting_id, user_id)
    if participant is None or participant.status != ParticipantStatus.PROXY:
        return None
    return participant.proxy_company_id


__all__ = [
    "CompanySeat",
    "ParticipantError",
    "ParticipantNotFoundError",
    "ProxyCompanyRequiredError",
    "add_participant",
    "get_participant",
    "list_participants",
    "proxy_seat_company_id",
    "remove_participant",
    "represented_companies",
    "roster_user_ids",
    "set_participant_status",
]
