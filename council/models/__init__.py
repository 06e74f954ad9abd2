"""ORM models package."""
from .agenda_item import AGENDA_STATUS_ORDER, AgendaItem, AgendaItemStatus, AgendaItemType
from .base import Base, TimestampMixin, utcnow
from .company import Company
from .meeting import (
    MEETING_STATUS_ORDER,
    Meeting,
    MeetingParticipant,
    MeetingStatus,
    ParticipantStatus,
)
from .meeting_type import MeetingType, MeetingTypeAccess, MeetingTypeRole
from .user import PERMISSION_FLAGS, User, UserRole, UserSession
from .vote import Vote, VoteResponse

__all__ = [
    "AGENDA_STATUS_ORDER",
    "AgendaItem",
    "AgendaItemStatus",
    "AgendaItemType",
    "Base",
    "Company",
    "MEETING_STATUS_ORDER",
    "Meeting",
    "MeetingParticipant",
    "MeetingStatus",
    "MeetingType",
    "MeetingTypeAccess",
    "MeetingTypeRole",
    "PERMISSION_FLAGS",
    "ParticipantStatus",
    "TimestampMixin",
    "User",
    "UserRole",
    "UserSession",
    "Vote",
    "VoteResponse",
    "utcnow",
]
