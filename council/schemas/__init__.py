"""Pydantic schemas package."""

from .agenda import (
    AgendaContentUpdate,
    AgendaItemCreate,
    AgendaItemRead,
    AgendaItemTree,
    AgendaItemUpdate,
)
from .auth import LoginRequest, MagicLinkRequest, MessageResponse
from .company import CompanyCreate, CompanyRead, CompanySummary, CompanyUpdate
from .meeting import MeetingCreate, MeetingRead, MeetingUpdate
from .meeting_type import (
    MeetingTypeAccessCreate,
    MeetingTypeAccessRead,
    MeetingTypeCreate,
    MeetingTypeRead,
    MeetingTypeRoleCreate,
    MeetingTypeRoleRead,
    MeetingTypeUpdate,
)
from .participant import (
    CompanySeatRead,
    ParticipantAdd,
    ParticipantRead,
    ParticipantStatusUpdate,
    ParticipantWithStatus,
)
from .user import UserCreate, UserRead, UserSummary, UserUpdate
from .vote import (
    CompanyVotesRead,
    EnhancedVoteRead,
    OptionResultRead,
    SectionVotesRead,
    VoteCastRequest,
    VoteCreate,
    VoteRead,
    VoteResponseRead,
    VoteResultsRead,
    VoteWithResults,
)

__all__ = [
    "AgendaContentUpdate",
    "AgendaItemCreate",
    "AgendaItemRead",
    "AgendaItemTree",
    "AgendaItemUpdate",
    "CompanyCreate",
    "CompanyRead",
    "CompanySeatRead",
    "CompanySummary",
    "CompanyUpdate",
    "CompanyVotesRead",
    "EnhancedVoteRead",
    "LoginRequest",
    "MagicLinkRequest",
    "MeetingCreate",
    "MeetingRead",
    "MeetingTypeAccessCreate",
    "MeetingTypeAccessRead",
    "MeetingTypeCreate",
    "MeetingTypeRead",
    "MeetingTypeRoleCreate",
    "MeetingTypeRoleRead",
    "MeetingTypeUpdate",
    "MeetingUpdate",
    "MessageResponse",
    "OptionResultRead",
    "ParticipantAdd",
    "ParticipantRead",
    "ParticipantStatusUpdate",
    "ParticipantWithStatus",
    "SectionVotesRead",
    "UserCreate",
    "UserRead",
    "UserSummary",
    "UserUpdate",
    "VoteCastRequest",
    "VoteCreate",
    "VoteRead",
    "VoteResponseRead",
    "VoteResultsRead",
    "VoteWithResults",
]
