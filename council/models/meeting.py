"""Meeting and participant ORM models."""
from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from council.models.base import Base, TimestampMixin, value_enum


class MeetingStatus(str, enum.Enum):
    DRAFT = "draft"
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


MEETING_STATUS_ORDER: tuple[MeetingStatus, ...] = tuple(MeetingStatus)


class ParticipantStatus(str, enum.Enum):
    INVITED = "invited"
    PRESENT = "present"
    ABSENT = "absent"
    EXCUSED = "excused"
    PROXY = "proxy"


class Meeting(TimestampMixin, Base):
    """A council meeting with its roster and agenda."""

    __tablename__ = "meetings"
    __table_args__ = (Index("ix_meetings_created_by", "created_by"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[MeetingStatus] = mapped_column(
        value_enum(MeetingStatus, "meeting_status"), nullable=False, default=MeetingStatus.DRAFT
    )
    created_by: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    meeting_type_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("meeting_types.id", ondelete="SET NULL"), nullable=True
    )

    creator = relationship("User")
    meeting_type = relationship("MeetingType", back_populates="meetings")
    participants = relationship(
        "MeetingParticipant",
        back_populates="meeting",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    agenda_items = relationship(
        "AgendaItem",
        back_populates="meeting",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="AgendaItem.order_index",
    )


class MeetingParticipant(TimestampMixin, Base):
    """Roster entry tying a user to a meeting, optionally holding a company's proxy."""

    __tablename__ = "meeting_participants"
    __table_args__ = (Index("ix_meeting_participants_user_id", "user_id"),)

    meeting_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("meetings.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    status: Mapped[ParticipantStatus] = mapped_column(
        value_enum(ParticipantStatus, "participant_status"),
        nullable=False,
        default=ParticipantStatus.INVITED,
    )
    proxy_company_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("companies.id", ondelete="SET NULL"), nullable=True
    )
    joined_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    updated_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    meeting = relationship("Meeting", back_populates="participants")
    user = relationship("User", foreign_keys=[user_id])
    proxy_company = relationship("Company")


__all__ = [
    "MEETING_STATUS_ORDER",
    "Meeting",
    "MeetingParticipant",
    "MeetingStatus",
    "ParticipantStatus",
]
