"""Agenda item ORM model."""
from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from council.models.base import Base, TimestampMixin, value_enum


class AgendaItemType(str, enum.Enum):
    PROCEDURAL = "procedural"
    PRESENTATION = "presentation"
    DISCUSSION = "discussion"


class AgendaItemStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


AGENDA_STATUS_ORDER: tuple[AgendaItemStatus, ...] = tuple(AgendaItemStatus)


class AgendaItem(TimestampMixin, Base):
    """One line of a meeting agenda; sub-items point at their parent."""

    __tablename__ = "agenda_items"
    __table_args__ = (
        Index("ix_agenda_items_meeting_id", "meeting_id"),
        Index("ix_agenda_items_parent_id", "parent_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    meeting_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("meetings.id", ondelete="CASCADE"), nullable=False
    )
    parent_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("agenda_items.id", ondelete="CASCADE"), nullable=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    content: Mapped[str | None] = mapped_column(Text)
    duration: Mapped[int] = mapped_column(Integer, nullable=False)
    type: Mapped[AgendaItemType] = mapped_column(
        value_enum(AgendaItemType, "agenda_item_type"), nullable=False
    )
    visual_link: Mapped[str | None] = mapped_column(Text)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[AgendaItemStatus] = mapped_column(
        value_enum(AgendaItemStatus, "agenda_item_status"),
        nullable=False,
        default=AgendaItemStatus.PENDING,
    )
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    meeting = relationship("Meeting", back_populates="agenda_items")
    parent = relationship("AgendaItem", remote_side=[id], back_populates="subsections")
    subsections = relationship(
        "AgendaItem",
        back_populates="parent",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    votes = relationship(
        "Vote", back_populates="agenda_item", cascade="all, delete-orphan", passive_deletes=True
    )


__all__ = ["AGENDA_STATUS_ORDER", "AgendaItem", "AgendaItemStatus", "AgendaItemType"]
