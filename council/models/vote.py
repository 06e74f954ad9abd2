"""Vote and vote response ORM models."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from council.models.base import Base


class Vote(Base):
    """A question put to the vote on an agenda item."""

    __tablename__ = "votes"
    __table_args__ = (Index("ix_votes_agenda_item_id", "agenda_item_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    agenda_item_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("agenda_items.id", ondelete="CASCADE"), nullable=False
    )
    question: Mapped[str] = mapped_column(Text, nullable=False)
    options: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    is_open: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_by: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    closed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    agenda_item = relationship("AgendaItem", back_populates="votes")
    creator = relationship("User")
    responses = relationship(
        "VoteResponse",
        back_populates="vote",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="VoteResponse.id",
    )


class VoteResponse(Base):
    """A single ballot; ``voter_key`` holds the identity the ballot counts for."""

    __tablename__ = "vote_responses"
    __table_args__ = (
        UniqueConstraint("vote_id", "voter_key", name="uq_vote_responses_vote_voter"),
        Index("ix_vote_responses_vote_id", "vote_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    vote_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("votes.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    option: Mapped[str] = mapped_column(String(100), nullable=False)
    voting_for_company_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("companies.id", ondelete="SET NULL"), nullable=True
    )
    cast_by_user_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    voter_key: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    vote = relationship("Vote", back_populates="responses")
    user = relationship("User", foreign_keys=[user_id])
    cast_by = relationship("User", foreign_keys=[cast_by_user_id])
    voting_for_company = relationship("Company")


__all__ = ["Vote", "VoteResponse"]
