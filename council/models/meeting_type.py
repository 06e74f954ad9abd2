"""Meeting type and access grant ORM models."""
from __future__ import annotations

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from council.models.base import Base, TimestampMixin


class MeetingType(TimestampMixin, Base):
    """Category of meeting, e.g. a national council or a working group."""

    __tablename__ = "meeting_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    color: Mapped[str] = mapped_column(String(7), nullable=False, default="#3B82F6")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    access_rules = relationship(
        "MeetingTypeAccess", back_populates="meeting_type", cascade="all, delete-orphan"
    )
    role_rules = relationship(
        "MeetingTypeRole", back_populates="meeting_type", cascade="all, delete-orphan"
    )
    meetings = relationship("Meeting", back_populates="meeting_type")


class MeetingTypeAccess(TimestampMixin, Base):
    """Grants a user or a whole company access to a meeting type."""

    __tablename__ = "meeting_type_access"
    __table_args__ = (
        UniqueConstraint(
            "meeting_type_id", "user_id", "company_id", name="uq_meeting_type_access_grantee"
        ),
        Index("ix_meeting_type_access_meeting_type_id", "meeting_type_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    meeting_type_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("meeting_types.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True
    )
    company_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=True
    )
    access_level: Mapped[str] = mapped_column(String(50), nullable=False, default="participant")

    meeting_type = relationship("MeetingType", back_populates="access_rules")
    user = relationship("User")
    company = relationship("Company")


class MeetingTypeRole(TimestampMixin, Base):
    """Grants every holder of a role access to a meeting type."""

    __tablename__ = "meeting_type_roles"
    __table_args__ = (
        UniqueConstraint("meeting_type_id", "role", name="uq_meeting_type_roles_type_role"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    meeting_type_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("meeting_types.id", ondelete="CASCADE"), nullable=False
    )
    role: Mapped[str] = mapped_column(String(50), nullable=False)

    meeting_type = relationship("MeetingType", back_populates="role_rules")


__all__ = ["MeetingType", "MeetingTypeAccess", "MeetingTypeRole"]
