"""User and persisted session ORM models."""
from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from council.models.base import Base, TimestampMixin


class UserRole(str, enum.Enum):
    SALARIED = "salaried"
    COUNCIL_MEMBER = "council_member"


PERMISSION_FLAGS: tuple[str, ...] = (
    "can_edit",
    "can_manage_agenda",
    "can_manage_users",
    "can_create_meetings",
    "can_export",
    "can_vote",
    "can_see_vote_results",
    "can_manage_participants",
)


class User(TimestampMixin, Base):
    """Staff member or council member able to sign in."""

    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        Index("ix_users_company_id", "company_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    role: Mapped[str] = mapped_column(String(50), nullable=False, default=UserRole.COUNCIL_MEMBER.value)
    roles: Mapped[list[str] | None] = mapped_column(JSON)
    company_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("companies.id", ondelete="SET NULL"), nullable=True
    )
    permissions: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    profile_image_url: Mapped[str | None] = mapped_column(String(500))

    company = relationship("Company", back_populates="users")
    sessions = relationship("UserSession", back_populates="user", cascade="all, delete-orphan")

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def role_names(self) -> set[str]:
        names = {self.role}
        names.update(self.roles or [])
        return names


class UserSession(Base):
    """Server-side record backing a signed session cookie."""

    __tablename__ = "sessions"
    __table_args__ = (Index("ix_sessions_expires_at", "expires_at"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    user = relationship("User", back_populates="sessions")


__all__ = ["PERMISSION_FLAGS", "User", "UserRole", "UserSession"]
