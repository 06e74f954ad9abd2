"""Company ORM model."""
from __future__ import annotations

from sqlalchemy import Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from council.models.base import Base, TimestampMixin


class Company(TimestampMixin, Base):
    """Member organisation represented at council meetings."""

    __tablename__ = "companies"
    __table_args__ = (UniqueConstraint("siret", name="uq_companies_siret"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    siret: Mapped[str | None] = mapped_column(String(14))
    address: Mapped[str | None] = mapped_column(Text)
    phone: Mapped[str | None] = mapped_column(String(20))
    email: Mapped[str | None] = mapped_column(String(255))
    sector: Mapped[str | None] = mapped_column(String(100))
    description: Mapped[str | None] = mapped_column(Text)

    users = relationship("User", back_populates="company", passive_deletes=True)


__all__ = ["Company"]
