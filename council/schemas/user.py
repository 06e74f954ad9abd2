"""Pydantic schemas for user resources."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from council.models.user import UserRole
from council.schemas.company import CompanySummary


class UserBase(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    role: str = Field(default=UserRole.COUNCIL_MEMBER.value, max_length=50)
    roles: list[str] | None = None
    company_id: int | None = None
    permissions: dict[str, bool] = Field(default_factory=dict)
    profile_image_url: str | None = Field(default=None, max_length=500)


class UserCreate(UserBase):
    password: str = Field(..., min_length=6, max_length=128)


class UserUpdate(BaseModel):
    email: str | None = Field(default=None, min_length=3, max_length=255)
    password: str | None = Field(default=None, min_length=6, max_length=128)
    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    role: str | None = Field(default=None, max_length=50)
    roles: list[str] | None = None
    company_id: int | None = None
    permissions: dict[str, bool] | None = None
    profile_image_url: str | None = Field(default=None, max_length=500)


class UserRead(UserBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    company: CompanySummary | None = None
    created_at: datetime | None = None


class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    first_name: str
    last_name: str
    role: str
    company_id: int | None = None


__all__ = ["UserBase", "UserCreate", "UserRead", "UserSummary", "UserUpdate"]
