"""Schemas for meeting types and their access grants."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from council.schemas.company import CompanySummary
from council.schemas.user import UserSummary


class MeetingTypeBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    color: str = Field(default="#3B82F6", pattern=r"^#[0-9A-Fa-f]{6}$")


class MeetingTypeCreate(MeetingTypeBase):
    pass


class MeetingTypeUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    color: str | None = Field(default=None, pattern=r"^#[0-9A-Fa-f]{6}$")
    is_active: bool | None = None


class MeetingTypeRead(MeetingTypeBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    is_active: bool


class MeetingTypeAccessCreate(BaseModel):
    user_id: int | None = None
    company_id: int | None = None
    access_level: str = Field(default="participant", max_length=50)

    @model_validator(mode="after")
    def _exactly_one_grantee(self) -> "MeetingTypeAccessCreate":
        if (self.user_id is None) == (self.company_id is None):
            raise ValueError("exactly one of user_id or company_id must be provided")
        return self


class MeetingTypeAccessRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    meeting_type_id: int
    user_id: int | None = None
    company_id: int | None = None
    access_level: str
    user: UserSummary | None = None
    company: CompanySummary | None = None


class MeetingTypeRoleCreate(BaseModel):
    role: str = Field(..., min_length=1, max_length=50)


class MeetingTypeRoleRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    meeting_type_id: int
    role: str


__all__ = [
    "MeetingTypeAccessCreate",
    "MeetingTypeAccessRead",
    "MeetingTypeBase",
    "MeetingTypeCreate",
    "MeetingTypeRead",
    "MeetingTypeRoleCreate",
    "MeetingTypeRoleRead",
    "MeetingTypeUpdate",
]
