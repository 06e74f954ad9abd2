"""Schemas for meeting rosters and company seats."""
from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from council.models.meeting import ParticipantStatus
from council.schemas.company import CompanySummary
from council.schemas.user import UserSummary


class ParticipantAdd(BaseModel):
    user_id: int


class ParticipantStatusUpdate(BaseModel):
    status: ParticipantStatus
    proxy_company_id: int | None = None


class ParticipantWithStatus(ParticipantStatusUpdate):
    user_id: int


class ParticipantRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    meeting_id: int
    user_id: int
    status: ParticipantStatus
    proxy_company_id: int | None = None
    joined_at: datetime | None = None
    updated_by: int | None = None
    user: UserSummary | None = None
    proxy_company: CompanySummary | None = None


class CompanySeatRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    company_id: int
    company_name: str
    type: Literal["present", "proxy"] = Field(...)
    representative_id: int
    representative_name: str


__all__ = [
    "CompanySeatRead",
    "ParticipantAdd",
    "ParticipantRead",
    "ParticipantStatusUpdate",
    "ParticipantWithStatus",
]
