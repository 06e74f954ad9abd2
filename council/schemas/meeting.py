"""Pydantic schemas for meetings."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from council.models.meeting import MeetingStatus


class MeetingBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    date: datetime
    meeting_type_id: int | None = None


class MeetingCreate(MeetingBase):
    status: MeetingStatus = Field(default=MeetingStatus.DRAFT)


class MeetingUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    date: datetime | None = None
    meeting_type_id: int | None = None
    status: MeetingStatus | None = None


class MeetingRead(MeetingBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    status: MeetingStatus
    created_by: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


__all__ = ["MeetingBase", "MeetingCreate", "MeetingRead", "MeetingUpdate"]
