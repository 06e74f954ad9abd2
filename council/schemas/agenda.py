"""Pydantic schemas for agenda items."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from council.models.agenda_item import AgendaItemStatus, AgendaItemType


class AgendaItemBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    content: str | None = None
    duration: int = Field(..., ge=0)
    type: AgendaItemType
    visual_link: str | None = None
    order_index: int = Field(default=0, ge=0)
    parent_id: int | None = None


class AgendaItemCreate(AgendaItemBase):
    pass


class AgendaItemUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    content: str | None = None
    duration: int | None = Field(default=None, ge=0)
    type: AgendaItemType | None = None
    visual_link: str | None = None
    order_index: int | None = Field(default=None, ge=0)
    parent_id: int | None = None
    status: AgendaItemStatus | None = None


class AgendaContentUpdate(BaseModel):
    content: str


class AgendaItemRead(AgendaItemBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    meeting_id: int
    status: AgendaItemStatus
    started_at: datetime | None = None
    completed_at: datetime | None = None


class AgendaItemTree(AgendaItemRead):
    subsections: list[AgendaItemRead] = Field(default_factory=list)


__all__ = [
    "AgendaContentUpdate",
    "AgendaItemBase",
    "AgendaItemCreate",
    "AgendaItemRead",
    "AgendaItemTree",
    "AgendaItemUpdate",
]
