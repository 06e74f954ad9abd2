"""Schemas for the authentication endpoints."""
from __future__ import annotations

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1)


class MagicLinkRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)


class MessageResponse(BaseModel):
    message: str


__all__ = ["LoginRequest", "MagicLinkRequest", "MessageResponse"]
