"""Wellness chat schemas."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import ChatRole


class ChatRequest(BaseModel):
    """Schema for a wellness chat message."""

    message: str = Field(..., min_length=1)


class ChatResponse(BaseModel):
    """
    Answer to a chat message.

    remaining/limit are only present for AI-generated answers; FAQ answers
    do not use quota.
    """

    message: str
    is_cached: bool = Field(alias="isCached")
    remaining: int | None = None
    limit: int | None = None

    model_config = ConfigDict(populate_by_name=True)


class UsageStatusResponse(BaseModel):
    """Schema for the current user's chat usage today."""

    tier: str
    daily_count: int = Field(alias="dailyCount")
    monthly_count: int = Field(alias="monthlyCount")
    limit: int
    remaining: int
    last_reset_date: date | None = Field(default=None, alias="lastResetDate")

    model_config = ConfigDict(populate_by_name=True)


class VisitorChatMessage(BaseModel):
    """One turn of a landing-page conversation."""

    role: ChatRole
    content: str = Field(..., min_length=1)


class VisitorChatRequest(BaseModel):
    """Schema for a visitor chat request; the client sends the whole history."""

    messages: list[VisitorChatMessage] = Field(..., min_length=1)
