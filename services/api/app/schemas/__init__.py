"""Pydantic schemas for API request/response validation."""

from app.schemas.admin import ChatStatsResponse, RoleChangeRequest, RoleChangeResponse
from app.schemas.chat import (
    ChatRequest,
    ChatResponse,
    UsageStatusResponse,
    VisitorChatMessage,
    VisitorChatRequest,
)
from app.schemas.faq import FaqCreate, FaqResponse, FaqUpdate

__all__ = [
    # Admin
    "ChatStatsResponse",
    "RoleChangeRequest",
    "RoleChangeResponse",
    # Chat
    "ChatRequest",
    "ChatResponse",
    "UsageStatusResponse",
    "VisitorChatMessage",
    "VisitorChatRequest",
    # FAQ
    "FaqCreate",
    "FaqResponse",
    "FaqUpdate",
]
