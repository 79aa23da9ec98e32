"""Admin dashboard schemas."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import AppRole


class ChatStatsResponse(BaseModel):
    """Wellness chat totals across all users."""

    daily_messages: int = Field(alias="dailyMessages")
    monthly_messages: int = Field(alias="monthlyMessages")
    subscribers: int

    model_config = ConfigDict(populate_by_name=True)


class RoleChangeRequest(BaseModel):
    """Grant or revoke a tier role for a user."""

    action: Literal["add", "remove"]
    role: AppRole
    user_id: str = Field(..., min_length=1, alias="userId")

    model_config = ConfigDict(populate_by_name=True)


class RoleChangeResponse(BaseModel):
    ok: bool
    message: str
