"""Wellness chat endpoints."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth.dependencies import get_current_user
from app.auth.schemas import User
from app.database.base import utc_today
from app.database.session import get_db
from app.dependencies.roles import get_current_user_roles
from app.models.enums import AppRole
from app.schemas.chat import ChatRequest, ChatResponse, UsageStatusResponse
from app.services.core.wellness_chat import answer_chat_message
from app.services.providers.ai_gateway import AIGatewayClient, get_ai_gateway
from app.services.utils.usage import TierPolicy, UsageService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("", response_model=ChatResponse, response_model_exclude_none=True)
async def send_chat_message(
    data: ChatRequest,
    user: User = Depends(get_current_user),
    roles: list[AppRole] = Depends(get_current_user_roles),
    db: Session = Depends(get_db),
    gateway: AIGatewayClient = Depends(get_ai_gateway),
) -> ChatResponse:
    """
    Answer a wellness chat message.

    FAQ answers come back with isCached=true and cost nothing. Generated
    answers use one of the day's messages and report remaining/limit.
    Quota and AI gateway errors are rendered by the handlers in app.main.
    """
    answer = await answer_chat_message(
        db,
        user_id=user.id,
        roles=roles,
        message=data.message,
        today=utc_today(),
        generator=gateway,
    )
    return ChatResponse(
        message=answer.message,
        is_cached=answer.is_cached,
        remaining=answer.remaining,
        limit=answer.limit,
    )


@router.get("/usage", response_model=UsageStatusResponse)
def get_chat_usage(
    user: User = Depends(get_current_user),
    roles: list[AppRole] = Depends(get_current_user_roles),
    db: Session = Depends(get_db),
) -> UsageStatusResponse:
    """Get the current user's message allowance for today."""
    policy = TierPolicy.from_settings()
    tier = policy.resolve_tier(roles)
    usage = UsageService.get_status(db, user.id, tier, utc_today(), policy)
    return UsageStatusResponse(
        tier=usage.tier,
        daily_count=usage.daily_count,
        monthly_count=usage.monthly_count,
        limit=usage.limit,
        remaining=usage.remaining,
        last_reset_date=usage.last_reset_date,
    )
