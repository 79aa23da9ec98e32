"""Admin endpoints for chat statistics, tier roles and FAQ curation."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.auth.schemas import User
from app.database.base import utc_today
from app.database.session import get_db
from app.dependencies.roles import require_admin
from app.models.enums import AppRole
from app.models.wellness_faq import WellnessFaq
from app.schemas.admin import ChatStatsResponse, RoleChangeRequest, RoleChangeResponse
from app.schemas.faq import FaqCreate, FaqResponse, FaqUpdate
from app.services.utils.roles import count_subscribers, grant_role, revoke_role
from app.services.utils.usage import UsageService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/chat-stats", response_model=ChatStatsResponse)
def get_chat_stats(
    user: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> ChatStatsResponse:
    """Messages sent today and this month, and the number of subscribers."""
    daily_total, monthly_total = UsageService.get_totals(db, utc_today())
    return ChatStatsResponse(
        daily_messages=daily_total,
        monthly_messages=monthly_total,
        subscribers=count_subscribers(db),
    )


# Roles that set a user's chat tier; admin is managed outside the API
MANAGEABLE_ROLES = (AppRole.SUBSCRIBER, AppRole.MODERATOR)


@router.post("/roles", response_model=RoleChangeResponse)
def change_role(
    data: RoleChangeRequest,
    user: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> RoleChangeResponse:
    """
    Grant or revoke the subscriber/moderator tier for a user.

    Granting a role the user already holds succeeds without change.

    Raises:
        HTTPException 403 for the admin role
        HTTPException 400 for roles that cannot be granted (free)
    """
    if data.role == AppRole.ADMIN:
        logger.warning(f"Admin {user.id} attempted to change the admin role of {data.user_id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin role cannot be modified via this endpoint",
        )
    if data.role not in MANAGEABLE_ROLES:
        raise HTTPException(status_code=400, detail=f"Role '{data.role.value}' cannot be managed")

    if data.action == "add":
        changed = grant_role(db, data.user_id, data.role)
        message = "Role added"
    else:
        changed = revoke_role(db, data.user_id, data.role)
        message = "Role removed"

    logger.info(
        f"Admin {user.id} {data.action} {data.role.value} for user {data.user_id} "
        f"(changed={changed})"
    )
    return RoleChangeResponse(ok=True, message=message)


@router.get("/faqs", response_model=list[FaqResponse])
def list_faqs(
    user: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> list[WellnessFaq]:
    """List all FAQ entries, including inactive ones."""
    return list(
        db.scalars(select(WellnessFaq).order_by(WellnessFaq.created_at, WellnessFaq.id))
    )


@router.post("/faqs", response_model=FaqResponse, status_code=status.HTTP_201_CREATED)
def create_faq(
    data: FaqCreate,
    user: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> WellnessFaq:
    """Add an entry to the FAQ cache."""
    faq = WellnessFaq(
        question=data.question,
        answer=data.answer,
        keywords=data.keywords,
        is_active=data.is_active,
        hit_count=0,
    )
    db.add(faq)
    db.commit()
    db.refresh(faq)

    logger.info(f"Admin {user.id} created FAQ {faq.id} with keywords {faq.keywords}")
    return faq


@router.patch("/faqs/{faq_id}", response_model=FaqResponse)
def update_faq(
    faq_id: str,
    data: FaqUpdate,
    user: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> WellnessFaq:
    """Edit or (de)activate an FAQ entry."""
    faq = db.get(WellnessFaq, faq_id)
    if not faq:
        raise HTTPException(status_code=404, detail="FAQ not found")

    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is None:
            continue
        setattr(faq, field, value)

    db.commit()
    db.refresh(faq)

    logger.info(f"Admin {user.id} updated FAQ {faq_id}: {sorted(update_data)}")
    return faq
