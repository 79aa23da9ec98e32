"""Role-based dependencies for FastAPI."""

import logging

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.auth.dependencies import get_current_user
from app.auth.schemas import User
from app.database.session import get_db
from app.models.enums import AppRole
from app.services.utils.roles import get_user_roles

logger = logging.getLogger(__name__)


def get_current_user_roles(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> list[AppRole]:
    """Roles held by the authenticated user (empty for free users)."""
    return get_user_roles(db, user.id)


def require_admin(
    user: User = Depends(get_current_user),
    roles: list[AppRole] = Depends(get_current_user_roles),
) -> User:
    """
    Dependency that only lets admins through.

    Usage:
        @router.get("/admin/chat-stats")
        def chat_stats(user: User = Depends(require_admin)):
            ...

    Raises:
        HTTPException 403 if the user is not an admin
    """
    if AppRole.ADMIN not in roles:
        logger.warning(f"Non-admin user {user.id} attempted an admin action")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user
