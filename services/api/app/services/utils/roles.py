"""Role lookups and grants on the user_roles table."""

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.enums import AppRole
from app.models.user_role import UserRole
from app.services.errors import StorageError

logger = logging.getLogger(__name__)


def get_user_roles(db: Session, user_id: str) -> list[AppRole]:
    """All roles granted to a user, possibly empty."""
    try:
        return list(db.scalars(select(UserRole.role).where(UserRole.user_id == user_id)))
    except SQLAlchemyError as e:
        logger.error(f"Role lookup failed for user {user_id}: {e}")
        raise StorageError() from e


def count_subscribers(db: Session) -> int:
    """Distinct users holding a paid tier (subscriber or admin)."""
    stmt = select(func.count(func.distinct(UserRole.user_id))).where(
        UserRole.role.in_([AppRole.SUBSCRIBER, AppRole.ADMIN])
    )
    try:
        return db.scalar(stmt) or 0
    except SQLAlchemyError as e:
        logger.error(f"Subscriber count failed: {e}")
        raise StorageError() from e


def grant_role(db: Session, user_id: str, role: AppRole) -> bool:
    """
    Give a user a role. Returns False if they already held it.

    Granting twice is not an error; the unique (user_id, role) constraint
    decides, so concurrent grants cannot create duplicates.
    """
    db.add(UserRole(user_id=user_id, role=role))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return False
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Granting {role.value} to user {user_id} failed: {e}")
        raise StorageError() from e
    return True


def revoke_role(db: Session, user_id: str, role: AppRole) -> bool:
    """Take a role away from a user. Returns False if they did not hold it."""
    try:
        result = db.execute(
            delete(UserRole).where(UserRole.user_id == user_id, UserRole.role == role)
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Revoking {role.value} from user {user_id} failed: {e}")
        raise StorageError() from e
    return result.rowcount > 0
