"""Daily AI chat quota enforcement.

The governor works in two steps so FAQ cache hits never cost quota:

    decision = UsageService.check_and_reserve(db, user_id, tier, today)
    ... call the AI gateway ...
    new_count = UsageService.commit(db, user_id, today)

Each step is its own short transaction. No lock is held while the AI
gateway call is in flight.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, Mapping

from sqlalchemy import case, func, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database.base import utc_now
from app.models.enums import AppRole
from app.models.user_chat_usage import UserChatUsage
from app.services.errors import StorageError

logger = logging.getLogger(__name__)


def _tier_key(tier: AppRole | str) -> str:
    return tier.value if isinstance(tier, AppRole) else str(tier)


class TierPolicy:
    """
    Table of daily message limits keyed by tier name.

    A tier mapped to None exists but has no limit decided yet; requests
    at that tier get the fallback tier's limit and a warning is logged.
    Unknown tiers are treated the same way.
    """

    def __init__(
        self,
        limits: Mapping[str, int | None],
        fallback_tier: AppRole | str = AppRole.FREE,
    ):
        self.limits = {_tier_key(k): v for k, v in limits.items()}
        self.fallback_tier = _tier_key(fallback_tier)
        if self.limits.get(self.fallback_tier) is None:
            raise ValueError(
                f"Fallback tier '{self.fallback_tier}' must have a daily limit"
            )

    @classmethod
    def from_settings(cls) -> "TierPolicy":
        return cls(get_settings().tier_daily_limits)

    def is_defined(self, tier: AppRole | str) -> bool:
        return self.limits.get(_tier_key(tier)) is not None

    def daily_limit(self, tier: AppRole | str) -> int:
        key = _tier_key(tier)
        if not self.is_defined(key):
            logger.warning(
                f"No daily chat limit defined for tier '{key}', "
                f"applying the '{self.fallback_tier}' limit"
            )
            return self.limits[self.fallback_tier]
        return self.limits[key]

    def resolve_tier(self, roles: Iterable[AppRole | str]) -> str:
        """
        Pick the tier governing a user holding the given roles.

        The role with the highest defined limit wins (first one on ties).
        A known role without a limit is returned only when no role has one.
        """
        best: str | None = None
        undefined: str | None = None
        for role in roles:
            key = _tier_key(role)
            if key not in self.limits:
                continue
            if not self.is_defined(key):
                undefined = undefined or key
            elif best is None or self.limits[key] > self.limits[best]:
                best = key
        return best or undefined or self.fallback_tier

    def upgrade_message(self, tier: AppRole | str) -> str:
        """Text shown next to a quota rejection."""
        subscriber_limit = self.limits.get(AppRole.SUBSCRIBER.value)
        if subscriber_limit is not None and self.daily_limit(tier) < subscriber_limit:
            return f"Upgrade to subscriber for {subscriber_limit} messages per day."
        return "You have reached your daily limit."


@dataclass(frozen=True)
class Allowed:
    """The user may make one more AI call today."""

    tier: str
    limit: int
    current: int


@dataclass(frozen=True)
class QuotaExceeded:
    """The user's daily AI calls are used up."""

    tier: str
    limit: int
    current: int


UsageDecision = Allowed | QuotaExceeded


@dataclass(frozen=True)
class UsageStatus:
    """Read-only view of a user's usage for today."""

    tier: str
    daily_count: int
    monthly_count: int
    limit: int
    last_reset_date: date | None

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.daily_count)


class UsageService:
    """Reads and updates user_chat_usage rows."""

    @staticmethod
    def _get_or_create(db: Session, user_id: str, today: date) -> UserChatUsage:
        usage = db.scalar(select(UserChatUsage).where(UserChatUsage.user_id == user_id))
        if usage is not None:
            return usage

        usage = UserChatUsage(
            user_id=user_id,
            daily_count=0,
            monthly_count=0,
            last_reset_date=today,
        )
        db.add(usage)
        try:
            db.commit()
        except IntegrityError:
            # Another request for this user inserted the row first
            db.rollback()
            usage = db.scalar(select(UserChatUsage).where(UserChatUsage.user_id == user_id))
            if usage is None:
                raise
        return usage

    @staticmethod
    def check_and_reserve(
        db: Session,
        user_id: str,
        tier: AppRole | str,
        today: date,
        policy: TierPolicy | None = None,
    ) -> UsageDecision:
        """
        Decide whether the user may trigger one more AI call today.

        Resets the daily counter first when the stored reset date is not
        today, whether or not the request ends up allowed. Does not
        increment anything; call commit() once the AI call succeeded.

        Raises:
            StorageError if the usage row cannot be read or written
        """
        if not user_id:
            raise ValueError("user_id is required")
        policy = policy or TierPolicy.from_settings()
        tier_key = _tier_key(tier)

        try:
            usage = UsageService._get_or_create(db, user_id, today)

            if usage.last_reset_date != today:
                # Conditional so concurrent requests reset at most once
                db.execute(
                    update(UserChatUsage)
                    .where(
                        UserChatUsage.user_id == user_id,
                        or_(
                            UserChatUsage.last_reset_date.is_(None),
                            UserChatUsage.last_reset_date != today,
                        ),
                    )
                    .values(daily_count=0, last_reset_date=today)
                    .execution_options(synchronize_session=False)
                )
                db.commit()
                db.refresh(usage)
                logger.info(f"Reset daily chat count for user {user_id} on {today}")

            current = usage.daily_count
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Usage check failed for user {user_id}: {e}")
            raise StorageError() from e

        limit = policy.daily_limit(tier_key)
        if current >= limit:
            logger.info(
                f"Daily chat limit reached for user {user_id} "
                f"(tier={tier_key}, {current}/{limit})"
            )
            return QuotaExceeded(tier=tier_key, limit=limit, current=current)
        return Allowed(tier=tier_key, limit=limit, current=current)

    @staticmethod
    def commit(
        db: Session,
        user_id: str,
        today: date,
        now: datetime | None = None,
    ) -> int:
        """
        Record one AI call for the user. Returns the new daily count.

        A single UPDATE does the read-modify-write in the database, so
        concurrent commits for the same user never lose an increment.
        If the day rolled over since the quota check the count restarts at 1.

        Raises:
            StorageError if the row is missing or the update fails
        """
        now = now or utc_now()
        stmt = (
            update(UserChatUsage)
            .where(UserChatUsage.user_id == user_id)
            .values(
                daily_count=case(
                    (UserChatUsage.last_reset_date == today, UserChatUsage.daily_count + 1),
                    else_=1,
                ),
                monthly_count=UserChatUsage.monthly_count + 1,
                last_reset_date=today,
                last_message_at=now,
            )
            .returning(UserChatUsage.daily_count)
            .execution_options(synchronize_session=False)
        )
        try:
            new_count = db.execute(stmt).scalar_one_or_none()
            if new_count is None:
                db.rollback()
                raise StorageError()
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Usage commit failed for user {user_id}: {e}")
            raise StorageError() from e

        return new_count

    @staticmethod
    def get_status(
        db: Session,
        user_id: str,
        tier: AppRole | str,
        today: date,
        policy: TierPolicy | None = None,
    ) -> UsageStatus:
        """Snapshot of today's usage without writing anything."""
        policy = policy or TierPolicy.from_settings()
        try:
            usage = db.scalar(select(UserChatUsage).where(UserChatUsage.user_id == user_id))
        except SQLAlchemyError as e:
            logger.error(f"Usage lookup failed for user {user_id}: {e}")
            raise StorageError() from e

        if usage is None:
            daily, monthly, reset_date = 0, 0, None
        else:
            daily = usage.daily_count if usage.last_reset_date == today else 0
            monthly, reset_date = usage.monthly_count, usage.last_reset_date

        return UsageStatus(
            tier=_tier_key(tier),
            daily_count=daily,
            monthly_count=monthly,
            limit=policy.daily_limit(tier),
            last_reset_date=reset_date,
        )

    @staticmethod
    def get_totals(db: Session, today: date) -> tuple[int, int]:
        """Messages sent today and this month, summed over all users."""
        stmt = select(
            func.coalesce(
                func.sum(
                    case(
                        (UserChatUsage.last_reset_date == today, UserChatUsage.daily_count),
                        else_=0,
                    )
                ),
                0,
            ),
            func.coalesce(func.sum(UserChatUsage.monthly_count), 0),
        )
        try:
            daily_total, monthly_total = db.execute(stmt).one()
        except SQLAlchemyError as e:
            logger.error(f"Usage totals query failed: {e}")
            raise StorageError() from e
        return int(daily_total), int(monthly_total)

    @staticmethod
    def seconds_until_midnight(now: datetime | None = None) -> int:
        """Seconds until the quota day rolls over at midnight UTC."""
        now = now or utc_now()
        next_midnight = datetime.combine(
            now.date() + timedelta(days=1), time.min, tzinfo=timezone.utc
        )
        return int((next_midnight - now).total_seconds())
