"""Wellness chat orchestration: quota check, FAQ cache, AI escalation."""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable

from sqlalchemy.orm import Session

from app.config import get_settings
from app.models.enums import AppRole
from app.services.errors import QuotaExceededError
from app.services.prompts.wellness import build_wellness_prompt, load_recent_episodes
from app.services.providers.ai_gateway import ChatGenerator
from app.services.utils.faq import CacheHit, load_active_faqs, match_faq, record_faq_hit
from app.services.utils.usage import QuotaExceeded, TierPolicy, UsageService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChatAnswer:
    """Outcome of one chat message. remaining/limit are set only for generated answers."""

    message: str
    is_cached: bool
    remaining: int | None = None
    limit: int | None = None


async def answer_chat_message(
    db: Session,
    user_id: str,
    roles: Iterable[AppRole | str],
    message: str,
    today: date,
    generator: ChatGenerator,
    policy: TierPolicy | None = None,
    now: datetime | None = None,
) -> ChatAnswer:
    """
    Answer a wellness chat message from the FAQ cache or the AI gateway.

    Flow:
        1. Quota check (resets the daily count on a new day)
        2. FAQ match - a hit is returned without touching usage
        3. Miss - build the prompt from episode history, generate,
           then record the usage

    Args:
        db: Database session
        user_id: Authenticated user
        roles: Roles held by the user, used to pick the tier
        message: The user's message
        today: Current UTC date, the quota day
        generator: AI gateway client
        policy: Tier limits (defaults to configured limits)
        now: Current time, stored as last_message_at and used for Retry-After
            (defaults to now)

    Raises:
        QuotaExceededError: daily limit already reached
        StorageError: usage/FAQ/episode persistence failed
        GenerativeRateLimitedError, GenerativeCapacityExceededError,
        UnknownUpstreamError: AI gateway failures, no usage recorded
    """
    policy = policy or TierPolicy.from_settings()
    tier = policy.resolve_tier(roles)

    decision = UsageService.check_and_reserve(db, user_id, tier, today, policy)
    if isinstance(decision, QuotaExceeded):
        raise QuotaExceededError(
            limit=decision.limit,
            current=decision.current,
            upgrade_message=policy.upgrade_message(tier),
            retry_after=UsageService.seconds_until_midnight(now),
        )

    match = match_faq(message, load_active_faqs(db))
    if isinstance(match, CacheHit):
        record_faq_hit(db, match.entry.id)
        logger.info(
            f"FAQ cache hit for user {user_id}: faq={match.entry.id} "
            f"score={match.score} keywords={match.matched_keywords}"
        )
        return ChatAnswer(message=match.answer, is_cached=True)

    episodes = load_recent_episodes(db, user_id, get_settings().episode_context_limit)
    system_prompt = build_wellness_prompt(episodes)
    # Release the connection before the slow gateway call
    db.commit()

    answer = await generator.generate(system_prompt, message)

    new_count = UsageService.commit(db, user_id, today, now)
    logger.info(f"AI answer for user {user_id} (tier={tier}, {new_count}/{decision.limit} today)")

    return ChatAnswer(
        message=answer,
        is_cached=False,
        remaining=max(0, decision.limit - new_count),
        limit=decision.limit,
    )
