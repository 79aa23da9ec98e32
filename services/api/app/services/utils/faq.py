"""FAQ cache lookup for the wellness chat.

Keyword-overlap scoring decides whether a curated answer is relevant
enough to return instead of calling the AI gateway.
"""

import logging
from dataclasses import dataclass, field
from typing import Protocol, Sequence

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.wellness_faq import WellnessFaq
from app.services.errors import StorageError

logger = logging.getLogger(__name__)

# A single short substring hit must not return a cached answer
MIN_MATCHED_KEYWORDS = 2
MIN_SCORE = 15


class FaqEntry(Protocol):
    id: str
    answer: str
    keywords: list[str]
    is_active: bool


@dataclass(frozen=True)
class CacheHit:
    entry: FaqEntry
    score: int
    matched_keywords: list[str] = field(default_factory=list)

    @property
    def answer(self) -> str:
        return self.entry.answer


@dataclass(frozen=True)
class CacheMiss:
    pass


FaqMatch = CacheHit | CacheMiss


def score_entry(message_lower: str, words: set[str], keywords: Sequence[str]) -> tuple[int, list[str]]:
    """Score one entry's keywords against an already lowercased message.

    Exact word matches count double the keyword length, substring-only
    matches count the keyword length.
    """
    score = 0
    matched = []
    for keyword in keywords:
        kw = keyword.lower()
        if not kw or kw not in message_lower:
            continue
        matched.append(kw)
        score += len(kw) * 2 if kw in words else len(kw)
    return score, matched


def match_faq(message: str, entries: Sequence[FaqEntry]) -> FaqMatch:
    """
    Find the best FAQ answer for a chat message.

    Args:
        message: Raw user message
        entries: Candidate FAQ entries; inactive ones are skipped

    Returns:
        CacheHit for the highest scoring entry passing the relevance floor
        (first entry wins ties), otherwise CacheMiss
    """
    message_lower = message.lower()
    words = set(message_lower.split())

    best: CacheHit | None = None
    for entry in entries:
        if not entry.is_active:
            continue
        score, matched = score_entry(message_lower, words, entry.keywords or [])
        if len(matched) < MIN_MATCHED_KEYWORDS and score <= MIN_SCORE:
            continue
        if best is None or score > best.score:
            best = CacheHit(entry=entry, score=score, matched_keywords=matched)

    return best if best is not None else CacheMiss()


def load_active_faqs(db: Session) -> list[WellnessFaq]:
    """Active FAQ entries in a stable order so ties resolve the same way."""
    try:
        return list(
            db.scalars(
                select(WellnessFaq)
                .where(WellnessFaq.is_active.is_(True))
                .order_by(WellnessFaq.created_at, WellnessFaq.id)
            )
        )
    except SQLAlchemyError as e:
        logger.error(f"Failed to load FAQ entries: {e}")
        raise StorageError() from e


def record_faq_hit(db: Session, faq_id: str) -> None:
    """Atomically bump an entry's hit counter."""
    try:
        db.execute(
            update(WellnessFaq)
            .where(WellnessFaq.id == faq_id)
            .values(hit_count=func.coalesce(WellnessFaq.hit_count, 0) + 1)
            .execution_options(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to record hit for FAQ {faq_id}: {e}")
        raise StorageError() from e
