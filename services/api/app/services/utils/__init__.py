"""Internal utility services."""

from app.services.utils.faq import (
    CacheHit,
    CacheMiss,
    load_active_faqs,
    match_faq,
    record_faq_hit,
)
from app.services.utils.roles import (
    count_subscribers,
    get_user_roles,
    grant_role,
    revoke_role,
)
from app.services.utils.usage import (
    Allowed,
    QuotaExceeded,
    TierPolicy,
    UsageService,
    UsageStatus,
)

__all__ = [
    "CacheHit",
    "CacheMiss",
    "load_active_faqs",
    "match_faq",
    "record_faq_hit",
    "count_subscribers",
    "get_user_roles",
    "grant_role",
    "revoke_role",
    "Allowed",
    "QuotaExceeded",
    "TierPolicy",
    "UsageService",
    "UsageStatus",
]
