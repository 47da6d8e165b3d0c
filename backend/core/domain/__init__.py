# Domain rules
# Pure business logic with no framework or storage dependencies
from .content import ArticleStatus, can_disable, can_transition
from .localization import get_localized_content, parse_localized
from .subscription import (
    Eligibility,
    EligibilityReason,
    SubscriptionStatus,
    ensure_utc,
    evaluate_eligibility,
    extend_subscription_end,
)
from .user import UserRole

__all__ = [
    "ArticleStatus",
    "can_transition",
    "can_disable",
    "get_localized_content",
    "parse_localized",
    "Eligibility",
    "EligibilityReason",
    "SubscriptionStatus",
    "ensure_utc",
    "evaluate_eligibility",
    "extend_subscription_end",
    "UserRole",
]
