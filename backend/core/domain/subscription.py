"""Subscription domain rules.

Everything here is a pure function of subscription state and a clock value.
The service layer decides when to persist; this module only decides what
the answer is.
"""
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Optional


class SubscriptionStatus(str, Enum):
    """Subscription status as reported by the billing gateway."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    PENDING = "PENDING"
    UNSUBSCRIBE = "UNSUBSCRIBE"
    RENEW = "RENEW"


class EligibilityReason(str, Enum):
    ACTIVE = "active"
    EXPIRED = "expired"
    UNSUBSCRIBED = "unsubscribed"
    INACTIVE = "inactive"
    PENDING = "pending"
    NO_SUBSCRIPTION = "no_subscription"


@dataclass(frozen=True)
class Eligibility:
    """Outcome of an access check against a subscription."""

    eligible: bool
    reason: EligibilityReason
    expired: bool = False


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Return *value* as an aware UTC datetime.

    Some drivers (SQLite) hand back naive datetimes for timezone-aware
    columns; those are stored in UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def is_expired(end: Optional[datetime], now: datetime) -> bool:
    """A subscription without an end date never expires."""
    end = ensure_utc(end)
    return end is not None and end < ensure_utc(now)


def evaluate_eligibility(
    status: Optional[str],
    end: Optional[datetime],
    now: Optional[datetime] = None,
) -> Eligibility:
    """Decide whether a subscription grants access to gated content.

    Eligible if and only if the status is ACTIVE and the end date is either
    absent or not yet in the past.
    """
    now = now or datetime.now(UTC)
    expired = is_expired(end, now)

    if status is None:
        return Eligibility(False, EligibilityReason.NO_SUBSCRIPTION, expired)
    if status == SubscriptionStatus.ACTIVE.value:
        if expired:
            return Eligibility(False, EligibilityReason.EXPIRED, True)
        return Eligibility(True, EligibilityReason.ACTIVE)
    if status == SubscriptionStatus.UNSUBSCRIBE.value:
        return Eligibility(False, EligibilityReason.UNSUBSCRIBED, expired)
    if status == SubscriptionStatus.PENDING.value:
        return Eligibility(False, EligibilityReason.PENDING, expired)
    return Eligibility(False, EligibilityReason.INACTIVE, expired)


def needs_lazy_expiry(status: Optional[str], end: Optional[datetime], now: datetime) -> bool:
    """True when an ACTIVE subscription has run past its end date."""
    return status == SubscriptionStatus.ACTIVE.value and is_expired(end, now)


def extend_subscription_end(
    status: Optional[str],
    current_end: Optional[datetime],
    period_days: int,
    now: Optional[datetime] = None,
) -> datetime:
    """Compute the end date after a charge or renewal.

    An ACTIVE, unexpired subscription is extended from its current end so
    no paid time is lost; anything else restarts from *now*.
    """
    now = ensure_utc(now or datetime.now(UTC))
    current_end = ensure_utc(current_end)
    if (
        status == SubscriptionStatus.ACTIVE.value
        and current_end is not None
        and current_end >= now
    ):
        return current_end + timedelta(days=period_days)
    return now + timedelta(days=period_days)


def trial_window(created_at: datetime, trial_days: int) -> tuple[datetime, datetime]:
    """Start and end of the free trial granted at signup."""
    start = ensure_utc(created_at)
    return start, start + timedelta(days=trial_days)
