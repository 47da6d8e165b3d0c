"""
Subscription service.

Owns every write to a reader's subscription fields: trial registration,
lazy expiry, billing-gateway charges and renewals, and cancellation.
Concurrent billing events for the same reader are last-write-wins.
"""

import logging
from datetime import UTC, datetime
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from core.domain.subscription import (
    Eligibility,
    SubscriptionStatus,
    evaluate_eligibility,
    extend_subscription_end,
    needs_lazy_expiry,
    trial_window,
)
from core.domain.user import UserRole
from core.errors import InvalidCredentials, SubscriberNotFound
from core.security.password import PasswordHasher
from infrastructure.config.settings import settings
from infrastructure.database.models.notification import Notification, NotificationType
from infrastructure.database.models.user import User
from infrastructure.logging_config import mask_phone

logger = logging.getLogger(__name__)


class SubscriptionService:
    """Subscription lifecycle for readers identified by phone number."""

    def __init__(
        self,
        db: AsyncSession,
        password_hasher: Optional[PasswordHasher] = None,
        trial_days: Optional[int] = None,
        billing_period_days: Optional[int] = None,
    ):
        self.db = db
        self.password_hasher = password_hasher
        self.trial_days = trial_days if trial_days is not None else settings.trial_days
        self.billing_period_days = (
            billing_period_days if billing_period_days is not None else settings.billing_period_days
        )

    async def find_by_phone(self, phone: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.phone == phone.strip()))
        return result.scalar_one_or_none()

    async def get_by_phone(self, phone: str) -> User:
        user = await self.find_by_phone(phone)
        if user is None:
            raise SubscriberNotFound()
        return user

    async def apply_lazy_expiry(self, user: User, now: Optional[datetime] = None) -> bool:
        """Flip an expired ACTIVE subscription to INACTIVE.

        The UPDATE is conditional on the row still being ACTIVE, so repeated
        or concurrent calls are harmless. Returns True only when this call
        changed the row.
        """
        now = now or datetime.now(UTC)
        if not needs_lazy_expiry(user.subscription_status, user.subscription_end, now):
            return False

        result = await self.db.execute(
            update(User)
            .where(
                User.id == user.id,
                User.subscription_status == SubscriptionStatus.ACTIVE.value,
            )
            .values(subscription_status=SubscriptionStatus.INACTIVE.value, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        set_committed_value(user, "subscription_status", SubscriptionStatus.INACTIVE.value)

        if result.rowcount:
            logger.info("Subscription expired for user %s", user.id)
            return True
        return False

    async def check_access(self, user: User, now: Optional[datetime] = None) -> Eligibility:
        """Eligibility check used by every gated path; applies lazy expiry first."""
        now = now or datetime.now(UTC)
        await self.apply_lazy_expiry(user, now)
        return evaluate_eligibility(user.subscription_status, user.subscription_end, now)

    async def create_reader(
        self,
        phone: str,
        password: str,
        name: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> User:
        """Create a reader on a free trial. The caller checks for duplicates."""
        if self.password_hasher is None:
            raise RuntimeError("SubscriptionService needs a password hasher to create readers")

        now = now or datetime.now(UTC)
        start, end = trial_window(now, self.trial_days)
        user = User(
            name=(name or "").strip(),
            phone=phone.strip(),
            password_hash=self.password_hasher.hash(password),
            role=UserRole.READER.value,
            subscription_status=SubscriptionStatus.ACTIVE.value,
            subscription_start=start,
            subscription_end=end,
            subscribed_at=now,
            activate_at=now,
            created_at=now,
            updated_at=now,
        )
        self.db.add(user)
        await self.db.commit()
        logger.info("Registered reader %s on a %d-day trial", mask_phone(user.phone), self.trial_days)
        return user

    async def register_trial(
        self,
        phone: str,
        password: str,
        name: Optional[str] = None,
    ) -> tuple[User, bool]:
        """Get-or-create a reader by phone.

        Unknown phones get a trial account; known phones must present the
        right password. Returns ``(user, is_new_user)``.
        """
        existing = await self.find_by_phone(phone)
        if existing is None:
            try:
                return await self.create_reader(phone, password, name), True
            except IntegrityError:
                # Lost a race with a concurrent registration of the same phone
                await self.db.rollback()
                existing = await self.get_by_phone(phone)

        if not self.password_hasher.verify(password, existing.password_hash):
            raise InvalidCredentials()

        await self.apply_lazy_expiry(existing)
        return existing, False

    async def verify_subscriber(self, phone: str, password: str) -> User:
        """Look up a subscriber, check their password and settle expiry."""
        user = await self.get_by_phone(phone)
        if not self.password_hasher.verify(password, user.password_hash):
            raise InvalidCredentials()
        await self.apply_lazy_expiry(user)
        return user

    async def charge(
        self,
        phone: str,
        period_days: Optional[int] = None,
        ref_no: Optional[str] = None,
        contract_no: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> User:
        """Apply a successful billing charge.

        Extends from the current end date while the subscription is still
        running, otherwise restarts from now. Status and dates are written
        in one commit.
        """
        user = await self.get_by_phone(phone)
        now = now or datetime.now(UTC)
        period = period_days if period_days is not None else self.billing_period_days

        user.subscription_end = extend_subscription_end(
            user.subscription_status, user.subscription_end, period, now
        )
        user.subscription_start = now
        user.subscription_status = SubscriptionStatus.ACTIVE.value
        user.last_billed_at = now
        user.activate_at = now
        if user.subscribed_at is None:
            user.subscribed_at = now
        if ref_no:
            user.ref_no = ref_no
        if contract_no:
            user.contract_no = contract_no

        await self.db.commit()
        logger.info(
            "Charged subscriber %s for %d days; ends %s",
            mask_phone(user.phone),
            period,
            user.subscription_end.isoformat(),
        )
        return user

    async def renew(
        self,
        phone: str,
        duration_days: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> User:
        """Renew with the same extension policy as a charge.

        The subscription start date only moves when the reader was not
        ACTIVE before (a reactivation).
        """
        user = await self.get_by_phone(phone)
        now = now or datetime.now(UTC)
        duration = duration_days if duration_days is not None else self.billing_period_days
        was_active = user.subscription_status == SubscriptionStatus.ACTIVE.value

        user.subscription_end = extend_subscription_end(
            user.subscription_status, user.subscription_end, duration, now
        )
        if not was_active or user.subscription_start is None:
            user.subscription_start = now
        user.subscription_status = SubscriptionStatus.ACTIVE.value
        user.activate_at = now
        user.last_billed_at = now
        if user.subscribed_at is None:
            user.subscribed_at = now

        await self.db.commit()
        logger.info("Renewed subscriber %s for %d days", mask_phone(user.phone), duration)
        return user

    async def cancel(self, user: User, reason: Optional[str] = None) -> User:
        """Mark the subscription UNSUBSCRIBE. Dates are kept for the audit trail."""
        user.subscription_status = SubscriptionStatus.UNSUBSCRIBE.value
        if reason and reason.strip():
            self.db.add(
                Notification(
                    user_id=user.id,
                    type=NotificationType.UNSUBSCRIBE_REASON.value,
                    content=reason.strip(),
                )
            )
        await self.db.commit()
        logger.info("Subscriber %s unsubscribed", mask_phone(user.phone))
        return user

    async def cancel_by_phone(self, phone: str, reason: Optional[str] = None) -> User:
        return await self.cancel(await self.get_by_phone(phone), reason)

    async def status_snapshot(self, phone: str) -> tuple[User, Eligibility]:
        """Current subscription state for a phone, after lazy expiry."""
        user = await self.get_by_phone(phone)
        eligibility = await self.check_access(user)
        return user, eligibility

    async def list_subscribers(self) -> list[User]:
        result = await self.db.execute(
            select(User)
            .where(User.role == UserRole.READER.value)
            .order_by(User.created_at.desc())
        )
        return list(result.scalars().all())
