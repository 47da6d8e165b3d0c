"""
Account service: credential checks, reader signup and staff provisioning.
"""

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.user import UserRole
from core.errors import (
    InvalidCredentials,
    ResourceConflict,
    SubscriptionInactive,
    UserNotFound,
    ValidationError,
)
from core.security.password import PasswordHasher
from infrastructure.database.models.content import Article
from infrastructure.database.models.user import User
from infrastructure.logging_config import mask_phone
from services.subscriptions import SubscriptionService

logger = logging.getLogger(__name__)


class AccountService:
    """Looks up, authenticates and provisions users."""

    def __init__(self, db: AsyncSession, password_hasher: PasswordHasher):
        self.db = db
        self.password_hasher = password_hasher
        self.subscriptions = SubscriptionService(db, password_hasher)

    async def get_user(self, user_id: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def find_by_identifier(self, identifier: str) -> Optional[User]:
        """Find a user by email (contains '@') or phone."""
        identifier = identifier.strip()
        if "@" in identifier:
            condition = User.email == identifier.lower()
        else:
            condition = User.phone == identifier
        result = await self.db.execute(select(User).where(condition))
        return result.scalar_one_or_none()

    async def authenticate(
        self,
        identifier: str,
        password: str,
        role: Optional[UserRole] = None,
        require_subscription: bool = False,
    ) -> User:
        """
        Verify credentials and return the user.

        Args:
            identifier: Phone number or email
            password: Plain text password
            role: If given, the account must have exactly this role
            require_subscription: Reader login path; the subscription must be eligible

        Raises:
            InvalidCredentials: Unknown account, wrong password, wrong role or deactivated
            SubscriptionInactive: Credentials are fine but the subscription gates access
        """
        user = await self.find_by_identifier(identifier)

        password_ok = self.password_hasher.verify(password, user.password_hash if user else None)
        if not user or not password_ok:
            raise InvalidCredentials()
        if role is not None and user.role != role.value:
            raise InvalidCredentials()
        if not user.is_active:
            raise InvalidCredentials()

        if self.password_hasher.needs_rehash(user.password_hash):
            user.password_hash = self.password_hasher.hash(password)
            await self.db.commit()
            logger.info("Upgraded password hash for user %s", user.id)

        if require_subscription:
            eligibility = await self.subscriptions.check_access(user)
            if not eligibility.eligible:
                logger.info(
                    "Login refused for %s: subscription %s",
                    mask_phone(user.phone),
                    eligibility.reason.value,
                )
                raise SubscriptionInactive()

        return user

    async def signup_reader(self, name: str, phone: str, password: str) -> User:
        """Self-service reader signup; starts the free trial."""
        if await self.subscriptions.find_by_phone(phone):
            raise ResourceConflict("A user with this phone number already exists")
        return await self.subscriptions.create_reader(phone, password, name)

    async def create_staff(self, name: str, email: str, password: str, role: UserRole) -> User:
        """Provision a writer or admin account."""
        if role not in (UserRole.WRITER, UserRole.ADMIN):
            raise ValidationError("Staff accounts must be WRITER or ADMIN")

        email = email.strip().lower()
        existing = await self.db.execute(select(User.id).where(User.email == email))
        if existing.scalar_one_or_none():
            raise ResourceConflict("A user with this email already exists")

        user = User(
            name=name.strip(),
            email=email,
            password_hash=self.password_hasher.hash(password),
            role=role.value,
            is_active=True,
        )
        self.db.add(user)
        await self.db.commit()
        logger.info("Provisioned %s account %s", role.value, user.id)
        return user

    async def list_writers(self) -> list[tuple[User, int]]:
        """Writers with the number of articles each has authored."""
        article_count = func.count(Article.id)
        result = await self.db.execute(
            select(User, article_count)
            .outerjoin(Article, Article.author_id == User.id)
            .where(User.role == UserRole.WRITER.value)
            .group_by(User.id)
            .order_by(User.created_at.desc())
        )
        return [(user, count) for user, count in result.all()]

    async def count_by_role(self, role: UserRole) -> int:
        return await self.db.scalar(select(func.count(User.id)).where(User.role == role.value)) or 0

    async def deactivate_writer(self, user_id: str) -> User:
        user = await self.get_user(user_id)
        if user is None or user.role != UserRole.WRITER.value:
            raise UserNotFound("Writer not found")

        user.is_active = False
        await self.db.commit()
        logger.info("Deactivated writer %s", user.id)
        return user
