"""
User database model.
"""

from datetime import datetime
from typing import Optional
from uuid import uuid4

from sqlalchemy import Boolean, DateTime, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from core.domain.user import UserRole

from .base import Base, TimestampMixin


class User(Base, TimestampMixin):
    """Account for readers, writers and admins.

    Readers sign in by phone and carry subscription state; staff sign in
    by email and have no subscription.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    phone: Mapped[Optional[str]] = mapped_column(
        String(32),
        unique=True,
        nullable=True,
        index=True,
    )
    email: Mapped[Optional[str]] = mapped_column(
        String(255),
        unique=True,
        nullable=True,
        index=True,
    )

    # Authentication
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(
        String(20),
        default=UserRole.READER.value,
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Subscription (readers only)
    subscription_status: Mapped[Optional[str]] = mapped_column(
        String(20), nullable=True
    )  # ACTIVE, INACTIVE, PENDING, UNSUBSCRIBE, RENEW
    subscription_start: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    subscription_end: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    last_billed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    subscribed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    activate_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Billing gateway references
    ref_no: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    contract_no: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    __table_args__ = (
        Index("ix_users_role", "role"),
        Index("ix_users_subscription", "subscription_status", "subscription_end"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, role={self.role}, phone={self.phone}, email={self.email})>"

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    @property
    def is_writer(self) -> bool:
        return self.role == UserRole.WRITER.value

    @property
    def is_reader(self) -> bool:
        return self.role == UserRole.READER.value

