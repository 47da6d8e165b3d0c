"""
Subscriber and billing schemas.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import Field

from api.schemas.common import CamelModel


class SubscriberRequest(CamelModel):
    phone: str = Field(..., min_length=1, max_length=32)
    password: str = Field(..., min_length=1, max_length=100)
    name: Optional[str] = Field(None, max_length=255)


class SubscriberInfo(CamelModel):
    """Subscription view of a reader."""

    id: str
    name: str
    phone: Optional[str] = None
    role: str
    subscription_status: Optional[str] = None
    subscription_start: Optional[datetime] = None
    subscription_end: Optional[datetime] = None
    last_billed_at: Optional[datetime] = None
    subscribed_at: Optional[datetime] = None
    activate_at: Optional[datetime] = None
    ref_no: Optional[str] = None
    contract_no: Optional[str] = None


class SubscriberResponse(CamelModel):
    subscriber: SubscriberInfo
    is_new_user: bool = False
    message: Optional[str] = None


class SubscriptionStatusResponse(CamelModel):
    message: str
    subscriber: SubscriberInfo
    is_expired: bool


class BillingResponse(CamelModel):
    message: str
    subscriber: SubscriberInfo


class RenewRequest(CamelModel):
    phone: str = Field(..., min_length=1, max_length=32)
    duration: int = Field(default=30, ge=1, le=366, description="Days to add")


class ChargeRequest(CamelModel):
    phone: str = Field(..., min_length=1, max_length=32)
    ref_no: Optional[str] = Field(None, max_length=100)
    contract_no: Optional[str] = Field(None, max_length=100)


class CancelRequest(CamelModel):
    phone: str = Field(..., min_length=1, max_length=32)
    reason: Optional[str] = Field(None, max_length=2000)


class SubscriptionActionRequest(CamelModel):
    action: Literal["unsubscribe"]
    reason: Optional[str] = Field(None, max_length=2000)
