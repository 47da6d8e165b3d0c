"""
Subscriber and billing-gateway routes.

The billing gateway calls these by phone number. When BILLING_API_KEY is
configured every call must carry it in the X-Billing-Key header.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status

from api.dependencies import get_subscription_service, verify_billing_key
from api.middleware.rate_limit import get_rate_limit, limiter
from api.schemas.subscription import (
    BillingResponse,
    CancelRequest,
    ChargeRequest,
    RenewRequest,
    SubscriberInfo,
    SubscriberRequest,
    SubscriberResponse,
    SubscriptionStatusResponse,
)
from core.errors import ValidationError
from infrastructure.logging_config import mask_phone
from services.subscriptions import SubscriptionService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Subscribers"], dependencies=[Depends(verify_billing_key)])


@router.get("/subscribers", response_model=SubscriberResponse)
@limiter.limit(get_rate_limit("login"))
async def get_subscriber(
    request: Request,
    phone: str = Query(..., min_length=1),
    password: str = Query(..., min_length=1),
    subscriptions: SubscriptionService = Depends(get_subscription_service),
) -> SubscriberResponse:
    """Look up a subscriber by phone and password."""
    user = await subscriptions.verify_subscriber(phone, password)
    return SubscriberResponse(subscriber=SubscriberInfo.model_validate(user))


@router.post("/subscribers", response_model=SubscriberResponse)
@limiter.limit(get_rate_limit("signup"))
async def register_subscriber(
    request: Request,
    body: SubscriberRequest,
    subscriptions: SubscriptionService = Depends(get_subscription_service),
) -> SubscriberResponse:
    """
    Get-or-create a subscriber.

    Unknown phones are registered on a free trial; known phones must present
    the matching password.
    """
    user, is_new = await subscriptions.register_trial(body.phone, body.password, body.name)
    return SubscriberResponse(
        subscriber=SubscriberInfo.model_validate(user),
        is_new_user=is_new,
        message="Subscriber registered" if is_new else "Subscriber already exists",
    )


@router.get("/subscribers/status", response_model=SubscriptionStatusResponse)
@limiter.limit(get_rate_limit("billing"))
async def subscription_status(
    request: Request,
    phone: str = Query(..., min_length=1),
    subscriptions: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionStatusResponse:
    """Current subscription state; an expired ACTIVE subscription is flipped to INACTIVE first."""
    user, eligibility = await subscriptions.status_snapshot(phone)
    message = f"Subscription status: {user.subscription_status}"
    if eligibility.expired:
        message += " (expired)"
    return SubscriptionStatusResponse(
        message=message,
        subscriber=SubscriberInfo.model_validate(user),
        is_expired=eligibility.expired,
    )


@router.post("/subscribers/renew", response_model=BillingResponse)
@limiter.limit(get_rate_limit("billing"))
async def renew_subscription(
    request: Request,
    body: RenewRequest,
    subscriptions: SubscriptionService = Depends(get_subscription_service),
) -> BillingResponse:
    user = await subscriptions.renew(body.phone, body.duration)
    return BillingResponse(
        message="Subscription renewed successfully",
        subscriber=SubscriberInfo.model_validate(user),
    )


@router.get("/charge-subscriber", response_model=BillingResponse)
@limiter.limit(get_rate_limit("billing"))
async def charge_subscriber_get(
    request: Request,
    phone: str = Query(..., min_length=1),
    subscriptions: SubscriptionService = Depends(get_subscription_service),
) -> BillingResponse:
    """Gateway charge notification (query-string form)."""
    user = await subscriptions.charge(phone)
    return BillingResponse(
        message="Subscriber charged successfully",
        subscriber=SubscriberInfo.model_validate(user),
    )


@router.post("/charge-subscriber", response_model=BillingResponse)
@limiter.limit(get_rate_limit("billing"))
async def charge_subscriber_post(
    request: Request,
    body: ChargeRequest,
    subscriptions: SubscriptionService = Depends(get_subscription_service),
) -> BillingResponse:
    """Gateway charge notification with reference and contract numbers."""
    user = await subscriptions.charge(
        body.phone,
        ref_no=body.ref_no,
        contract_no=body.contract_no,
    )
    return BillingResponse(
        message="Subscriber charged successfully",
        subscriber=SubscriberInfo.model_validate(user),
    )


@router.get("/cancel-subscription", response_model=BillingResponse)
@limiter.limit(get_rate_limit("billing"))
async def cancel_subscription_get(
    request: Request,
    phone: Optional[str] = Query(None),
    stop: Optional[str] = Query(None, description="Alias for phone used by the gateway"),
    subscriptions: SubscriptionService = Depends(get_subscription_service),
) -> BillingResponse:
    target = (phone or stop or "").strip()
    if not target:
        raise ValidationError("Phone number is required")
    user = await subscriptions.cancel_by_phone(target)
    logger.info("Gateway cancelled subscription for %s", mask_phone(target))
    return BillingResponse(
        message="Subscription cancelled successfully",
        subscriber=SubscriberInfo.model_validate(user),
    )


@router.post(
    "/cancel-subscription",
    response_model=BillingResponse,
    status_code=status.HTTP_200_OK,
)
@limiter.limit(get_rate_limit("billing"))
async def cancel_subscription_post(
    request: Request,
    body: CancelRequest,
    subscriptions: SubscriptionService = Depends(get_subscription_service),
) -> BillingResponse:
    user = await subscriptions.cancel_by_phone(body.phone, body.reason)
    return BillingResponse(
        message="Subscription cancelled successfully",
        subscriber=SubscriberInfo.model_validate(user),
    )
