"""
Reader self-service routes.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.dependencies import get_current_user, get_subscription_service
from api.routes.auth import clear_session_cookie
from api.schemas.subscription import SubscriberInfo, SubscriptionActionRequest
from infrastructure.database.models.user import User
from services.subscriptions import SubscriptionService

router = APIRouter(prefix="/user", tags=["User"])


@router.get("", response_model=SubscriberInfo)
async def get_user(
    current_user: Annotated[User, Depends(get_current_user)],
    subscriptions: SubscriptionService = Depends(get_subscription_service),
) -> User:
    """The signed-in user's subscription snapshot, after lazy expiry."""
    await subscriptions.apply_lazy_expiry(current_user)
    return current_user


@router.post("/subscription", response_model=SubscriberInfo)
async def update_subscription(
    body: SubscriptionActionRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    subscriptions: SubscriptionService = Depends(get_subscription_service),
) -> JSONResponse:
    """Unsubscribe the signed-in reader and end their session."""
    user = await subscriptions.cancel(current_user, body.reason)
    response = JSONResponse(
        content=SubscriberInfo.model_validate(user).model_dump(mode="json", by_alias=True)
    )
    clear_session_cookie(response)
    return response
