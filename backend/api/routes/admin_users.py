"""
Admin routes for writer accounts and the subscriber list.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status

from api.dependencies import get_account_service, get_subscription_service
from api.deps_admin import get_current_admin_user
from api.schemas.admin import WriterCreateRequest, WriterResponse
from api.schemas.subscription import SubscriberInfo
from core.domain.user import UserRole
from infrastructure.database.models.user import User
from services.accounts import AccountService
from services.subscriptions import SubscriptionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin - Users"])


def _writer_response(user: User, article_count: int = 0) -> WriterResponse:
    return WriterResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        is_active=user.is_active,
        article_count=article_count,
        created_at=user.created_at,
    )


@router.get("/writers", response_model=list[WriterResponse])
async def list_writers(
    admin: Annotated[User, Depends(get_current_admin_user)],
    accounts: AccountService = Depends(get_account_service),
) -> list[WriterResponse]:
    """Writers with their article counts, newest first."""
    return [_writer_response(user, count) for user, count in await accounts.list_writers()]


@router.post("/writers", response_model=WriterResponse, status_code=status.HTTP_201_CREATED)
async def create_writer(
    body: WriterCreateRequest,
    admin: Annotated[User, Depends(get_current_admin_user)],
    accounts: AccountService = Depends(get_account_service),
) -> WriterResponse:
    user = await accounts.create_staff(body.name, body.email, body.password, UserRole.WRITER)
    logger.info("Admin %s created writer %s", admin.id, user.id)
    return _writer_response(user)


@router.put("/writers/{writer_id}/deactivate", response_model=WriterResponse)
async def deactivate_writer(
    writer_id: str,
    admin: Annotated[User, Depends(get_current_admin_user)],
    accounts: AccountService = Depends(get_account_service),
) -> WriterResponse:
    """Block a writer from signing in. Their articles stay as they are."""
    user = await accounts.deactivate_writer(writer_id)
    return _writer_response(user)


@router.get("/subscribers", response_model=list[SubscriberInfo])
async def list_subscribers(
    admin: Annotated[User, Depends(get_current_admin_user)],
    subscriptions: SubscriptionService = Depends(get_subscription_service),
):
    return await subscriptions.list_subscribers()
