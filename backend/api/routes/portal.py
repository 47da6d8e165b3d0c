"""
Portal pages.

JSON stand-ins for the reader profile and the writer/admin dashboards.
Access is decided by the route guard middleware before these handlers run;
they read the verified identity from ``request.state.identity``.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import (
    get_account_service,
    get_engagement_service,
    get_moderation_service,
)
from api.schemas.admin import AdminDashboardResponse, StatusCounts
from api.schemas.content import ArticleResponse
from api.schemas.engagement import SavedArticleResponse
from api.schemas.subscription import SubscriberInfo
from core.domain.user import UserRole
from core.errors import Unauthorized
from infrastructure.database.connection import get_db
from infrastructure.database.models.user import User
from services.accounts import AccountService
from services.engagement import EngagementKind, EngagementService
from services.moderation import ModerationService

router = APIRouter(tags=["Portal"])


async def get_portal_user(request: Request, db: AsyncSession = Depends(get_db)) -> User:
    identity = getattr(request.state, "identity", None)
    if identity is None:
        raise Unauthorized("Not authenticated")
    user = await db.get(User, identity.user_id)
    if user is None:
        raise Unauthorized("Not authenticated")
    return user


@router.get("/profile")
async def profile_page(
    user: User = Depends(get_portal_user),
    engagement: EngagementService = Depends(get_engagement_service),
) -> dict:
    favorites = await engagement.list_saved(EngagementKind.FAVORITE, user.id)
    bookmarks = await engagement.list_saved(EngagementKind.BOOKMARK, user.id)
    return {
        "user": SubscriberInfo.model_validate(user).model_dump(mode="json", by_alias=True),
        "favorites": [
            SavedArticleResponse.model_validate(item).model_dump(mode="json", by_alias=True)
            for item in favorites
        ],
        "bookmarks": [
            SavedArticleResponse.model_validate(item).model_dump(mode="json", by_alias=True)
            for item in bookmarks
        ],
    }


@router.get("/writer/dashboard")
async def writer_dashboard(
    user: User = Depends(get_portal_user),
    moderation: ModerationService = Depends(get_moderation_service),
) -> dict:
    articles = await moderation.list_for_author(user.id)
    counts = await moderation.count_by_status(author_id=user.id)
    return {
        "writer": {"id": user.id, "name": user.name, "email": user.email},
        "counts": StatusCounts.from_counts(counts).model_dump(by_alias=True),
        "articles": [
            ArticleResponse.from_article(article).model_dump(mode="json", by_alias=True)
            for article in articles
        ],
    }


@router.get("/admin/dashboard", response_model=AdminDashboardResponse)
async def admin_dashboard(
    user: User = Depends(get_portal_user),
    moderation: ModerationService = Depends(get_moderation_service),
    accounts: AccountService = Depends(get_account_service),
) -> AdminDashboardResponse:
    return AdminDashboardResponse(
        articles=StatusCounts.from_counts(await moderation.count_by_status()),
        writer_count=await accounts.count_by_role(UserRole.WRITER),
        subscriber_count=await accounts.count_by_role(UserRole.READER),
    )


def _entry_point(audience: str, login_path: str, request: Request) -> dict:
    return {
        "page": "auth",
        "audience": audience,
        "loginEndpoint": f"/api/v1{login_path}",
        "renew": request.query_params.get("renew") == "1",
    }


@router.get("/auth")
async def reader_auth_page(request: Request) -> dict:
    return _entry_point("reader", "/auth/login", request)


@router.get("/writer/auth")
async def writer_auth_page(request: Request) -> dict:
    return _entry_point("writer", "/auth/writer/login", request)


@router.get("/admin/auth")
async def admin_auth_page(request: Request) -> dict:
    return _entry_point("admin", "/auth/admin/login", request)
