"""
Favorites and bookmarks for signed-in users.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_current_user, get_engagement_service
from api.schemas.engagement import (
    BookmarkStatusResponse,
    EngagementToggleRequest,
    FavoriteStatusResponse,
    SavedArticleResponse,
)
from infrastructure.database.models.user import User
from services.engagement import EngagementKind, EngagementService

router = APIRouter(tags=["Engagement"])


@router.get("/favorites", response_model=FavoriteStatusResponse)
async def favorite_status(
    current_user: Annotated[User, Depends(get_current_user)],
    article_id: str = Query(..., alias="articleId", min_length=1),
    engagement: EngagementService = Depends(get_engagement_service),
) -> FavoriteStatusResponse:
    active = await engagement.is_active(EngagementKind.FAVORITE, current_user.id, article_id)
    return FavoriteStatusResponse(is_favorite=active)


@router.post("/favorites", response_model=FavoriteStatusResponse)
async def toggle_favorite(
    body: EngagementToggleRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    engagement: EngagementService = Depends(get_engagement_service),
) -> FavoriteStatusResponse:
    active = await engagement.toggle(EngagementKind.FAVORITE, current_user.id, body.article_id)
    return FavoriteStatusResponse(is_favorite=active)


@router.get("/favorites/articles", response_model=list[SavedArticleResponse])
async def list_favorites(
    current_user: Annotated[User, Depends(get_current_user)],
    engagement: EngagementService = Depends(get_engagement_service),
):
    return await engagement.list_saved(EngagementKind.FAVORITE, current_user.id)


@router.get("/bookmarks", response_model=BookmarkStatusResponse)
async def bookmark_status(
    current_user: Annotated[User, Depends(get_current_user)],
    article_id: str = Query(..., alias="articleId", min_length=1),
    engagement: EngagementService = Depends(get_engagement_service),
) -> BookmarkStatusResponse:
    active = await engagement.is_active(EngagementKind.BOOKMARK, current_user.id, article_id)
    return BookmarkStatusResponse(is_bookmarked=active)


@router.post("/bookmarks", response_model=BookmarkStatusResponse)
async def toggle_bookmark(
    body: EngagementToggleRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    engagement: EngagementService = Depends(get_engagement_service),
) -> BookmarkStatusResponse:
    active = await engagement.toggle(EngagementKind.BOOKMARK, current_user.id, body.article_id)
    return BookmarkStatusResponse(is_bookmarked=active)


@router.get("/bookmarks/articles", response_model=list[SavedArticleResponse])
async def list_bookmarks(
    current_user: Annotated[User, Depends(get_current_user)],
    engagement: EngagementService = Depends(get_engagement_service),
):
    return await engagement.list_saved(EngagementKind.BOOKMARK, current_user.id)
