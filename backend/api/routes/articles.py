"""
Public article routes: the feed, article detail and view counting.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_catalog_service, get_engagement_service, get_optional_user
from api.schemas.content import (
    ArticleFeedResponse,
    ArticleIdRequest,
    ArticleResponse,
    ViewCountResponse,
)
from infrastructure.database.models.user import User
from services.catalog import CatalogService
from services.engagement import EngagementService

router = APIRouter(prefix="/articles", tags=["Articles"])

ALL_CATEGORIES = "all"


@router.get("", response_model=ArticleFeedResponse)
async def list_articles(
    page: int = Query(1, ge=1),
    category: Optional[str] = Query(None, max_length=100),
    lang: Optional[str] = Query(None, max_length=10),
    catalog: CatalogService = Depends(get_catalog_service),
) -> ArticleFeedResponse:
    """Approved articles, newest first, optionally within one category."""
    if category and category.lower() == ALL_CATEGORIES:
        category = None
    feed = await catalog.public_feed(page=page, category=category)
    return ArticleFeedResponse(
        articles=[ArticleResponse.from_article(article, lang) for article in feed.articles],
        has_more=feed.has_more,
        total_count=feed.total_count,
    )


@router.post("", response_model=ViewCountResponse)
async def increment_view_count(
    body: ArticleIdRequest,
    engagement: EngagementService = Depends(get_engagement_service),
) -> ViewCountResponse:
    """Anonymous view; always counted."""
    stats = await engagement.record_view(body.article_id)
    return ViewCountResponse(view_count=stats.view_count)


@router.get("/view", response_model=ViewCountResponse)
async def get_view_count(
    article_id: str = Query(..., alias="articleId", min_length=1),
    engagement: EngagementService = Depends(get_engagement_service),
) -> ViewCountResponse:
    stats = await engagement.view_stats(article_id)
    return ViewCountResponse(view_count=stats.view_count, unique_view_count=stats.unique_view_count)


@router.post("/view", response_model=ViewCountResponse)
async def record_view(
    body: ArticleIdRequest,
    user: Annotated[Optional[User], Depends(get_optional_user)],
    engagement: EngagementService = Depends(get_engagement_service),
) -> ViewCountResponse:
    """Count a view. Signed-in readers are counted once per article."""
    stats = await engagement.record_view(body.article_id, user.id if user else None)
    return ViewCountResponse(view_count=stats.view_count, unique_view_count=stats.unique_view_count)


@router.get("/{article_id}", response_model=ArticleResponse)
async def get_article(
    article_id: str,
    lang: Optional[str] = Query(None, max_length=10),
    catalog: CatalogService = Depends(get_catalog_service),
) -> ArticleResponse:
    article = await catalog.get_public_article(article_id)
    return ArticleResponse.from_article(article, lang)
