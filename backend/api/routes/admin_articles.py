"""
Admin moderation routes.
"""

import math
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_moderation_service
from api.deps_admin import get_current_admin_user
from api.schemas.admin import ReviewRequest
from api.schemas.content import ArticleListResponse, ArticleResponse
from core.domain.content import ArticleStatus
from infrastructure.database.models.user import User
from services.moderation import ModerationService

router = APIRouter(prefix="/admin/articles", tags=["Admin - Articles"])


@router.get("", response_model=ArticleListResponse)
async def list_articles(
    admin: Annotated[User, Depends(get_current_admin_user)],
    status: Optional[ArticleStatus] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    moderation: ModerationService = Depends(get_moderation_service),
) -> ArticleListResponse:
    """All articles, newest first, optionally filtered by status."""
    items, total = await moderation.list_all(status=status, page=page, page_size=page_size)
    return ArticleListResponse(
        items=[ArticleResponse.from_article(article) for article in items],
        total=total,
        page=page,
        page_size=page_size,
        pages=math.ceil(total / page_size) if total else 0,
    )


@router.put("", response_model=ArticleResponse)
async def review_article(
    body: ReviewRequest,
    admin: Annotated[User, Depends(get_current_admin_user)],
    moderation: ModerationService = Depends(get_moderation_service),
) -> ArticleResponse:
    """
    Approve, reject or disable an article.

    Approval announces the article on the notification channel; a failed
    announcement does not undo the approval.
    """
    article = await moderation.review(body.id, body.status, admin)
    return ArticleResponse.from_article(article)


@router.get("/{article_id}", response_model=ArticleResponse)
async def get_article(
    article_id: str,
    admin: Annotated[User, Depends(get_current_admin_user)],
    moderation: ModerationService = Depends(get_moderation_service),
) -> ArticleResponse:
    return ArticleResponse.from_article(await moderation.get_any(article_id))


@router.put("/{article_id}/disable", response_model=ArticleResponse)
async def disable_article(
    article_id: str,
    admin: Annotated[User, Depends(get_current_admin_user)],
    moderation: ModerationService = Depends(get_moderation_service),
) -> ArticleResponse:
    article = await moderation.disable(article_id, admin)
    return ArticleResponse.from_article(article)


@router.delete("/{article_id}", response_model=ArticleResponse)
async def delete_article(
    article_id: str,
    admin: Annotated[User, Depends(get_current_admin_user)],
    moderation: ModerationService = Depends(get_moderation_service),
) -> ArticleResponse:
    """Admin delete is a soft delete: the article is disabled, not removed."""
    article = await moderation.disable(article_id, admin)
    return ArticleResponse.from_article(article)
