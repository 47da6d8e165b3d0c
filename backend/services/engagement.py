"""
Engagement tracking: favorites, bookmarks and article views.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.content import ArticleStatus
from core.errors import ArticleNotFound
from infrastructure.database.models.content import Article
from infrastructure.database.models.engagement import ArticleView, Bookmark, FavoriteArticle

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Uncategorized"


class EngagementKind(str, Enum):
    FAVORITE = "favorite"
    BOOKMARK = "bookmark"


_MODELS = {
    EngagementKind.FAVORITE: FavoriteArticle,
    EngagementKind.BOOKMARK: Bookmark,
}


@dataclass(frozen=True)
class ViewStats:
    view_count: int
    unique_view_count: int


@dataclass
class SavedArticle:
    id: str
    title: dict
    category: str
    featured_image: Optional[str]
    created_at: object


class EngagementService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _require_article(self, article_id: str, published: bool = True) -> None:
        query = select(Article.id).where(Article.id == article_id)
        if published:
            query = query.where(Article.status == ArticleStatus.APPROVED.value)
        if await self.db.scalar(query) is None:
            raise ArticleNotFound()

    async def toggle(self, kind: EngagementKind, user_id: str, article_id: str) -> bool:
        """Flip a favorite or bookmark. Returns the new state.

        Saved entries can always be removed; new ones only point at
        published articles.
        """
        await self._require_article(article_id, published=False)
        model = _MODELS[kind]

        removed = await self.db.execute(
            delete(model).where(model.user_id == user_id, model.article_id == article_id)
        )
        if removed.rowcount:
            await self.db.commit()
            return False

        await self._require_article(article_id)
        self.db.add(model(user_id=user_id, article_id=article_id))
        try:
            await self.db.commit()
        except IntegrityError:
            # Another request inserted the same pair first
            await self.db.rollback()
        return True

    async def is_active(self, kind: EngagementKind, user_id: str, article_id: str) -> bool:
        model = _MODELS[kind]
        found = await self.db.scalar(
            select(model.id).where(model.user_id == user_id, model.article_id == article_id)
        )
        return found is not None

    async def list_saved(self, kind: EngagementKind, user_id: str) -> list[SavedArticle]:
        """Saved articles for a user, most recently saved first. Unpublished articles are left out."""
        model = _MODELS[kind]
        result = await self.db.execute(
            select(model).where(model.user_id == user_id).order_by(model.created_at.desc())
        )
        return [
            SavedArticle(
                id=row.article.id,
                title=row.article.title,
                category=row.article.category_name or UNCATEGORIZED,
                featured_image=row.article.featured_image,
                created_at=row.article.created_at,
            )
            for row in result.scalars().all()
            if row.article is not None and row.article.status == ArticleStatus.APPROVED.value
        ]

    async def saved_ids(self, kind: EngagementKind, user_id: str) -> list[str]:
        model = _MODELS[kind]
        result = await self.db.execute(select(model.article_id).where(model.user_id == user_id))
        return [article_id for article_id in result.scalars().all()]

    async def record_view(self, article_id: str, user_id: Optional[str] = None) -> ViewStats:
        """Count a view.

        Anonymous views always count. A signed-in user counts once per
        article: only the request that inserts their first view row bumps
        the counter.
        """
        await self._require_article(article_id)

        count_it = True
        if user_id:
            self.db.add(ArticleView(user_id=user_id, article_id=article_id))
            try:
                await self.db.flush()
            except IntegrityError:
                await self.db.rollback()
                count_it = False

        if count_it:
            await self.db.execute(
                update(Article)
                .where(Article.id == article_id)
                .values(view_count=Article.view_count + 1)
                .execution_options(synchronize_session=False)
            )
        await self.db.commit()

        return await self.view_stats(article_id)

    async def view_stats(self, article_id: str) -> ViewStats:
        view_count = await self.db.scalar(select(Article.view_count).where(Article.id == article_id))
        if view_count is None:
            raise ArticleNotFound()
        unique = await self.db.scalar(
            select(func.count(ArticleView.id)).where(ArticleView.article_id == article_id)
        )
        return ViewStats(view_count=view_count, unique_view_count=unique or 0)
