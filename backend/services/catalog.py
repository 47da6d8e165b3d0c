"""
Catalog service: categories, subcategories, tags and the public article feed.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.domain.content import ArticleStatus
from core.errors import (
    ArticleNotFound,
    CategoryNotFound,
    ResourceConflict,
    SubcategoryNotFound,
    ValidationError,
)
from infrastructure.config.settings import settings
from infrastructure.database.models.content import Article, Category, Subcategory, Tag

logger = logging.getLogger(__name__)


@dataclass
class FeedPage:
    articles: list[Article]
    total_count: int
    page: int
    page_size: int

    @property
    def has_more(self) -> bool:
        return self.total_count > (self.page - 1) * self.page_size + len(self.articles)


def normalize_tag_names(names: Iterable[str]) -> list[str]:
    """Trim, drop empties and de-duplicate while keeping first-seen order."""
    seen: dict[str, None] = {}
    for name in names:
        cleaned = (name or "").strip()
        if cleaned and cleaned not in seen:
            seen[cleaned] = None
    return list(seen)


class CatalogService:
    """Reference data and read-side access to published articles."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # Categories ---------------------------------------------------------

    async def list_categories(self) -> list[Category]:
        result = await self.db.execute(select(Category).order_by(Category.name))
        return list(result.scalars().all())

    async def get_category(self, category_id: str) -> Category:
        result = await self.db.execute(select(Category).where(Category.id == category_id))
        category = result.scalar_one_or_none()
        if category is None:
            raise CategoryNotFound()
        return category

    async def create_category(self, name: str) -> Category:
        name = name.strip()
        if not name:
            raise ValidationError("Category name is required")

        existing = await self.db.execute(
            select(Category.id).where(func.lower(Category.name) == name.lower())
        )
        if existing.scalar_one_or_none():
            raise ResourceConflict(f"Category '{name}' already exists")

        category = Category(name=name, subcategories=[])
        self.db.add(category)
        await self.db.commit()
        logger.info("Created category %s", name)
        return category

    async def delete_category(self, category_id: str) -> None:
        """Delete a category and its subcategories.

        Refused while any article still points at the category.
        """
        category = await self.get_category(category_id)

        in_use = await self.db.scalar(
            select(func.count(Article.id)).where(Article.category_id == category_id)
        )
        if in_use:
            raise ResourceConflict(
                f"Category '{category.name}' is used by {in_use} article(s) and cannot be deleted"
            )

        await self.db.delete(category)
        await self.db.commit()
        logger.info("Deleted category %s", category.name)

    # Subcategories ------------------------------------------------------

    async def list_subcategories(self, category_id: Optional[str] = None) -> list[Subcategory]:
        query = select(Subcategory).order_by(Subcategory.name)
        if category_id:
            query = query.where(Subcategory.category_id == category_id)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_subcategory(self, subcategory_id: str) -> Subcategory:
        result = await self.db.execute(select(Subcategory).where(Subcategory.id == subcategory_id))
        subcategory = result.scalar_one_or_none()
        if subcategory is None:
            raise SubcategoryNotFound()
        return subcategory

    async def create_subcategory(self, name: str, category_id: str) -> Subcategory:
        name = name.strip()
        if not name:
            raise ValidationError("Subcategory name is required")
        await self.get_category(category_id)

        existing = await self.db.execute(
            select(Subcategory.id).where(
                Subcategory.category_id == category_id,
                func.lower(Subcategory.name) == name.lower(),
            )
        )
        if existing.scalar_one_or_none():
            raise ResourceConflict(f"Subcategory '{name}' already exists in this category")

        subcategory = Subcategory(name=name, category_id=category_id)
        self.db.add(subcategory)
        await self.db.commit()
        logger.info("Created subcategory %s", name)
        return subcategory

    async def delete_subcategory(self, subcategory_id: str) -> None:
        subcategory = await self.get_subcategory(subcategory_id)

        in_use = await self.db.scalar(
            select(func.count(Article.id)).where(Article.subcategory_id == subcategory_id)
        )
        if in_use:
            raise ResourceConflict(
                f"Subcategory '{subcategory.name}' is used by {in_use} article(s) and cannot be deleted"
            )

        await self.db.delete(subcategory)
        await self.db.commit()
        logger.info("Deleted subcategory %s", subcategory.name)

    async def validate_placement(self, category_id: str, subcategory_id: Optional[str]) -> None:
        """Check the category exists and the subcategory (if any) belongs to it."""
        if not category_id:
            raise ValidationError("Category is required")
        await self.get_category(category_id)
        if subcategory_id:
            subcategory = await self.get_subcategory(subcategory_id)
            if subcategory.category_id != category_id:
                raise ValidationError("Subcategory does not belong to the selected category")

    # Tags ---------------------------------------------------------------

    async def resolve_tags(self, names: Iterable[str]) -> list[Tag]:
        """Connect-or-create tags by name."""
        wanted = normalize_tag_names(names)
        if not wanted:
            return []

        result = await self.db.execute(select(Tag).where(Tag.name.in_(wanted)))
        by_name = {tag.name: tag for tag in result.scalars().all()}

        for name in wanted:
            if name not in by_name:
                tag = Tag(name=name)
                self.db.add(tag)
                by_name[name] = tag
        await self.db.flush()

        return [by_name[name] for name in wanted]

    # Public feed --------------------------------------------------------

    async def public_feed(
        self,
        page: int = 1,
        category: Optional[str] = None,
        page_size: Optional[int] = None,
    ) -> FeedPage:
        """Approved articles, newest first, optionally within a category name."""
        page = max(page, 1)
        page_size = page_size or settings.articles_page_size

        conditions = [Article.status == ArticleStatus.APPROVED.value]
        if category:
            category_ids = select(Category.id).where(
                func.lower(Category.name) == category.strip().lower()
            )
            conditions.append(Article.category_id.in_(category_ids))

        total = await self.db.scalar(select(func.count(Article.id)).where(*conditions)) or 0
        result = await self.db.execute(
            select(Article)
            .where(*conditions)
            .order_by(Article.created_at.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        return FeedPage(
            articles=list(result.scalars().all()),
            total_count=total,
            page=page,
            page_size=page_size,
        )

    async def get_public_article(self, article_id: str) -> Article:
        result = await self.db.execute(
            select(Article).where(
                Article.id == article_id,
                Article.status == ArticleStatus.APPROVED.value,
            )
        )
        article = result.scalar_one_or_none()
        if article is None:
            raise ArticleNotFound()
        return article
