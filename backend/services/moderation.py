"""
Moderation workflow.

Writers submit and edit their own articles; admins move them through the
status machine. Approval triggers a best-effort announcement that never
affects the outcome of the review.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from adapters.notifications.article_notifier import ArticleNotifier
from adapters.storage.image_storage import StorageAdapter
from core.domain.content import ArticleStatus, can_disable, can_transition
from core.domain.localization import LocalizedText, has_required_language, parse_localized, restrict_languages
from core.domain.user import UserRole
from core.errors import (
    ArticleNotFound,
    InvalidStatusTransition,
    Unauthorized,
    UpstreamFailure,
    ValidationError,
)
from infrastructure.config.settings import settings
from infrastructure.database.models.content import Article
from infrastructure.database.models.engagement import ArticleView, Bookmark, FavoriteArticle
from infrastructure.database.models.user import User
from services.catalog import CatalogService

logger = logging.getLogger(__name__)


@dataclass
class ImageUpload:
    data: bytes
    filename: str


@dataclass
class ArticleDraft:
    """A new article as submitted by a writer."""

    title: LocalizedText
    content: LocalizedText
    category_id: str
    subcategory_id: Optional[str] = None
    tags: list[str] = field(default_factory=list)
    image: Optional[ImageUpload] = None
    featured_image_url: Optional[str] = None


@dataclass
class ArticlePatch:
    """Writer edit. ``None`` leaves a field unchanged; ``tags`` replaces the whole set."""

    title: Optional[LocalizedText] = None
    content: Optional[LocalizedText] = None
    category_id: Optional[str] = None
    subcategory_id: Optional[str] = None
    tags: Optional[list[str]] = None
    image: Optional[ImageUpload] = None
    featured_image_url: Optional[str] = None


class ModerationService:
    """Article lifecycle: submit, edit, review, disable and delete."""

    def __init__(
        self,
        db: AsyncSession,
        storage: StorageAdapter,
        notifier: Optional[ArticleNotifier] = None,
        languages: Optional[list[str]] = None,
    ):
        self.db = db
        self.storage = storage
        self.notifier = notifier
        self.languages = languages or settings.supported_languages_list
        self.catalog = CatalogService(db)

    # Helpers ------------------------------------------------------------

    def _clean_localized(self, value, field_name: str) -> LocalizedText:
        try:
            localized = restrict_languages(parse_localized(value), self.languages)
        except TypeError:
            raise ValidationError(f"{field_name} must be a map of language code to text")
        if not has_required_language(localized):
            raise ValidationError(f"English {field_name} is required")
        return localized

    async def _get(self, article_id: str) -> Article:
        result = await self.db.execute(select(Article).where(Article.id == article_id))
        article = result.scalar_one_or_none()
        if article is None:
            raise ArticleNotFound()
        return article

    async def _reload(self, article_id: str) -> Article:
        """Re-read an article with its relationships after a commit."""
        result = await self.db.execute(
            select(Article)
            .where(Article.id == article_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()

    async def _upload(self, image: ImageUpload) -> str:
        try:
            return await self.storage.save_image(image.data, image.filename)
        except Exception as e:
            logger.error("Image upload failed for %s: %s", image.filename, e)
            raise UpstreamFailure("Image upload failed") from e

    async def _discard_image(self, url: str) -> None:
        try:
            await self.storage.delete_image(url)
        except Exception as e:
            logger.warning("Failed to delete image %s: %s", url, e)

    @staticmethod
    def _require_admin(user: User) -> None:
        if user.role != UserRole.ADMIN.value:
            raise Unauthorized("Only admins can moderate articles")

    @staticmethod
    def _require_author(article: Article, user: User) -> None:
        if article.author_id != user.id:
            raise Unauthorized("You can only manage your own articles")

    # Writer operations --------------------------------------------------

    async def submit(self, draft: ArticleDraft, author: User) -> Article:
        """Create a PENDING article.

        The image is stored before anything is written; if that fails the
        submission fails as a whole.
        """
        if author.role != UserRole.WRITER.value:
            raise Unauthorized("Only writers can submit articles")

        title = self._clean_localized(draft.title, "title")
        content = self._clean_localized(draft.content, "content")
        await self.catalog.validate_placement(draft.category_id, draft.subcategory_id)

        uploaded = None
        if draft.image is not None:
            uploaded = await self._upload(draft.image)
        featured_image = uploaded or draft.featured_image_url

        try:
            tags = await self.catalog.resolve_tags(draft.tags)
            article = Article(
                title=title,
                content=content,
                status=ArticleStatus.PENDING.value,
                author_id=author.id,
                category_id=draft.category_id,
                subcategory_id=draft.subcategory_id or None,
                featured_image=featured_image,
                view_count=0,
                tags=tags,
            )
            self.db.add(article)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            if uploaded:
                await self._discard_image(uploaded)
            raise

        logger.info("Article %s submitted by %s", article.id, author.id)
        return await self._reload(article.id)

    async def update(self, article_id: str, patch: ArticlePatch, requester: User) -> Article:
        """Apply a writer's edit and send the article back to review.

        A replacement image is stored first and the old one is removed only
        after the record points at the new one. Disabled articles refuse edits.
        """
        article = await self._get(article_id)
        self._require_author(article, requester)
        if article.status == ArticleStatus.DISABLED.value:
            raise InvalidStatusTransition("Disabled articles cannot be edited")

        if patch.title is not None:
            article.title = self._clean_localized(patch.title, "title")
        if patch.content is not None:
            article.content = self._clean_localized(patch.content, "content")

        if patch.category_id is not None or patch.subcategory_id is not None:
            category_id = patch.category_id or article.category_id
            subcategory_id = (
                patch.subcategory_id if patch.subcategory_id is not None else article.subcategory_id
            )
            if patch.category_id and patch.subcategory_id is None and category_id != article.category_id:
                subcategory_id = None
            await self.catalog.validate_placement(category_id, subcategory_id or None)
            article.category_id = category_id
            article.subcategory_id = subcategory_id or None

        if patch.tags is not None:
            article.tags = await self.catalog.resolve_tags(patch.tags)

        old_image = article.featured_image
        uploaded = None
        if patch.image is not None:
            uploaded = await self._upload(patch.image)
            article.featured_image = uploaded
        elif patch.featured_image_url is not None:
            article.featured_image = patch.featured_image_url or None

        article.status = ArticleStatus.PENDING.value

        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            if uploaded:
                await self._discard_image(uploaded)
            raise

        if old_image and old_image != article.featured_image:
            await self._discard_image(old_image)

        logger.info("Article %s updated by author %s", article.id, requester.id)
        return await self._reload(article.id)

    async def delete_own(self, article_id: str, requester: User) -> None:
        """Hard-delete an article and its stored image (author only)."""
        article = await self._get(article_id)
        self._require_author(article, requester)
        image = article.featured_image

        for model in (ArticleView, Bookmark, FavoriteArticle):
            await self.db.execute(delete(model).where(model.article_id == article.id))
        await self.db.delete(article)
        await self.db.commit()
        logger.info("Article %s deleted by author %s", article_id, requester.id)

        if image:
            await self._discard_image(image)

    async def get_for_author(self, article_id: str, requester: User) -> Article:
        article = await self._get(article_id)
        self._require_author(article, requester)
        return article

    async def list_for_author(self, author_id: str) -> list[Article]:
        result = await self.db.execute(
            select(Article)
            .where(Article.author_id == author_id)
            .order_by(Article.created_at.desc())
        )
        return list(result.scalars().all())

    # Admin operations ---------------------------------------------------

    async def review(self, article_id: str, decision: ArticleStatus, reviewer: User) -> Article:
        """Apply an admin decision.

        Re-applying the current status is a no-op. Approval commits first,
        then the announcement is attempted; its failure is only logged.
        """
        self._require_admin(reviewer)
        article = await self._get(article_id)
        current = ArticleStatus(article.status)

        if decision == current:
            return article
        if decision == ArticleStatus.DISABLED:
            return await self.disable(article_id, reviewer)
        if not can_transition(current, decision):
            raise InvalidStatusTransition(
                f"Cannot change status from {current.value} to {decision.value}"
            )

        article.status = decision.value
        await self.db.commit()
        logger.info("Article %s %s by %s", article.id, decision.value.lower(), reviewer.id)
        article = await self._reload(article.id)

        if decision == ArticleStatus.APPROVED:
            await self._announce(article)
        return article

    async def _announce(self, article: Article) -> None:
        if self.notifier is None:
            return
        try:
            await self.notifier.article_approved(article)
        except Exception as e:
            logger.error("Approval notification failed for article %s: %s", article.id, e)

    async def disable(self, article_id: str, reviewer: User) -> Article:
        """Soft delete: status becomes DISABLED, the record and image stay."""
        self._require_admin(reviewer)
        article = await self._get(article_id)
        if not can_disable(ArticleStatus(article.status)):
            return article

        article.status = ArticleStatus.DISABLED.value
        await self.db.commit()
        logger.info("Article %s disabled by %s", article.id, reviewer.id)
        return await self._reload(article.id)

    async def get_any(self, article_id: str) -> Article:
        return await self._get(article_id)

    async def list_all(
        self,
        status: Optional[ArticleStatus] = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Article], int]:
        conditions = []
        if status is not None:
            conditions.append(Article.status == status.value)

        total = await self.db.scalar(select(func.count(Article.id)).where(*conditions)) or 0
        result = await self.db.execute(
            select(Article)
            .where(*conditions)
            .order_by(Article.created_at.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        return list(result.scalars().all()), total

    async def count_by_status(self, author_id: Optional[str] = None) -> dict[str, int]:
        query = select(Article.status, func.count(Article.id)).group_by(Article.status)
        if author_id:
            query = query.where(Article.author_id == author_id)
        result = await self.db.execute(query)
        counts = {status.value: 0 for status in ArticleStatus}
        counts.update({status: count for status, count in result.all()})
        return counts
