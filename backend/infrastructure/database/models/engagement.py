"""
Engagement models: per-user views, bookmarks and favorites.

Each table holds at most one row per (user, article) pair.
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, utcnow
from .content import Article


class _UserArticleMixin:
    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    user_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    article_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("articles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )


class ArticleView(Base, _UserArticleMixin):
    """First view of an article by a known user."""

    __tablename__ = "article_views"
    __table_args__ = (UniqueConstraint("user_id", "article_id", name="uq_article_views_user_article"),)


class Bookmark(Base, _UserArticleMixin):
    __tablename__ = "bookmarks"
    __table_args__ = (UniqueConstraint("user_id", "article_id", name="uq_bookmarks_user_article"),)

    article: Mapped["Article"] = relationship("Article", lazy="selectin")


class FavoriteArticle(Base, _UserArticleMixin):
    __tablename__ = "favorite_articles"
    __table_args__ = (UniqueConstraint("user_id", "article_id", name="uq_favorite_articles_user_article"),)

    article: Mapped["Article"] = relationship("Article", lazy="selectin")
