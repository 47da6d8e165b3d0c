"""
Content database models: articles, categories, subcategories and tags.
"""

from typing import List, Optional
from uuid import uuid4

from sqlalchemy import Column, ForeignKey, Index, Integer, String, Table, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.domain.content import ArticleStatus
from core.domain.localization import LocalizedText

from .base import Base, TimestampMixin
from .types import LocalizedJSON
from .user import User


article_tags = Table(
    "article_tags",
    Base.metadata,
    Column(
        "article_id",
        Uuid(as_uuid=False),
        ForeignKey("articles.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "tag_id",
        Uuid(as_uuid=False),
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Category(Base, TimestampMixin):
    """Top-level article category (e.g. National, International)."""

    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)

    subcategories: Mapped[List["Subcategory"]] = relationship(
        "Subcategory",
        back_populates="category",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="Subcategory.name",
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name={self.name})>"


class Subcategory(Base, TimestampMixin):
    """Subcategory belonging to exactly one category."""

    __tablename__ = "subcategories"

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    category_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("categories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    category: Mapped["Category"] = relationship("Category", back_populates="subcategories")

    __table_args__ = (UniqueConstraint("category_id", "name", name="uq_subcategories_category_name"),)

    def __repr__(self) -> str:
        return f"<Subcategory(id={self.id}, name={self.name}, category_id={self.category_id})>"


class Tag(Base):
    """Free-form tag, unique by name."""

    __tablename__ = "tags"

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Tag(name={self.name})>"


class Article(Base, TimestampMixin):
    """News article with localized title and body."""

    __tablename__ = "articles"

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )

    # Localized content: {"en": ..., "am": ..., "om": ...}
    title: Mapped[LocalizedText] = mapped_column(LocalizedJSON, nullable=False)
    content: Mapped[LocalizedText] = mapped_column(LocalizedJSON, nullable=False)

    status: Mapped[str] = mapped_column(
        String(20),
        default=ArticleStatus.PENDING.value,
        nullable=False,
    )

    author_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("categories.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    subcategory_id: Mapped[Optional[str]] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("subcategories.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )

    featured_image: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    view_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    author: Mapped["User"] = relationship("User", lazy="selectin")
    category: Mapped["Category"] = relationship("Category", lazy="selectin")
    subcategory: Mapped[Optional["Subcategory"]] = relationship("Subcategory", lazy="selectin")
    tags: Mapped[List["Tag"]] = relationship(
        "Tag",
        secondary=article_tags,
        lazy="selectin",
        order_by="Tag.name",
    )

    __table_args__ = (
        Index("ix_articles_status_created", "status", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Article(id={self.id}, status={self.status})>"

    @property
    def tag_names(self) -> list[str]:
        return [tag.name for tag in self.tags]

    @property
    def category_name(self) -> Optional[str]:
        return self.category.name if self.category else None

    @property
    def subcategory_name(self) -> Optional[str]:
        return self.subcategory.name if self.subcategory else None
