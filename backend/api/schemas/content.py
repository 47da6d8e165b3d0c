"""
Content API schemas for articles, categories and subcategories.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from api.schemas.common import CamelModel
from core.domain.localization import get_localized_content
from infrastructure.database.models.content import Article

# ============================================================================
# Category Schemas
# ============================================================================


class SubcategoryResponse(CamelModel):
    id: str
    name: str
    category_id: str


class CategoryResponse(CamelModel):
    id: str
    name: str
    subcategories: list[SubcategoryResponse] = Field(default_factory=list)


class CategoryCreateRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)


class SubcategoryCreateRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    category_id: str


# ============================================================================
# Article Schemas
# ============================================================================


class AuthorSummary(CamelModel):
    id: str
    name: str


class ArticleResponse(CamelModel):
    """Article with all of its translations.

    ``display_title``/``display_content`` are filled in when the caller asks
    for a specific language.
    """

    id: str
    title: dict[str, str]
    content: dict[str, str]
    display_title: Optional[str] = None
    display_content: Optional[str] = None
    status: str
    category_id: str
    category: Optional[str] = None
    subcategory_id: Optional[str] = None
    subcategory: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    featured_image: Optional[str] = None
    view_count: int = 0
    author: Optional[AuthorSummary] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_article(cls, article: Article, lang: Optional[str] = None) -> "ArticleResponse":
        return cls(
            id=article.id,
            title=article.title,
            content=article.content,
            display_title=get_localized_content(article.title, lang) if lang else None,
            display_content=get_localized_content(article.content, lang) if lang else None,
            status=article.status,
            category_id=article.category_id,
            category=article.category_name,
            subcategory_id=article.subcategory_id,
            subcategory=article.subcategory_name,
            tags=article.tag_names,
            featured_image=article.featured_image,
            view_count=article.view_count or 0,
            author=AuthorSummary(id=article.author.id, name=article.author.name) if article.author else None,
            created_at=article.created_at,
            updated_at=article.updated_at,
        )


class ArticleFeedResponse(CamelModel):
    articles: list[ArticleResponse]
    has_more: bool
    total_count: int


class ArticleListResponse(CamelModel):
    """Paginated admin listing."""

    items: list[ArticleResponse]
    total: int
    page: int
    page_size: int
    pages: int


class ArticleIdRequest(CamelModel):
    article_id: str = Field(..., min_length=1)


class ViewCountResponse(CamelModel):
    view_count: int
    unique_view_count: Optional[int] = None
