"""
Favorite and bookmark schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from api.schemas.common import CamelModel


class EngagementToggleRequest(CamelModel):
    article_id: str = Field(..., min_length=1)


class FavoriteStatusResponse(CamelModel):
    is_favorite: bool


class BookmarkStatusResponse(CamelModel):
    is_bookmarked: bool


class SavedArticleResponse(CamelModel):
    id: str
    title: dict[str, str]
    category: str
    featured_image: Optional[str] = None
    created_at: datetime
