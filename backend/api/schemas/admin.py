"""
Admin API schemas for moderation and staff management.
"""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from api.schemas.common import CamelModel
from core.domain.content import ArticleStatus


class ReviewRequest(CamelModel):
    """Admin decision on an article."""

    id: str = Field(..., min_length=1, description="Article ID")
    status: ArticleStatus


class WriterCreateRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=100)


class WriterResponse(CamelModel):
    id: str
    name: str
    email: Optional[str] = None
    is_active: bool
    article_count: int = 0
    created_at: datetime


class StatusCounts(CamelModel):
    pending: int = 0
    approved: int = 0
    rejected: int = 0
    disabled: int = 0

    @classmethod
    def from_counts(cls, counts: dict[str, int]) -> "StatusCounts":
        return cls(**{status.value.lower(): counts.get(status.value, 0) for status in ArticleStatus})


class AdminDashboardResponse(CamelModel):
    articles: StatusCounts
    writer_count: int
    subscriber_count: int
