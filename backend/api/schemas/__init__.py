"""
API request and response schemas.
"""

from .auth import (
    ReaderLoginRequest,
    ReaderSignupRequest,
    SessionResponse,
    StaffLoginRequest,
    StaffSignupRequest,
    UserResponse,
)
from .content import ArticleFeedResponse, ArticleResponse, CategoryResponse
from .subscription import SubscriberInfo, SubscriberResponse

__all__ = [
    "ReaderLoginRequest",
    "ReaderSignupRequest",
    "SessionResponse",
    "StaffLoginRequest",
    "StaffSignupRequest",
    "UserResponse",
    "ArticleFeedResponse",
    "ArticleResponse",
    "CategoryResponse",
    "SubscriberInfo",
    "SubscriberResponse",
]
