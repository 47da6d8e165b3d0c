"""
SQLAlchemy database models.
"""

from .base import Base, TimestampMixin
from .content import Article, Category, Subcategory, Tag, article_tags
from .engagement import ArticleView, Bookmark, FavoriteArticle
from .notification import Notification, NotificationType
from .user import User

__all__ = [
    "Base",
    "TimestampMixin",
    "User",
    "Article",
    "Category",
    "Subcategory",
    "Tag",
    "article_tags",
    "ArticleView",
    "Bookmark",
    "FavoriteArticle",
    "Notification",
    "NotificationType",
]
