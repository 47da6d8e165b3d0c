"""
Service layer for business logic.
"""

from services.accounts import AccountService
from services.catalog import CatalogService, FeedPage
from services.engagement import EngagementKind, EngagementService, ViewStats
from services.moderation import ArticleDraft, ArticlePatch, ImageUpload, ModerationService
from services.route_guard import GuardDecision, RouteGuard
from services.subscriptions import SubscriptionService

__all__ = [
    "AccountService",
    "CatalogService",
    "FeedPage",
    "EngagementKind",
    "EngagementService",
    "ViewStats",
    "ArticleDraft",
    "ArticlePatch",
    "ImageUpload",
    "ModerationService",
    "GuardDecision",
    "RouteGuard",
    "SubscriptionService",
]
