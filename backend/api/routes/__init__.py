"""API Routes."""

from fastapi import APIRouter

from .admin_articles import router as admin_articles_router
from .admin_users import router as admin_users_router
from .articles import router as articles_router
from .auth import router as auth_router
from .categories import admin_router as admin_categories_router
from .categories import router as categories_router
from .engagement import router as engagement_router
from .health import router as health_router
from .portal import router as portal_router
from .subscribers import router as subscribers_router
from .user import router as user_router
from .writer_articles import router as writer_articles_router

# Create main API router
api_router = APIRouter()

# Include route modules
api_router.include_router(health_router, tags=["Health"])
api_router.include_router(auth_router)
api_router.include_router(subscribers_router)
api_router.include_router(user_router)
api_router.include_router(articles_router)
api_router.include_router(engagement_router)
api_router.include_router(categories_router)
api_router.include_router(writer_articles_router)
api_router.include_router(admin_articles_router)
api_router.include_router(admin_users_router)
api_router.include_router(admin_categories_router)

__all__ = ["api_router", "portal_router"]
