"""
API dependencies for authentication and service wiring.

Shared collaborators (token service, password hasher, image storage,
notifier) live on ``app.state`` and are looked up per request.
"""

import hmac
from typing import Annotated, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from adapters.notifications.article_notifier import ArticleNotifier
from adapters.storage.image_storage import StorageAdapter
from core.errors import Unauthorized
from core.security.password import PasswordHasher
from core.security.tokens import SessionIdentity, TokenService
from infrastructure.config.settings import settings
from infrastructure.database.connection import get_db
from infrastructure.database.models.user import User
from services.accounts import AccountService
from services.catalog import CatalogService
from services.engagement import EngagementService
from services.moderation import ModerationService
from services.subscriptions import SubscriptionService


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_storage(request: Request) -> StorageAdapter:
    return request.app.state.image_storage


def get_notifier(request: Request) -> ArticleNotifier:
    return request.app.state.notifier


def extract_session_token(request: Request) -> Optional[str]:
    """Bearer header first (API clients), then the session cookie (browsers)."""
    authorization = request.headers.get("authorization")
    if authorization and authorization.startswith("Bearer "):
        token = authorization[len("Bearer "):].strip()
        if token:
            return token
    return request.cookies.get(settings.session_cookie_name)


async def get_session_identity(
    request: Request,
    token_service: Annotated[TokenService, Depends(get_token_service)],
) -> Optional[SessionIdentity]:
    """Resolve the session if one is present; anonymous callers get None."""
    return token_service.resolve_session(extract_session_token(request))


async def get_optional_user(
    identity: Annotated[Optional[SessionIdentity], Depends(get_session_identity)],
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    if identity is None:
        return None
    user = await db.get(User, identity.user_id)
    if user is None or not user.is_active:
        return None
    return user


async def get_current_user(
    user: Annotated[Optional[User], Depends(get_optional_user)],
) -> User:
    """
    Dependency to get the current authenticated user.

    Raises:
        Unauthorized: No valid session, or the account is gone or deactivated
    """
    if user is None:
        raise Unauthorized("Not authenticated")
    return user


def get_account_service(
    db: AsyncSession = Depends(get_db),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
) -> AccountService:
    return AccountService(db, password_hasher)


def get_subscription_service(
    db: AsyncSession = Depends(get_db),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
) -> SubscriptionService:
    return SubscriptionService(db, password_hasher)


def get_catalog_service(db: AsyncSession = Depends(get_db)) -> CatalogService:
    return CatalogService(db)


def get_engagement_service(db: AsyncSession = Depends(get_db)) -> EngagementService:
    return EngagementService(db)


def get_moderation_service(
    db: AsyncSession = Depends(get_db),
    storage: StorageAdapter = Depends(get_storage),
    notifier: ArticleNotifier = Depends(get_notifier),
) -> ModerationService:
    return ModerationService(db, storage, notifier)


async def verify_billing_key(
    x_billing_key: Annotated[Optional[str], Header()] = None,
) -> None:
    """Billing callbacks must carry the shared key when one is configured."""
    expected = settings.billing_api_key
    if not expected:
        return
    if not x_billing_key or not hmac.compare_digest(x_billing_key, expected):
        raise Unauthorized("Invalid billing key")
