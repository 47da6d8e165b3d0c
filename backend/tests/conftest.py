"""
Pytest configuration and shared fixtures for backend tests.
"""

import os
import sys
import tempfile
from pathlib import Path

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Settings are read once at import time; point them at throwaway resources first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "testing"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["STORAGE_TYPE"] = "local"
os.environ["STORAGE_LOCAL_PATH"] = tempfile.mkdtemp(prefix="dailysport-uploads-")
os.environ.pop("BILLING_API_KEY", None)
os.environ.pop("NOTIFICATION_URL", None)
os.environ.pop("REDIS_URL", None)
os.environ.pop("ADMIN_SIGNUP_ENABLED", None)

import pytest
from datetime import UTC, datetime, timedelta
from typing import AsyncGenerator, Optional
from unittest.mock import AsyncMock
from uuid import uuid4

from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Import after path is set
from adapters.notifications.article_notifier import ArticleNotifier
from adapters.storage.image_storage import LocalStorageAdapter
from core.domain.content import ArticleStatus
from core.domain.subscription import SubscriptionStatus
from core.domain.user import UserRole
from core.security import PasswordHasher, TokenService
from infrastructure.config import get_settings
from infrastructure.database import Database
from infrastructure.database.models import Article, Base, Category, Subcategory, User

# Initialize security services
password_hasher = PasswordHasher(rounds=4)
settings = get_settings()
token_service = TokenService(
    secret_key=settings.jwt_secret_key,
    algorithm=settings.jwt_algorithm,
    session_expire_minutes=settings.session_token_expire_minutes,
)

READER_PASSWORD = "readerpass1"
STAFF_PASSWORD = "staffpass123"

# Database URL for testing (in-memory SQLite)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def db_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session = async_sessionmaker(
        db_engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def service_db(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """A second session for the code under test, so fixture objects stay untouched."""
    async_session = async_sessionmaker(
        db_engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session() as session:
        yield session


# ============================================================================
# Users
# ============================================================================


@pytest.fixture
def make_user(db_session: AsyncSession):
    """Factory for users of any role."""

    async def _make_user(
        role: UserRole = UserRole.READER,
        phone: Optional[str] = None,
        email: Optional[str] = None,
        password: str = READER_PASSWORD,
        name: str = "Test User",
        subscription_status: Optional[SubscriptionStatus] = None,
        subscription_end: Optional[datetime] = None,
        is_active: bool = True,
    ) -> User:
        now = datetime.now(UTC)
        user = User(
            id=str(uuid4()),
            name=name,
            phone=phone,
            email=email,
            password_hash=password_hasher.hash(password),
            role=role.value,
            is_active=is_active,
            subscription_status=subscription_status.value if subscription_status else None,
            subscription_start=now - timedelta(days=1) if subscription_status else None,
            subscription_end=subscription_end,
        )
        db_session.add(user)
        await db_session.commit()
        return user

    return _make_user


@pytest.fixture
async def reader_user(make_user) -> User:
    """Reader with an active subscription ending in 30 days."""
    return await make_user(
        phone="0911000001",
        name="Active Reader",
        subscription_status=SubscriptionStatus.ACTIVE,
        subscription_end=datetime.now(UTC) + timedelta(days=30),
    )


@pytest.fixture
async def expired_reader(make_user) -> User:
    """Reader whose subscription ran out yesterday but still says ACTIVE."""
    return await make_user(
        phone="0911000002",
        name="Expired Reader",
        subscription_status=SubscriptionStatus.ACTIVE,
        subscription_end=datetime.now(UTC) - timedelta(days=1),
    )


@pytest.fixture
async def writer_user(make_user) -> User:
    return await make_user(
        role=UserRole.WRITER,
        email="writer@example.com",
        password=STAFF_PASSWORD,
        name="Staff Writer",
    )


@pytest.fixture
async def admin_user(make_user) -> User:
    return await make_user(
        role=UserRole.ADMIN,
        email="admin@example.com",
        password=STAFF_PASSWORD,
        name="Site Admin",
    )


def session_token(user: User) -> str:
    return token_service.issue_session(
        user_id=user.id,
        role=user.role,
        phone=user.phone,
        email=user.email,
    )


def auth_headers_for(user: User) -> dict:
    """Bearer headers carrying a fresh session for *user*."""
    return {"Authorization": f"Bearer {session_token(user)}"}


# ============================================================================
# Content
# ============================================================================


@pytest.fixture
async def category(db_session: AsyncSession) -> Category:
    """'National' with a 'Football' subcategory."""
    category = Category(name="National", subcategories=[Subcategory(name="Football")])
    db_session.add(category)
    await db_session.commit()
    return category


@pytest.fixture
async def other_category(db_session: AsyncSession) -> Category:
    category = Category(name="International", subcategories=[Subcategory(name="Tennis")])
    db_session.add(category)
    await db_session.commit()
    return category


@pytest.fixture
def make_article(db_session: AsyncSession, category: Category, writer_user: User):
    """Factory for articles written by ``writer_user`` in ``category``."""

    async def _make_article(
        status: ArticleStatus = ArticleStatus.APPROVED,
        title: Optional[dict] = None,
        content: Optional[dict] = None,
        author: Optional[User] = None,
        article_category: Optional[Category] = None,
        featured_image: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> Article:
        target_category = article_category or category
        article = Article(
            title=title or {"en": "Derby day", "am": "ደርቢ"},
            content=content or {"en": "Match report", "am": "የጨዋታ ዘገባ"},
            status=status.value,
            author_id=(author or writer_user).id,
            category_id=target_category.id,
            subcategory_id=target_category.subcategories[0].id,
            featured_image=featured_image,
            view_count=0,
        )
        if created_at is not None:
            article.created_at = created_at
        db_session.add(article)
        await db_session.commit()
        return article

    return _make_article


# ============================================================================
# HTTP client
# ============================================================================


@pytest.fixture
def upload_dir(tmp_path) -> Path:
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def notifier() -> AsyncMock:
    mock = AsyncMock(spec=ArticleNotifier)
    mock.article_approved.return_value = True
    return mock


@pytest.fixture
async def async_client(db_engine, notifier, upload_dir) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for testing."""
    # Import app here so the environment above is applied first
    from main import app

    original_state = {
        key: getattr(app.state, key)
        for key in ("database", "notifier", "image_storage")
    }
    app.state.database = Database.from_engine(db_engine)
    app.state.notifier = notifier
    app.state.image_storage = LocalStorageAdapter(
        base_path=str(upload_dir),
        public_base_url="http://test",
    )

    # Reset rate limiter state between tests to prevent cross-test 429s
    app.state.limiter.reset()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    for key, value in original_state.items():
        setattr(app.state, key, value)
