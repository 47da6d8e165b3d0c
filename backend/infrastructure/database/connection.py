"""Database connection and session management."""
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ..config import Settings
from .models.base import Base


class Database:
    """Owns the async engine and session factory for one application instance.

    Built once at application construction and stored on ``app.state.database``;
    request handlers acquire sessions through :func:`get_db`.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.session_maker = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Create the engine described by the application settings."""
        engine_kwargs = {
            "echo": settings.database_echo,
            "pool_pre_ping": True,
        }
        if not settings.database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_timeout=10,
                pool_recycle=3600,
            )
            # Enforce SSL for database connections in production
            if settings.is_production:
                engine_kwargs["connect_args"] = {"ssl": "require"}
        return cls(create_async_engine(settings.database_url, **engine_kwargs))

    @classmethod
    def from_engine(cls, engine: AsyncEngine) -> "Database":
        return cls(engine)

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Context manager yielding a session that is rolled back on error."""
        async with self.session_maker() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def create_all(self) -> None:
        """Create all tables known to the model metadata."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting database sessions."""
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session


async def init_db(database: Database) -> None:
    """Initialize database tables."""
    await database.create_all()


async def close_db(database: Optional[Database]) -> None:
    """Close database connections."""
    if database is not None:
        await database.dispose()
