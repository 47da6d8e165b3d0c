"""Daily Sport API: application wiring.

Shared collaborators (database, token service, hasher, image storage,
approval notifier, route guard) are built once here and kept on
``app.state``; dependencies and middleware read them from there so tests
can swap any of them.
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy.exc import SQLAlchemyError

from adapters.notifications.article_notifier import ArticleNotifier
from adapters.storage.image_storage import get_storage_adapter
from api.middleware.http import body_size_limit, request_context, security_headers
from api.middleware.portal_guard import portal_guard
from api.middleware.rate_limit import limiter
from api.routes import api_router, portal_router
from core.errors import DomainError
from core.security.password import PasswordHasher
from core.security.tokens import TokenService
from infrastructure.config import get_settings
from infrastructure.database import Database, close_db, init_db
from infrastructure.database.seed import seed_reference_data
from infrastructure.logging_config import setup_logging
from services.route_guard import RouteGuard

settings = get_settings()
logger = logging.getLogger(__name__)


async def _check_rate_limit_store() -> None:
    """Production limits are only shared across workers when Redis answers."""
    import redis.asyncio as aioredis

    client = aioredis.from_url(settings.redis_url)
    try:
        await client.ping()
        logger.info("Rate limiter backed by Redis")
    except Exception as e:
        # Keep serving; slowapi falls back to per-process counters
        logger.critical("Redis unreachable, rate limits are per process: %s", e)
    finally:
        await client.aclose()


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(
        json_output=settings.is_production and not settings.debug,
        level="DEBUG" if settings.debug else "INFO",
    )
    logger.info("Starting %s v%s (%s)", settings.app_name, settings.app_version, settings.environment)

    database: Database = app.state.database
    if settings.is_development:
        await init_db(database)
        async with database.session() as db:
            created = await seed_reference_data(db)
        logger.info("Development database ready, %d reference rows seeded", created)

    if settings.is_production and settings.redis_url:
        await _check_rate_limit_store()

    if not app.state.notifier.enabled:
        logger.warning("NOTIFICATION_URL not set; approved articles will not be announced")

    yield

    await close_db(app.state.database)
    logger.info("%s stopped", settings.app_name)


app = FastAPI(
    title=settings.app_name,
    description="Sports news with reader subscriptions, writer submissions and editorial review",
    version=settings.app_version,
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan,
)

app.state.database = Database.from_settings(settings)
app.state.token_service = TokenService(
    secret_key=settings.jwt_secret_key,
    algorithm=settings.jwt_algorithm,
    session_expire_minutes=settings.session_token_expire_minutes,
)
app.state.password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
app.state.image_storage = get_storage_adapter(settings)
app.state.notifier = ArticleNotifier(
    url=settings.notification_url,
    timeout=settings.notification_timeout_seconds,
)
app.state.route_guard = RouteGuard(app.state.token_service)
app.state.limiter = limiter


# Error rendering


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Storage failure on %s: %s", request.url.path, type(exc).__name__)
    return JSONResponse(status_code=503, content={"error": "Storage failure"})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    if settings.is_production:
        # Type and a truncated message only
        logger.error("Unhandled %s on %s: %s", type(exc).__name__, request.url.path, str(exc)[:200])
    else:
        logger.error("Unhandled error on %s", request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


# Middleware, innermost first: each registration wraps the ones before it

app.add_middleware(SlowAPIMiddleware)
app.middleware("http")(body_size_limit((settings.max_image_size_mb + 1) * 1024 * 1024))
app.middleware("http")(portal_guard)
app.middleware("http")(request_context)
app.middleware("http")(security_headers)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Requested-With", "X-Billing-Key"],
)


if settings.storage_type.lower() == "local":
    os.makedirs(settings.storage_local_path, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=settings.storage_local_path), name="uploads")

app.include_router(api_router, prefix="/api/v1")
app.include_router(portal_router)


@app.get("/")
async def root():
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "health": "/api/v1/health",
        "portals": {"reader": "/auth", "writer": "/writer/auth", "admin": "/admin/auth"},
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        workers=1 if settings.is_development else settings.workers,
    )
