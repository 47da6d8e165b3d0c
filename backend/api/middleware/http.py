"""
Plain HTTP middleware registered on the app in ``main.py``.
"""

import logging
import time
import uuid
from typing import Awaitable, Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse

from infrastructure.config.settings import settings

logger = logging.getLogger("api.access")

CallNext = Callable[[Request], Awaitable[Response]]

QUIET_PREFIXES = ("/api/v1/health", "/uploads/")
BODY_METHODS = ("POST", "PUT", "PATCH")
UPLOAD_CACHE_CONTROL = "public, max-age=31536000, immutable"


def _request_id(request: Request) -> str:
    """Reuse the caller's X-Request-ID only when it is a UUID."""
    incoming = request.headers.get("X-Request-ID")
    if incoming:
        try:
            return str(uuid.UUID(incoming))
        except ValueError:
            pass
    return str(uuid.uuid4())


async def request_context(request: Request, call_next: CallNext) -> Response:
    """Tag the request with an id, time it and write one access log line."""
    request_id = _request_id(request)
    request.state.request_id = request_id
    started = time.perf_counter()

    response = await call_next(request)

    duration_ms = round((time.perf_counter() - started) * 1000, 1)
    response.headers["X-Request-ID"] = request_id
    response.headers["X-Response-Time"] = f"{duration_ms:.1f}ms"

    path = request.url.path
    if not path.startswith(QUIET_PREFIXES):
        extra = {
            "request_id": request_id,
            "method": request.method,
            "path": path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        }
        # Set by the portal guard for /profile, /writer and /admin pages
        identity = getattr(request.state, "identity", None)
        if identity is not None:
            extra["user_id"] = identity.user_id
        logger.info(
            "%s %s %s %.1fms", request.method, path, response.status_code, duration_ms, extra=extra
        )
    return response


def body_size_limit(max_bytes: int):
    """Reject declared bodies larger than ``max_bytes`` before they are read."""

    async def limit_body_size(request: Request, call_next: CallNext) -> Response:
        if request.method in BODY_METHODS:
            declared = request.headers.get("content-length", "")
            if declared.isdigit() and int(declared) > max_bytes:
                return JSONResponse(status_code=413, content={"error": "Request body too large"})
        return await call_next(request)

    return limit_body_size


async def security_headers(request: Request, call_next: CallNext) -> Response:
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    if settings.is_production:
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
    # Stored article images get a fresh name on every upload
    if request.url.path.startswith("/uploads/"):
        response.headers["Cache-Control"] = UPLOAD_CACHE_CONTROL
    return response
