"""
Portal guard middleware.

Runs ``RouteGuard`` for /admin, /writer and /profile page requests. Refused
visitors get a 307 to the area's login entry point (or the renewal flow);
admitted ones continue with ``request.state.identity`` set. API routes are
not matched here; they authenticate through dependencies instead.
"""

from fastapi import Request, Response
from fastapi.responses import RedirectResponse

from api.dependencies import extract_session_token
from infrastructure.database import Database
from infrastructure.database.models.user import User
from services.route_guard import RouteGuard
from services.subscriptions import SubscriptionService

from .http import CallNext


async def portal_guard(request: Request, call_next: CallNext) -> Response:
    guard: RouteGuard = request.app.state.route_guard
    path = request.url.path
    if guard.match(path) is None:
        return await call_next(request)

    database: Database = request.app.state.database
    async with database.session() as db:
        subscriptions = SubscriptionService(db)

        async def load_user(user_id: str):
            return await db.get(User, user_id)

        decision = await guard.decide(
            path,
            extract_session_token(request),
            load_user,
            subscriptions.check_access,
        )

    if not decision.allow:
        return RedirectResponse(decision.redirect_to, status_code=307)
    request.state.identity = decision.identity
    return await call_next(request)
