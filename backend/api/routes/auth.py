"""
Authentication API routes.

Readers sign in with phone + password, writers and admins with email +
password. Every successful login issues a session token, returned in the
body for API clients and set as an HttpOnly cookie for browsers.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, Response

from api.dependencies import (
    get_account_service,
    get_current_user,
    get_session_identity,
    get_token_service,
)
from api.middleware.rate_limit import get_rate_limit, limiter
from api.schemas.auth import (
    AuthCheckResponse,
    ReaderLoginRequest,
    ReaderSignupRequest,
    SessionResponse,
    StaffLoginRequest,
    StaffSignupRequest,
    UserResponse,
)
from core.domain.user import UserRole
from core.errors import NotFoundError
from core.security.tokens import SessionIdentity, TokenService
from infrastructure.config.settings import settings
from infrastructure.database.models.user import User
from infrastructure.logging_config import mask_phone
from services.accounts import AccountService

logger = logging.getLogger(__name__)


def _get_cookie_kwargs(settings_obj) -> dict:
    """Return cookie kwargs based on environment.

    Uses SameSite=None; Secure=True whenever the frontend is deployed to a
    non-localhost domain, SameSite=Lax for local development.
    """
    is_production = getattr(settings_obj, "environment", "development") == "production"
    frontend_url = getattr(settings_obj, "frontend_url", "http://localhost:3000")
    is_deployed = not any(h in frontend_url for h in ("localhost", "127.0.0.1", "0.0.0.0"))
    use_cross_site = is_production or is_deployed
    kwargs = dict(
        httponly=True,
        secure=use_cross_site,
        samesite="none" if use_cross_site else "lax",
        path="/",
    )
    cookie_domain = getattr(settings_obj, "cookie_domain", None)
    if cookie_domain:
        kwargs["domain"] = cookie_domain
    return kwargs


def set_session_cookie(response: Response, token: str, token_service: TokenService) -> None:
    """Set the HttpOnly session cookie.

    The cookie may outlive the token; the token's own expiry decides validity.
    """
    max_age = max(settings.session_cookie_max_age_seconds, token_service.session_lifetime_seconds)
    response.set_cookie(settings.session_cookie_name, token, max_age=max_age, **_get_cookie_kwargs(settings))


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(settings.session_cookie_name, **_get_cookie_kwargs(settings))


def session_response(
    user: User,
    token_service: TokenService,
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    """Issue a session for *user* and build the login response."""
    token = token_service.issue_session(
        user_id=user.id,
        role=user.role,
        phone=user.phone,
        email=user.email,
    )
    body = SessionResponse(
        user=UserResponse.model_validate(user),
        token=token,
        expires_in=token_service.session_lifetime_seconds,
    )
    response = JSONResponse(content=body.model_dump(mode="json", by_alias=True), status_code=status_code)
    set_session_cookie(response, token, token_service)
    return response


router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=SessionResponse)
@limiter.limit(get_rate_limit("login"))
async def login(
    request: Request,
    login_data: ReaderLoginRequest,
    accounts: AccountService = Depends(get_account_service),
    token_service: TokenService = Depends(get_token_service),
) -> JSONResponse:
    """
    Reader login.

    Fails with 401 on bad credentials and 403 when the subscription is not
    active (the lazy expiry check runs first).
    """
    user = await accounts.authenticate(
        login_data.phone,
        login_data.password,
        role=UserRole.READER,
        require_subscription=True,
    )
    logger.info("Reader %s logged in", mask_phone(user.phone))
    return session_response(user, token_service)


@router.post("/signup", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(get_rate_limit("signup"))
async def signup(
    request: Request,
    signup_data: ReaderSignupRequest,
    accounts: AccountService = Depends(get_account_service),
    token_service: TokenService = Depends(get_token_service),
) -> JSONResponse:
    """Reader signup. Starts a free trial and signs the reader in."""
    user = await accounts.signup_reader(signup_data.name, signup_data.phone, signup_data.password)
    return session_response(user, token_service, status_code=status.HTTP_201_CREATED)


@router.post("/writer/login", response_model=SessionResponse)
@limiter.limit(get_rate_limit("login"))
async def writer_login(
    request: Request,
    login_data: StaffLoginRequest,
    accounts: AccountService = Depends(get_account_service),
    token_service: TokenService = Depends(get_token_service),
) -> JSONResponse:
    user = await accounts.authenticate(login_data.email, login_data.password, role=UserRole.WRITER)
    logger.info("Writer %s logged in", user.id)
    return session_response(user, token_service)


@router.post("/admin/login", response_model=SessionResponse)
@limiter.limit(get_rate_limit("login"))
async def admin_login(
    request: Request,
    login_data: StaffLoginRequest,
    accounts: AccountService = Depends(get_account_service),
    token_service: TokenService = Depends(get_token_service),
) -> JSONResponse:
    user = await accounts.authenticate(login_data.email, login_data.password, role=UserRole.ADMIN)
    logger.info("Admin %s logged in", user.id)
    return session_response(user, token_service)


@router.post("/admin/signup", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(get_rate_limit("signup"))
async def admin_signup(
    request: Request,
    signup_data: StaffSignupRequest,
    accounts: AccountService = Depends(get_account_service),
    token_service: TokenService = Depends(get_token_service),
) -> JSONResponse:
    """
    Self-service admin signup.

    Only available when ADMIN_SIGNUP_ENABLED is set (bootstrap of a fresh
    deployment); otherwise the route behaves as if it did not exist.
    """
    if not settings.admin_signup_enabled:
        raise NotFoundError()
    user = await accounts.create_staff(
        signup_data.name,
        signup_data.email,
        signup_data.password,
        UserRole.ADMIN,
    )
    return session_response(user, token_service, status_code=status.HTTP_201_CREATED)


@router.post("/logout", status_code=status.HTTP_200_OK)
async def logout(request: Request) -> JSONResponse:
    """
    Clear the session cookie.

    Session tokens are stateless; an API client holding the token must
    discard it itself.
    """
    response = JSONResponse(content={"message": "Logged out successfully"})
    clear_session_cookie(response)
    return response


@router.get("/check", response_model=AuthCheckResponse)
async def check_auth(
    identity: Annotated[Optional[SessionIdentity], Depends(get_session_identity)],
) -> AuthCheckResponse:
    """Whether the caller holds a valid session. Never fails."""
    if identity is None:
        return AuthCheckResponse(is_authenticated=False)
    return AuthCheckResponse(is_authenticated=True, role=identity.role, user_id=identity.user_id)


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: Annotated[User, Depends(get_current_user)]) -> User:
    """Get current user profile."""
    return current_user
