"""
Route guard for the role-specific portal areas.

Decides, per request path, whether the caller may proceed or must be sent
to a login entry point or to the subscription renewal flow.
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from core.domain.subscription import Eligibility
from core.domain.user import UserRole
from core.security.tokens import SessionIdentity, TokenService
from infrastructure.database.models.user import User

logger = logging.getLogger(__name__)

RENEWAL_PATH = "/auth?renew=1"

UserLoader = Callable[[str], Awaitable[Optional[User]]]
AccessChecker = Callable[[User], Awaitable[Eligibility]]


@dataclass(frozen=True)
class ProtectedArea:
    prefix: str
    entry_point: str
    # None means any authenticated role
    required_role: Optional[UserRole] = None
    subscription_gate: bool = False

    def covers(self, path: str) -> bool:
        return path == self.prefix or path.startswith(self.prefix + "/")


PROTECTED_AREAS = (
    ProtectedArea("/admin", "/admin/auth", UserRole.ADMIN),
    ProtectedArea("/writer", "/writer/auth", UserRole.WRITER),
    ProtectedArea("/profile", "/auth", None, subscription_gate=True),
)


@dataclass(frozen=True)
class GuardDecision:
    allow: bool
    redirect_to: Optional[str] = None
    identity: Optional[SessionIdentity] = None


ALLOW = GuardDecision(allow=True)


class RouteGuard:
    """Maps a (path, session token) pair to an allow or redirect decision."""

    def __init__(self, token_service: TokenService, areas: tuple[ProtectedArea, ...] = PROTECTED_AREAS):
        self.token_service = token_service
        self.areas = areas
        self._entry_points = {area.entry_point for area in areas}

    def match(self, path: str) -> Optional[ProtectedArea]:
        """The protected area for *path*, or None for public paths and entry points."""
        if path in self._entry_points:
            return None
        for area in self.areas:
            if area.covers(path):
                return area
        return None

    async def decide(
        self,
        path: str,
        token: Optional[str],
        load_user: UserLoader,
        check_access: AccessChecker,
    ) -> GuardDecision:
        """
        Evaluate a request.

        Never raises: any failure while loading the user or checking the
        subscription results in a redirect to the area's entry point.
        """
        area = self.match(path)
        if area is None:
            return ALLOW

        redirect = GuardDecision(allow=False, redirect_to=area.entry_point)

        identity = self.token_service.resolve_session(token)
        if identity is None:
            return redirect
        if area.required_role is not None and identity.role != area.required_role.value:
            return redirect

        try:
            user = await load_user(identity.user_id)
            if user is None or not user.is_active or user.role != identity.role:
                return redirect

            if area.subscription_gate and user.role == UserRole.READER.value:
                eligibility = await check_access(user)
                if not eligibility.eligible:
                    return GuardDecision(allow=False, redirect_to=RENEWAL_PATH, identity=identity)
        except Exception as e:
            logger.error("Route guard failed for %s: %s", path, e)
            return redirect

        return GuardDecision(allow=True, identity=identity)
