"""
Tests for the portal route guard, using in-memory user loaders.
"""

from types import SimpleNamespace

import pytest

from core.domain.subscription import Eligibility, EligibilityReason
from core.security import TokenService
from services.route_guard import RENEWAL_PATH, RouteGuard

tokens = TokenService(secret_key="guard-secret")
guard = RouteGuard(tokens)


def _user(role: str, user_id: str = "u-1", is_active: bool = True):
    return SimpleNamespace(id=user_id, role=role, is_active=is_active)


def _loader(*users):
    by_id = {user.id: user for user in users}

    async def load(user_id):
        return by_id.get(user_id)

    return load


def _checker(eligible: bool):
    async def check(user):
        return Eligibility(eligible, EligibilityReason.ACTIVE if eligible else EligibilityReason.EXPIRED)

    return check


def _token(role: str, user_id: str = "u-1") -> str:
    return tokens.issue_session(user_id=user_id, role=role)


class TestMatch:
    @pytest.mark.parametrize("path", ["/", "/auth", "/admin/auth", "/writer/auth", "/api/v1/articles", "/administrator"])
    def test_public_paths(self, path):
        assert guard.match(path) is None

    @pytest.mark.parametrize(
        "path, entry_point",
        [("/admin", "/admin/auth"), ("/admin/dashboard", "/admin/auth"), ("/writer/dashboard", "/writer/auth"), ("/profile", "/auth")],
    )
    def test_protected_paths(self, path, entry_point):
        assert guard.match(path).entry_point == entry_point


class TestDecide:
    async def test_public_path_is_allowed_without_token(self):
        decision = await guard.decide("/", None, _loader(), _checker(True))
        assert decision.allow is True

    async def test_missing_token_redirects_to_entry_point(self):
        decision = await guard.decide("/admin/dashboard", None, _loader(), _checker(True))
        assert decision.allow is False
        assert decision.redirect_to == "/admin/auth"

    async def test_invalid_token(self):
        decision = await guard.decide("/writer/dashboard", "garbage", _loader(), _checker(True))
        assert decision.redirect_to == "/writer/auth"

    async def test_matching_role_is_allowed(self):
        decision = await guard.decide(
            "/admin/dashboard", _token("ADMIN"), _loader(_user("ADMIN")), _checker(True)
        )
        assert decision.allow is True
        assert decision.identity.user_id == "u-1"

    async def test_wrong_role_redirects(self):
        decision = await guard.decide(
            "/admin/dashboard", _token("WRITER"), _loader(_user("WRITER")), _checker(True)
        )
        assert decision.redirect_to == "/admin/auth"

    async def test_deactivated_user_redirects(self):
        decision = await guard.decide(
            "/writer/dashboard",
            _token("WRITER"),
            _loader(_user("WRITER", is_active=False)),
            _checker(True),
        )
        assert decision.redirect_to == "/writer/auth"

    async def test_deleted_user_redirects(self):
        decision = await guard.decide("/writer/dashboard", _token("WRITER"), _loader(), _checker(True))
        assert decision.redirect_to == "/writer/auth"

    async def test_stale_role_claim_redirects(self):
        decision = await guard.decide(
            "/admin/dashboard", _token("ADMIN"), _loader(_user("WRITER")), _checker(True)
        )
        assert decision.allow is False

    async def test_reader_with_subscription(self):
        decision = await guard.decide("/profile", _token("READER"), _loader(_user("READER")), _checker(True))
        assert decision.allow is True

    async def test_reader_without_subscription_goes_to_renewal(self):
        decision = await guard.decide("/profile", _token("READER"), _loader(_user("READER")), _checker(False))
        assert decision.allow is False
        assert decision.redirect_to == RENEWAL_PATH

    async def test_staff_skip_subscription_gate(self):
        decision = await guard.decide("/profile", _token("WRITER"), _loader(_user("WRITER")), _checker(False))
        assert decision.allow is True

    async def test_loader_failure_redirects(self):
        async def broken(user_id):
            raise RuntimeError("database down")

        decision = await guard.decide("/profile", _token("READER"), broken, _checker(True))
        assert decision.allow is False
        assert decision.redirect_to == "/auth"
