"""Integration tests for the guarded portal areas."""

import pytest
from httpx import AsyncClient

from conftest import auth_headers_for, session_token
from core.domain.content import ArticleStatus
from infrastructure.config import settings
from infrastructure.database.models.user import User

pytestmark = pytest.mark.asyncio


class TestRedirects:
    @pytest.mark.parametrize(
        "path, entry_point",
        [
            ("/admin/dashboard", "/admin/auth"),
            ("/writer/dashboard", "/writer/auth"),
            ("/profile", "/auth"),
        ],
    )
    async def test_anonymous_is_sent_to_login(self, async_client: AsyncClient, path, entry_point):
        response = await async_client.get(path)

        assert response.status_code == 307
        assert response.headers["location"] == entry_point

    async def test_writer_cannot_enter_admin_area(self, async_client: AsyncClient, writer_user: User):
        response = await async_client.get("/admin/dashboard", headers=auth_headers_for(writer_user))

        assert response.status_code == 307
        assert response.headers["location"] == "/admin/auth"

    async def test_expired_reader_is_sent_to_renewal(self, async_client: AsyncClient, expired_reader: User):
        response = await async_client.get("/profile", headers=auth_headers_for(expired_reader))

        assert response.status_code == 307
        assert response.headers["location"] == "/auth?renew=1"

    @pytest.mark.parametrize("path", ["/auth", "/writer/auth", "/admin/auth"])
    async def test_entry_points_are_open(self, async_client: AsyncClient, path):
        response = await async_client.get(path)

        assert response.status_code == 200
        assert response.json()["page"] == "auth"

    async def test_renewal_flag(self, async_client: AsyncClient):
        response = await async_client.get("/auth", params={"renew": "1"})

        assert response.json()["renew"] is True
        assert response.json()["loginEndpoint"] == "/api/v1/auth/login"


class TestPages:
    async def test_admin_dashboard(
        self, async_client: AsyncClient, admin_user: User, writer_user: User, reader_user: User, make_article
    ):
        await make_article(status=ArticleStatus.PENDING)
        await make_article(status=ArticleStatus.APPROVED)

        response = await async_client.get("/admin/dashboard", headers=auth_headers_for(admin_user))

        assert response.status_code == 200
        data = response.json()
        assert data["articles"] == {"pending": 1, "approved": 1, "rejected": 0, "disabled": 0}
        assert data["writerCount"] == 1
        assert data["subscriberCount"] == 1

    async def test_writer_dashboard_via_cookie(self, async_client: AsyncClient, writer_user: User, make_article):
        await make_article(status=ArticleStatus.PENDING)
        async_client.cookies.set(settings.session_cookie_name, session_token(writer_user))

        response = await async_client.get("/writer/dashboard")

        assert response.status_code == 200
        data = response.json()
        assert data["writer"]["email"] == writer_user.email
        assert data["counts"]["pending"] == 1
        assert len(data["articles"]) == 1

    async def test_reader_profile(self, async_client: AsyncClient, reader_user: User, make_article):
        article = await make_article()
        headers = auth_headers_for(reader_user)
        await async_client.post("/api/v1/bookmarks", json={"articleId": article.id}, headers=headers)

        response = await async_client.get("/profile", headers=headers)

        assert response.status_code == 200
        data = response.json()
        assert data["user"]["id"] == reader_user.id
        assert [b["id"] for b in data["bookmarks"]] == [article.id]
        assert data["favorites"] == []
