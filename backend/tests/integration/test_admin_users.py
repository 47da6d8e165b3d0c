"""Integration tests for admin management of writers and subscribers."""

import pytest
from httpx import AsyncClient

from conftest import STAFF_PASSWORD, auth_headers_for
from core.domain.content import ArticleStatus
from infrastructure.database.models.user import User

pytestmark = pytest.mark.asyncio


async def test_create_writer_who_can_then_log_in(async_client: AsyncClient, admin_user: User):
    response = await async_client.post(
        "/api/v1/admin/writers",
        json={"name": "Columnist", "email": "columnist@example.com", "password": STAFF_PASSWORD},
        headers=auth_headers_for(admin_user),
    )
    login = await async_client.post(
        "/api/v1/auth/writer/login",
        json={"email": "columnist@example.com", "password": STAFF_PASSWORD},
    )

    assert response.status_code == 201
    assert response.json()["articleCount"] == 0
    assert login.status_code == 200


async def test_duplicate_writer_email(async_client: AsyncClient, admin_user: User, writer_user: User):
    response = await async_client.post(
        "/api/v1/admin/writers",
        json={"name": "Copy", "email": writer_user.email, "password": STAFF_PASSWORD},
        headers=auth_headers_for(admin_user),
    )
    assert response.status_code == 409


async def test_list_writers_with_article_counts(
    async_client: AsyncClient, admin_user: User, writer_user: User, make_article
):
    await make_article()
    await make_article(status=ArticleStatus.PENDING)

    response = await async_client.get("/api/v1/admin/writers", headers=auth_headers_for(admin_user))

    assert response.status_code == 200
    assert [(w["id"], w["articleCount"]) for w in response.json()] == [(writer_user.id, 2)]


async def test_deactivated_writer_cannot_log_in(async_client: AsyncClient, admin_user: User, writer_user: User):
    response = await async_client.put(
        f"/api/v1/admin/writers/{writer_user.id}/deactivate",
        headers=auth_headers_for(admin_user),
    )
    login = await async_client.post(
        "/api/v1/auth/writer/login",
        json={"email": writer_user.email, "password": STAFF_PASSWORD},
    )

    assert response.status_code == 200
    assert response.json()["isActive"] is False
    assert login.status_code == 401


async def test_deactivate_unknown_writer(async_client: AsyncClient, admin_user: User, reader_user: User):
    response = await async_client.put(
        f"/api/v1/admin/writers/{reader_user.id}/deactivate",
        headers=auth_headers_for(admin_user),
    )

    assert response.status_code == 404
    assert response.json() == {"error": "Writer not found"}


async def test_list_subscribers(async_client: AsyncClient, admin_user: User, reader_user: User):
    response = await async_client.get("/api/v1/admin/subscribers", headers=auth_headers_for(admin_user))

    assert [s["phone"] for s in response.json()] == [reader_user.phone]


async def test_readers_cannot_list_subscribers(async_client: AsyncClient, reader_user: User):
    response = await async_client.get("/api/v1/admin/subscribers", headers=auth_headers_for(reader_user))
    assert response.status_code == 401
