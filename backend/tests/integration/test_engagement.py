"""Integration tests for favorites and bookmarks."""

import pytest
from httpx import AsyncClient

from conftest import auth_headers_for
from core.domain.content import ArticleStatus
from infrastructure.database.models.user import User

pytestmark = pytest.mark.asyncio


@pytest.mark.parametrize(
    "path, flag",
    [("/api/v1/favorites", "isFavorite"), ("/api/v1/bookmarks", "isBookmarked")],
)
async def test_toggle_round_trip(async_client: AsyncClient, make_article, reader_user: User, path, flag):
    article = await make_article()
    headers = auth_headers_for(reader_user)

    added = await async_client.post(path, json={"articleId": article.id}, headers=headers)
    status_after_add = await async_client.get(path, params={"articleId": article.id}, headers=headers)
    removed = await async_client.post(path, json={"articleId": article.id}, headers=headers)
    status_after_remove = await async_client.get(path, params={"articleId": article.id}, headers=headers)

    assert added.json() == {flag: True}
    assert status_after_add.json() == {flag: True}
    assert removed.json() == {flag: False}
    assert status_after_remove.json() == {flag: False}


async def test_list_favorite_articles(async_client: AsyncClient, make_article, reader_user: User):
    article = await make_article(featured_image="http://test/uploads/articles/2026/01/a.png")
    headers = auth_headers_for(reader_user)
    await async_client.post("/api/v1/favorites", json={"articleId": article.id}, headers=headers)

    response = await async_client.get("/api/v1/favorites/articles", headers=headers)

    assert response.status_code == 200
    items = response.json()
    assert len(items) == 1
    assert items[0]["id"] == article.id
    assert items[0]["title"]["en"] == "Derby day"
    assert items[0]["category"] == "National"
    assert items[0]["featuredImage"] == "http://test/uploads/articles/2026/01/a.png"


async def test_bookmarks_are_separate_from_favorites(
    async_client: AsyncClient, make_article, reader_user: User
):
    article = await make_article()
    headers = auth_headers_for(reader_user)
    await async_client.post("/api/v1/favorites", json={"articleId": article.id}, headers=headers)

    response = await async_client.get("/api/v1/bookmarks/articles", headers=headers)

    assert response.json() == []


async def test_saved_lists_are_per_user(
    async_client: AsyncClient, make_article, reader_user: User, writer_user: User
):
    article = await make_article()
    await async_client.post(
        "/api/v1/bookmarks", json={"articleId": article.id}, headers=auth_headers_for(reader_user)
    )

    response = await async_client.get("/api/v1/bookmarks/articles", headers=auth_headers_for(writer_user))

    assert response.json() == []


async def test_requires_session(async_client: AsyncClient, make_article):
    article = await make_article()

    response = await async_client.post("/api/v1/favorites", json={"articleId": article.id})

    assert response.status_code == 401


async def test_missing_article(async_client: AsyncClient, reader_user: User):
    response = await async_client.post(
        "/api/v1/bookmarks",
        json={"articleId": "00000000-0000-0000-0000-000000000000"},
        headers=auth_headers_for(reader_user),
    )
    assert response.status_code == 404


async def test_disabled_article_cannot_be_favorited(
    async_client: AsyncClient, make_article, reader_user: User
):
    article = await make_article(status=ArticleStatus.DISABLED)

    response = await async_client.post(
        "/api/v1/favorites", json={"articleId": article.id}, headers=auth_headers_for(reader_user)
    )

    assert response.status_code == 404
