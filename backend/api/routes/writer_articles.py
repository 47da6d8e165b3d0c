"""
Writer article routes.

Articles are submitted and edited as multipart forms so a featured image
can travel with the text. ``title`` and ``content`` carry JSON maps of
language code to text; ``tags`` is comma-separated.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status

from api.dependencies import get_moderation_service
from api.deps_admin import get_current_writer_user
from api.schemas.content import ArticleResponse
from api.utils import parse_localized_field, parse_tags, read_image_upload
from infrastructure.database.models.user import User
from services.moderation import ArticleDraft, ArticlePatch, ModerationService

router = APIRouter(prefix="/writer/articles", tags=["Writer"])


@router.get("", response_model=list[ArticleResponse])
async def list_my_articles(
    writer: Annotated[User, Depends(get_current_writer_user)],
    moderation: ModerationService = Depends(get_moderation_service),
) -> list[ArticleResponse]:
    articles = await moderation.list_for_author(writer.id)
    return [ArticleResponse.from_article(article) for article in articles]


@router.post("", response_model=ArticleResponse, status_code=status.HTTP_201_CREATED)
async def submit_article(
    writer: Annotated[User, Depends(get_current_writer_user)],
    title: str = Form(...),
    content: str = Form(...),
    category_id: str = Form(..., alias="categoryId"),
    subcategory_id: Optional[str] = Form(None, alias="subcategoryId"),
    tags: Optional[str] = Form(None),
    featured_image_url: Optional[str] = Form(None, alias="featuredImageUrl"),
    featured_image: Optional[UploadFile] = File(None, alias="featuredImage"),
    moderation: ModerationService = Depends(get_moderation_service),
) -> ArticleResponse:
    """Submit a new article for review."""
    draft = ArticleDraft(
        title=parse_localized_field(title, "title"),
        content=parse_localized_field(content, "content"),
        category_id=category_id,
        subcategory_id=subcategory_id or None,
        tags=parse_tags(tags) or [],
        image=await read_image_upload(featured_image),
        featured_image_url=featured_image_url or None,
    )
    article = await moderation.submit(draft, writer)
    return ArticleResponse.from_article(article)


@router.get("/{article_id}", response_model=ArticleResponse)
async def get_my_article(
    article_id: str,
    writer: Annotated[User, Depends(get_current_writer_user)],
    moderation: ModerationService = Depends(get_moderation_service),
) -> ArticleResponse:
    article = await moderation.get_for_author(article_id, writer)
    return ArticleResponse.from_article(article)


@router.put("/{article_id}", response_model=ArticleResponse)
async def update_my_article(
    article_id: str,
    writer: Annotated[User, Depends(get_current_writer_user)],
    title: Optional[str] = Form(None),
    content: Optional[str] = Form(None),
    category_id: Optional[str] = Form(None, alias="categoryId"),
    subcategory_id: Optional[str] = Form(None, alias="subcategoryId"),
    tags: Optional[str] = Form(None),
    featured_image_url: Optional[str] = Form(None, alias="featuredImageUrl"),
    featured_image: Optional[UploadFile] = File(None, alias="featuredImage"),
    moderation: ModerationService = Depends(get_moderation_service),
) -> ArticleResponse:
    """
    Edit an article. Fields that are not sent stay as they are; ``tags``
    replaces the whole tag set. The article goes back to PENDING review;
    disabled articles answer 400.
    """
    patch = ArticlePatch(
        title=parse_localized_field(title, "title"),
        content=parse_localized_field(content, "content"),
        category_id=category_id or None,
        subcategory_id=subcategory_id,
        tags=parse_tags(tags),
        image=await read_image_upload(featured_image),
        featured_image_url=featured_image_url,
    )
    article = await moderation.update(article_id, patch, writer)
    return ArticleResponse.from_article(article)


@router.delete("/{article_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_my_article(
    article_id: str,
    writer: Annotated[User, Depends(get_current_writer_user)],
    moderation: ModerationService = Depends(get_moderation_service),
) -> Response:
    """Permanently delete an article and its image."""
    await moderation.delete_own(article_id, writer)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
