"""
Category and subcategory routes.

Listing is public; creating and deleting is admin-only.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from api.dependencies import get_catalog_service
from api.deps_admin import get_current_admin_user
from api.schemas.content import (
    CategoryCreateRequest,
    CategoryResponse,
    SubcategoryCreateRequest,
    SubcategoryResponse,
)
from services.catalog import CatalogService

router = APIRouter(tags=["Categories"])
admin_router = APIRouter(
    prefix="/admin",
    tags=["Admin - Categories"],
    dependencies=[Depends(get_current_admin_user)],
)


@router.get("/categories", response_model=list[CategoryResponse])
async def list_categories(catalog: CatalogService = Depends(get_catalog_service)):
    """All categories with their subcategories, sorted by name."""
    return await catalog.list_categories()


@router.get("/subcategories", response_model=list[SubcategoryResponse])
async def list_subcategories(
    category_id: Optional[str] = Query(None, alias="categoryId"),
    catalog: CatalogService = Depends(get_catalog_service),
):
    return await catalog.list_subcategories(category_id)


@admin_router.post("/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    body: CategoryCreateRequest,
    catalog: CatalogService = Depends(get_catalog_service),
):
    return await catalog.create_category(body.name)


@admin_router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: str,
    catalog: CatalogService = Depends(get_catalog_service),
) -> Response:
    """Delete a category and its subcategories; refused while articles use it."""
    await catalog.delete_category(category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@admin_router.post(
    "/subcategories",
    response_model=SubcategoryResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_subcategory(
    body: SubcategoryCreateRequest,
    catalog: CatalogService = Depends(get_catalog_service),
):
    return await catalog.create_subcategory(body.name, body.category_id)


@admin_router.delete("/subcategories/{subcategory_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_subcategory(
    subcategory_id: str,
    catalog: CatalogService = Depends(get_catalog_service),
) -> Response:
    await catalog.delete_subcategory(subcategory_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
