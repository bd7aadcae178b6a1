"""
SnippetBox Backend — Category Routes
======================================

What:  CRUD for the caller's categories.
How:   Every route depends on `get_current_user`. Renaming or deleting
       another user's category answers 403; an unknown id answers 404.
"""

from typing import List

from fastapi import APIRouter, Depends, Response

from snippetbox.dependencies import get_current_user, get_taxonomy_repository
from snippetbox.models.user import User
from snippetbox.repositories import TaxonomyRepository
from snippetbox.schemas.common import ErrorResponse
from snippetbox.schemas.taxonomy import CategoryResponse, NameRequest

router = APIRouter(prefix="/categories", tags=["Categories"])

_OWNED_ERRORS = {
    403: {"description": "Category belongs to another user", "model": ErrorResponse},
    404: {"description": "Category not found", "model": ErrorResponse},
}


@router.get("", response_model=List[CategoryResponse], summary="List my categories")
async def list_categories(
    current_user: User = Depends(get_current_user),
    taxonomy: TaxonomyRepository = Depends(get_taxonomy_repository),
) -> List[CategoryResponse]:
    categories = await taxonomy.list_categories(current_user.id)
    return [CategoryResponse.model_validate(category) for category in categories]


@router.post(
    "",
    status_code=201,
    response_model=CategoryResponse,
    responses={409: {"description": "Category already exists", "model": ErrorResponse}},
    summary="Create a category",
)
async def create_category(
    body: NameRequest,
    current_user: User = Depends(get_current_user),
    taxonomy: TaxonomyRepository = Depends(get_taxonomy_repository),
) -> CategoryResponse:
    category = await taxonomy.create_category(current_user.id, body.name)
    return CategoryResponse.model_validate(category)


@router.put(
    "/{category_id}",
    response_model=CategoryResponse,
    responses={
        **_OWNED_ERRORS,
        409: {"description": "Another category already has that name", "model": ErrorResponse},
    },
    summary="Rename a category",
)
async def update_category(
    category_id: int,
    body: NameRequest,
    current_user: User = Depends(get_current_user),
    taxonomy: TaxonomyRepository = Depends(get_taxonomy_repository),
) -> CategoryResponse:
    category = await taxonomy.update_category(current_user.id, category_id, body.name)
    return CategoryResponse.model_validate(category)


@router.delete(
    "/{category_id}",
    status_code=204,
    response_class=Response,
    responses=_OWNED_ERRORS,
    summary="Delete a category (its snippets become uncategorized)",
)
async def delete_category(
    category_id: int,
    current_user: User = Depends(get_current_user),
    taxonomy: TaxonomyRepository = Depends(get_taxonomy_repository),
) -> Response:
    await taxonomy.delete_category(current_user.id, category_id)
    return Response(status_code=204)
