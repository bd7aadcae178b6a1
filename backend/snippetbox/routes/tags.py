"""
SnippetBox Backend — Tag Routes
=================================

What:  List, create and delete the caller's tags.
How:   Same ownership rules as categories. Deleting a tag unlinks it from
       every snippet; the snippets themselves are kept.
"""

from typing import List

from fastapi import APIRouter, Depends, Response

from snippetbox.dependencies import get_current_user, get_taxonomy_repository
from snippetbox.models.user import User
from snippetbox.repositories import TaxonomyRepository
from snippetbox.schemas.common import ErrorResponse
from snippetbox.schemas.taxonomy import NameRequest, TagResponse

router = APIRouter(prefix="/tags", tags=["Tags"])


@router.get("", response_model=List[TagResponse], summary="List my tags")
async def list_tags(
    current_user: User = Depends(get_current_user),
    taxonomy: TaxonomyRepository = Depends(get_taxonomy_repository),
) -> List[TagResponse]:
    tags = await taxonomy.list_tags(current_user.id)
    return [TagResponse.model_validate(tag) for tag in tags]


@router.post(
    "",
    status_code=201,
    response_model=TagResponse,
    responses={409: {"description": "Tag already exists", "model": ErrorResponse}},
    summary="Create a tag",
)
async def create_tag(
    body: NameRequest,
    current_user: User = Depends(get_current_user),
    taxonomy: TaxonomyRepository = Depends(get_taxonomy_repository),
) -> TagResponse:
    tag = await taxonomy.create_tag(current_user.id, body.name)
    return TagResponse.model_validate(tag)


@router.delete(
    "/{tag_id}",
    status_code=204,
    response_class=Response,
    responses={
        403: {"description": "Tag belongs to another user", "model": ErrorResponse},
        404: {"description": "Tag not found", "model": ErrorResponse},
    },
    summary="Delete a tag",
)
async def delete_tag(
    tag_id: int,
    current_user: User = Depends(get_current_user),
    taxonomy: TaxonomyRepository = Depends(get_taxonomy_repository),
) -> Response:
    await taxonomy.delete_tag(current_user.id, tag_id)
    return Response(status_code=204)
