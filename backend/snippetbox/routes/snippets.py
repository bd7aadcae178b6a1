"""
SnippetBox Backend — Snippet Routes
=====================================

What:  CRUD, filtered listing and duplication of the caller's snippets.
How:   Thin handlers: the filter is built from the query string, everything
       else is delegated to SnippetRepository.
Who:   The frontend snippet list, editor and detail views.

Endpoints:
    GET    /snippets?language_id=&category_id=&tag_id=&search=
    GET    /snippets/{id}
    POST   /snippets                    201
    PUT    /snippets/{id}
    POST   /snippets/{id}/duplicate     201
    DELETE /snippets/{id}               204

Filter query values are read as strings on purpose: `?language_id=abc`
is ignored rather than rejected, the same as leaving it out.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response

from snippetbox.dependencies import get_current_user, get_snippet_repository
from snippetbox.models.user import User
from snippetbox.repositories import SnippetRepository
from snippetbox.schemas.common import ErrorResponse
from snippetbox.schemas.snippet import SnippetResponse, SnippetWriteRequest
from snippetbox.services.snippet_filter import SnippetFilter

router = APIRouter(prefix="/snippets", tags=["Snippets"])

_NOT_FOUND = {404: {"description": "Snippet not found", "model": ErrorResponse}}
_INVALID = {400: {"description": "Title or files missing", "model": ErrorResponse}}


@router.get(
    "",
    response_model=List[SnippetResponse],
    summary="List my snippets, most recently updated first",
)
async def list_snippets(
    language_id: Optional[str] = Query(default=None, description="Exact language id"),
    category_id: Optional[str] = Query(default=None, description="Exact category id"),
    tag_id: Optional[str] = Query(default=None, description="Only snippets carrying this tag"),
    search: Optional[str] = Query(
        default=None,
        description="Case-insensitive text matched against title, description and code",
    ),
    current_user: User = Depends(get_current_user),
    snippets: SnippetRepository = Depends(get_snippet_repository),
) -> List[SnippetResponse]:
    snippet_filter = SnippetFilter.from_query(
        language_id=language_id,
        category_id=category_id,
        tag_id=tag_id,
        search=search,
    )
    return await snippets.list(current_user.id, snippet_filter)


@router.get(
    "/{snippet_id}",
    response_model=SnippetResponse,
    responses=_NOT_FOUND,
    summary="Get one snippet with its files and tags",
)
async def get_snippet(
    snippet_id: int,
    current_user: User = Depends(get_current_user),
    snippets: SnippetRepository = Depends(get_snippet_repository),
) -> SnippetResponse:
    return await snippets.get(current_user.id, snippet_id)


@router.post(
    "",
    status_code=201,
    response_model=SnippetResponse,
    responses=_INVALID,
    summary="Create a snippet",
)
async def create_snippet(
    body: SnippetWriteRequest,
    current_user: User = Depends(get_current_user),
    snippets: SnippetRepository = Depends(get_snippet_repository),
) -> SnippetResponse:
    return await snippets.create(current_user.id, body)


@router.put(
    "/{snippet_id}",
    response_model=SnippetResponse,
    responses={**_INVALID, **_NOT_FOUND},
    summary="Replace a snippet, its files and its tags",
)
async def update_snippet(
    snippet_id: int,
    body: SnippetWriteRequest,
    current_user: User = Depends(get_current_user),
    snippets: SnippetRepository = Depends(get_snippet_repository),
) -> SnippetResponse:
    return await snippets.update(current_user.id, snippet_id, body)


@router.post(
    "/{snippet_id}/duplicate",
    status_code=201,
    response_model=SnippetResponse,
    responses=_NOT_FOUND,
    summary="Copy a snippet with its files and tags",
)
async def duplicate_snippet(
    snippet_id: int,
    current_user: User = Depends(get_current_user),
    snippets: SnippetRepository = Depends(get_snippet_repository),
) -> SnippetResponse:
    return await snippets.duplicate(current_user.id, snippet_id)


@router.delete(
    "/{snippet_id}",
    status_code=204,
    response_class=Response,
    responses=_NOT_FOUND,
    summary="Delete a snippet",
)
async def delete_snippet(
    snippet_id: int,
    current_user: User = Depends(get_current_user),
    snippets: SnippetRepository = Depends(get_snippet_repository),
) -> Response:
    await snippets.delete(current_user.id, snippet_id)
    return Response(status_code=204)
