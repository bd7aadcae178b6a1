"""
SnippetBox Backend — Language Routes
======================================

What:  GET/POST /languages and DELETE /languages/{id}.
How:   Public: none of these routes depend on `get_current_user`, so the
       language picker works before login and with an expired token.
       Languages are global, shared by every user.
"""

from typing import List

from fastapi import APIRouter, Depends, Response

from snippetbox.dependencies import get_taxonomy_repository
from snippetbox.repositories import TaxonomyRepository
from snippetbox.schemas.common import ErrorResponse
from snippetbox.schemas.taxonomy import LanguageResponse, NameRequest

router = APIRouter(prefix="/languages", tags=["Languages"])


@router.get("", response_model=List[LanguageResponse], summary="List languages by name")
async def list_languages(
    taxonomy: TaxonomyRepository = Depends(get_taxonomy_repository),
) -> List[LanguageResponse]:
    languages = await taxonomy.list_languages()
    return [LanguageResponse.model_validate(language) for language in languages]


@router.post(
    "",
    status_code=201,
    response_model=LanguageResponse,
    responses={
        400: {"description": "Name missing", "model": ErrorResponse},
        409: {"description": "Language already exists", "model": ErrorResponse},
    },
    summary="Add a language",
)
async def create_language(
    body: NameRequest,
    taxonomy: TaxonomyRepository = Depends(get_taxonomy_repository),
) -> LanguageResponse:
    language = await taxonomy.create_language(body.name)
    return LanguageResponse.model_validate(language)


@router.delete(
    "/{language_id}",
    status_code=204,
    response_class=Response,
    responses={
        404: {"description": "Language not found", "model": ErrorResponse},
        409: {"description": "Language is still used by snippets", "model": ErrorResponse},
    },
    summary="Delete an unused language",
)
async def delete_language(
    language_id: int,
    taxonomy: TaxonomyRepository = Depends(get_taxonomy_repository),
) -> Response:
    await taxonomy.delete_language(language_id)
    return Response(status_code=204)
