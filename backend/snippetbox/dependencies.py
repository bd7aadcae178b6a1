"""
SnippetBox Backend — Route Dependencies
=========================================

What:  FastAPI dependencies shared by the routers: the authenticated user
       and one repository per request.
How:   `get_current_user` is the access-control gate. Every owner-scoped
       route depends on it; the language routes deliberately do not.

Auth Flow:
    Authorization: Bearer <jwt>
        → AuthService.decode_access_token()   (401 on bad/expired token)
        → UserRepository.get_by_id()          (401 if the account is gone)
        → request.state.user_id               (read by the access log)
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from snippetbox.database import get_db_session
from snippetbox.exceptions import UnauthorizedError
from snippetbox.models.user import User
from snippetbox.repositories import SnippetRepository, TaxonomyRepository, UserRepository
from snippetbox.services.auth_service import auth_service

# auto_error=False: a missing header becomes our 401 envelope instead of FastAPI's 403
bearer_scheme = HTTPBearer(auto_error=False)


def get_user_repository(db: AsyncSession = Depends(get_db_session)) -> UserRepository:
    return UserRepository(db)


def get_snippet_repository(db: AsyncSession = Depends(get_db_session)) -> SnippetRepository:
    return SnippetRepository(db)


def get_taxonomy_repository(db: AsyncSession = Depends(get_db_session)) -> TaxonomyRepository:
    return TaxonomyRepository(db)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    users: UserRepository = Depends(get_user_repository),
) -> User:
    """
    Resolve the caller from the bearer token.

    Raises:
        UnauthorizedError: header missing or not a Bearer credential, token
            invalid or expired, or the user no longer exists
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError(message="Unauthorized")

    claims = auth_service.decode_access_token(credentials.credentials)
    user = await users.get_by_id(claims.user_id)
    if user is None:
        raise UnauthorizedError(message="User not found")

    request.state.user_id = user.id
    return user
