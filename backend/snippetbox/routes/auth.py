"""
SnippetBox Backend — Authentication Routes
============================================

What:  POST /auth/register, POST /auth/login, GET /auth/me.
How:   Register and login return `{message, token, user}`; the token is then
       sent as `Authorization: Bearer <token>` on every owner-scoped route.
Who:   The frontend login/register screens and its session bootstrap (/me).
"""

import logging

from fastapi import APIRouter, Depends

from snippetbox.dependencies import get_current_user, get_user_repository
from snippetbox.models.user import User
from snippetbox.repositories import UserRepository
from snippetbox.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from snippetbox.schemas.common import ErrorResponse
from snippetbox.services.auth_service import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    status_code=201,
    response_model=AuthResponse,
    responses={
        400: {"description": "Missing username, email or password", "model": ErrorResponse},
        409: {"description": "Username or email already registered", "model": ErrorResponse},
    },
    summary="Create an account",
)
async def register(
    body: RegisterRequest,
    users: UserRepository = Depends(get_user_repository),
) -> AuthResponse:
    user = await users.register(body.username, body.email, body.password)
    return auth_service.build_auth_response(user, "User registered successfully")


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={
        400: {"description": "Missing email or password", "model": ErrorResponse},
        401: {"description": "Invalid email or password", "model": ErrorResponse},
    },
    summary="Exchange credentials for a bearer token",
)
async def login(
    body: LoginRequest,
    users: UserRepository = Depends(get_user_repository),
) -> AuthResponse:
    user = await users.authenticate(body.email, body.password)
    logger.info("User %d logged in", user.id)
    return auth_service.build_auth_response(user, "Login successful")


@router.get(
    "/me",
    response_model=UserResponse,
    responses={401: {"description": "Missing, invalid or expired token", "model": ErrorResponse}},
    summary="Current user profile",
)
async def me(current_user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse.model_validate(current_user)
