"""
SnippetBox Backend — User Repository
======================================

What:  Registration, login, and identity lookup.
Who:   Auth routes (register/login/me) and the `get_current_user` dependency.

Rules:
    register: username, email and password are all required (400);
              username and email must both be unused (409)
    login:    email and password are required (400); an unknown email and
              a wrong password produce the same 401 message
"""

import logging
from typing import Optional

from sqlalchemy import or_, select

from snippetbox.exceptions import ConflictError, UnauthorizedError, ValidationError
from snippetbox.models.user import User
from snippetbox.repositories.base import BaseRepository
from snippetbox.services.auth_service import AuthService, auth_service

logger = logging.getLogger(__name__)

DUPLICATE_USER_MESSAGE = "User with this email or username already exists"
INVALID_LOGIN_MESSAGE = "Invalid email or password"


def _clean(value: Optional[str]) -> str:
    return value.strip() if isinstance(value, str) else ""


class UserRepository(BaseRepository):

    def __init__(self, session, auth: AuthService = auth_service):
        super().__init__(session)
        self._auth = auth

    async def get_by_id(self, user_id: int) -> Optional[User]:
        result = await self._session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self._session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def register(
        self,
        username: Optional[str],
        email: Optional[str],
        password: Optional[str],
    ) -> User:
        """
        Create an account with a salted password hash.

        Raises:
            ValidationError: a field is missing or blank
            ConflictError: the username or email is already registered
        """
        username = _clean(username)
        email = _clean(email)
        if not username or not email or not password:
            raise ValidationError(message="Username, email and password are required")

        async with self._transaction("register user", conflict_message=DUPLICATE_USER_MESSAGE):
            existing = await self._session.execute(
                select(User.id).where(or_(User.email == email, User.username == username))
            )
            if existing.first() is not None:
                raise ConflictError(message=DUPLICATE_USER_MESSAGE)

            user = User(
                username=username,
                email=email,
                password_hash=self._auth.hash_password(password),
            )
            self._session.add(user)
            await self._session.flush()

        logger.info("Registered user %d", user.id)
        return user

    async def authenticate(self, email: Optional[str], password: Optional[str]) -> User:
        """
        Verify login credentials.

        Raises:
            ValidationError: email or password missing
            UnauthorizedError: unknown email or wrong password
        """
        email = _clean(email)
        if not email or not password:
            raise ValidationError(message="Email and password are required")

        user = await self.get_by_email(email)
        if user is None or not self._auth.verify_password(password, user.password_hash):
            raise UnauthorizedError(message=INVALID_LOGIN_MESSAGE)

        return user
