"""
SnippetBox Backend — Authentication Service
=============================================

What:  Password hashing and bearer-token issuance/verification.
How:   passlib `CryptContext` (bcrypt, fixed cost factor) for passwords;
       python-jose HS256 JWTs for tokens.
Who:   UserRepository (hash on register, verify on login), the
       `get_current_user` dependency (decode), and the auth routes (issue).

Token Contract:
    Claims: sub (user id as string), id, username, email, iat, exp
    Validity: ACCESS_TOKEN_TTL_DAYS (default 7) from issue time
    Opaque to clients; only this service reads the claims.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from snippetbox.config import Settings, settings
from snippetbox.exceptions import UnauthorizedError
from snippetbox.models.user import User
from snippetbox.schemas.auth import AuthResponse, UserSummary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenClaims:
    """The identity carried inside a verified token."""
    user_id: int
    username: str
    email: str
    expires_at: datetime


class AuthService:
    """
    Stateless credential helper.

    Responsibilities:
        - hash_password() / verify_password(): salted one-way hashing
        - create_access_token(): sign a 7-day token for a user
        - decode_access_token(): verify signature and expiry, return claims
        - build_auth_response(): the {message, token, user} body
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        token_ttl: timedelta = timedelta(days=7),
        bcrypt_rounds: int = 10,
    ):
        self._secret = secret
        self._algorithm = algorithm
        self.token_ttl = token_ttl
        self._pwd_context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__default_rounds=bcrypt_rounds,
        )

    @classmethod
    def from_settings(cls, config: Settings) -> "AuthService":
        return cls(
            secret=config.jwt_secret,
            algorithm=config.jwt_algorithm,
            token_ttl=timedelta(days=config.access_token_ttl_days),
            bcrypt_rounds=config.bcrypt_rounds,
        )

    # ── Passwords ─────────────────────────────────────────────────────────

    def hash_password(self, password: str) -> str:
        return self._pwd_context.hash(password)

    def verify_password(self, password: str, password_hash: str) -> bool:
        """
        Constant-time comparison of `password` against a stored bcrypt hash.

        A stored value that is not a recognizable hash counts as a mismatch.
        """
        try:
            return self._pwd_context.verify(password, password_hash)
        except (ValueError, TypeError):
            logger.warning("Stored password hash could not be parsed")
            return False

    # ── Tokens ────────────────────────────────────────────────────────────

    def create_access_token(self, user: User, now: Optional[datetime] = None) -> str:
        """
        Sign a bearer token for `user`.

        Args:
            user: The authenticated user
            now: Issue time; defaults to the current UTC time
        """
        issued_at = now or datetime.now(timezone.utc)
        claims = {
            "sub": str(user.id),
            "id": user.id,
            "username": user.username,
            "email": user.email,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self.token_ttl).timestamp()),
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def decode_access_token(self, token: str) -> TokenClaims:
        """
        Verify a token and return its claims.

        Raises:
            UnauthorizedError: bad signature, expired, malformed, or no usable `id` claim
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require_exp": True},
            )
        except ExpiredSignatureError:
            raise UnauthorizedError(message="Token has expired")
        except JWTError:
            raise UnauthorizedError(message="Invalid token")

        user_id = payload.get("id")
        if isinstance(user_id, bool) or not isinstance(user_id, int):
            raise UnauthorizedError(message="Invalid token")

        return TokenClaims(
            user_id=user_id,
            username=str(payload.get("username", "")),
            email=str(payload.get("email", "")),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )

    def build_auth_response(self, user: User, message: str) -> AuthResponse:
        return AuthResponse(
            message=message,
            token=self.create_access_token(user),
            user=UserSummary.model_validate(user),
        )


# ── Singleton Instance ────────────────────────────────────────────────────
auth_service = AuthService.from_settings(settings)
