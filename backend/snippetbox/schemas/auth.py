"""
SnippetBox Backend — Authentication Schemas
=============================================

What:  Request and response bodies for /auth/register, /auth/login and /auth/me.

Request fields are optional at the schema level on purpose: a missing field
is reported by UserRepository as a 400 `validation_error` with a readable
message instead of FastAPI's generic field-location list.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    username: Optional[str] = Field(default=None, description="Unique public handle")
    email: Optional[str] = Field(default=None, description="Unique login email")
    password: Optional[str] = Field(default=None, description="Plain-text password (hashed before storage)")


class LoginRequest(BaseModel):
    email: Optional[str] = Field(default=None)
    password: Optional[str] = Field(default=None)


class UserSummary(BaseModel):
    """The identity embedded in tokens and returned next to them."""
    id: int
    username: str
    email: str

    model_config = {"from_attributes": True}


class UserResponse(UserSummary):
    """Returned by GET /auth/me."""
    created_at: datetime


class AuthResponse(BaseModel):
    """
    What:  Returned by register (201) and login (200).
    How:   `token` is an opaque bearer credential valid for seven days.
    """
    message: str = Field(description="Human-readable success message")
    token: str = Field(description="Signed bearer token")
    user: UserSummary
