"""
SnippetBox Backend — Language, Category and Tag Schemas
=========================================================

What:  Bodies for the three labelling resources.
How:   Responses read straight from the ORM rows (`from_attributes`).
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field


class NameRequest(BaseModel):
    """
    Body for POST /languages, POST/PUT /categories and POST /tags.

    `name` is typed loosely so that a non-string value reaches the
    repository and is rejected there with a 400.
    """
    name: Optional[Any] = Field(default=None, description="Display name")


class LanguageResponse(BaseModel):
    id: int
    name: str
    created_at: datetime

    model_config = {"from_attributes": True}


class CategoryResponse(BaseModel):
    id: int
    name: str
    user_id: int
    created_at: datetime

    model_config = {"from_attributes": True}


class TagResponse(BaseModel):
    id: int
    name: str
    user_id: int
    created_at: datetime

    model_config = {"from_attributes": True}
