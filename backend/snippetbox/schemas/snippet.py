"""
SnippetBox Backend — Snippet Request/Response Schemas
=======================================================

What:  The API contract for snippets, their files, and their tag links.
Who:   Snippet routes (request bodies, response models) and SnippetRepository
       (which builds the responses).

Design Decision:
    The write body leaves `title` and `files` optional so SnippetRepository can
    apply the business rules itself ("title and at least one file are
    required", "each file must have a filename and content") and answer with
    a 400 carrying that exact wording.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class SnippetFileInput(BaseModel):
    """One file in a create/update body."""
    filename: Optional[str] = Field(default=None, description="File name shown in the editor tab")
    content: Optional[str] = Field(default=None, description="File body")
    language_id: Optional[int] = Field(default=None, description="Per-file language override")


class SnippetWriteRequest(BaseModel):
    """
    Body of POST /snippets and PUT /snippets/{id}.

    An update is a full replacement: the files and tags given here become the
    snippet's complete file set and tag set.
    """
    title: Optional[str] = Field(default=None, description="Required snippet title")
    description: Optional[str] = Field(default=None)
    language_id: Optional[int] = Field(default=None)
    category_id: Optional[int] = Field(default=None)
    files: Optional[List[SnippetFileInput]] = Field(
        default=None,
        description="One or more files; the first file's content is mirrored into `code`",
    )
    tags: Optional[List[Any]] = Field(
        default=None,
        description="Tag ids to link; ids that are not integers or not owned by the caller are ignored",
    )


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class SnippetTagResponse(BaseModel):
    id: int
    name: str


class SnippetFileResponse(BaseModel):
    id: int
    filename: str
    content: str
    language_id: Optional[int] = None
    language_name: Optional[str] = None


class SnippetResponse(BaseModel):
    """
    What:  A snippet with denormalized language/category names, its tags, and its files.
    Who:   Returned by every snippet endpoint except DELETE.
    """
    id: int
    title: str
    description: Optional[str] = None
    code: str = Field(description="Legacy mirror of the first file's content")
    language_id: Optional[int] = None
    category_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime
    language_name: Optional[str] = None
    category_name: Optional[str] = None
    tags: List[SnippetTagResponse] = Field(default_factory=list)
    files: List[SnippetFileResponse] = Field(default_factory=list)
