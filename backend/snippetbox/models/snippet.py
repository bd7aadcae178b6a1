"""
SnippetBox Backend — Snippet, SnippetFile and SnippetTag Models
=================================================================

What:  ORM models for `snippets`, `snippet_files` and the `snippet_tags` join table.
Who:   SnippetRepository (all writes), SnippetFilter (list queries),
       TaxonomyRepository (reference checks before deleting a language).

Table Design:
    snippets
        - code: legacy single-body column, always a copy of the first file's
          content as supplied on the last create/update
        - language_id: plain FK; a referenced language cannot be deleted
        - category_id: ON DELETE SET NULL (deleting a category un-files snippets)
        - user_id: owner; every query is scoped by it
    snippet_files
        - snippet_id: ON DELETE CASCADE
        - language_id: optional per-file override of the snippet language
    snippet_tags
        - composite primary key (snippet_id, tag_id); both sides cascade

    Index (user_id, updated_at):
        Matches the list query, which is always owner-scoped and ordered
        newest-updated first with id as the tiebreaker.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from snippetbox.database import Base
from snippetbox.models.user import utcnow


class Snippet(Base):
    """
    A titled unit of saved code, composed of one or more files.

    Lifecycle:
        1. Created together with its files and tag links in one transaction
        2. Each update deletes and re-inserts every file and tag link
        3. Deleted explicitly; files and tag links go with it
    """

    __tablename__ = "snippets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    # Mirror of files[0].content, kept for clients that predate multi-file snippets
    code: Mapped[str] = mapped_column(Text, nullable=False, default="")

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    language_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("languages.id"),
        nullable=True,
    )

    category_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
    )

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    __table_args__ = (
        Index("idx_snippets_user_updated", "user_id", "updated_at"),
    )

    def __repr__(self) -> str:
        return f"<Snippet(id={self.id}, title='{self.title}', user_id={self.user_id})>"


class SnippetFile(Base):
    """A named content blob belonging to exactly one snippet."""

    __tablename__ = "snippet_files"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    snippet_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("snippets.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    filename: Mapped[str] = mapped_column(String(255), nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    language_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("languages.id"),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    def __repr__(self) -> str:
        return f"<SnippetFile(id={self.id}, snippet_id={self.snippet_id}, filename='{self.filename}')>"


class SnippetTag(Base):
    """Join row linking one snippet to one tag. No identity of its own."""

    __tablename__ = "snippet_tags"

    snippet_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("snippets.id", ondelete="CASCADE"),
        primary_key=True,
    )

    tag_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<SnippetTag(snippet_id={self.snippet_id}, tag_id={self.tag_id})>"
