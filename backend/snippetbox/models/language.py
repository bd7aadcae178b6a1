"""
SnippetBox Backend — Language SQLAlchemy Model
================================================

What:  ORM model for the global `languages` table.
How:   Not user-scoped; unique by name. Referenced by snippets and by
       individual snippet files (per-file language override).
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from snippetbox.database import Base
from snippetbox.models.user import utcnow


class Language(Base):
    """A classification label shared by every user (e.g. "Python", "SQL")."""

    __tablename__ = "languages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    def __repr__(self) -> str:
        return f"<Language(id={self.id}, name='{self.name}')>"
