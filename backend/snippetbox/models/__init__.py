"""
SnippetBox Backend — ORM Models
=================================

What:  Importing this package registers all seven tables on `Base.metadata`.
Who:   `Database.create_schema()`, Alembic's env.py, and the repositories.

Tables:
    users, languages, categories, tags, snippets, snippet_files, snippet_tags
"""

from snippetbox.models.user import User
from snippetbox.models.language import Language
from snippetbox.models.category import Category
from snippetbox.models.tag import Tag
from snippetbox.models.snippet import Snippet, SnippetFile, SnippetTag

__all__ = [
    "User",
    "Language",
    "Category",
    "Tag",
    "Snippet",
    "SnippetFile",
    "SnippetTag",
]
