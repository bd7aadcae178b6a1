"""
SnippetBox Backend — Repositories
===================================

What:  All reads and writes against the store, scoped to the acting user.
How:   Each repository is constructed with the request's AsyncSession
       (see `snippetbox.dependencies`), so the store handle is injected
       rather than imported.

Repository Inventory:
    - SnippetRepository:  snippets with their files and tag links
    - TaxonomyRepository: languages (global), categories and tags (per user)
    - UserRepository:     registration, login, identity lookup
"""

from snippetbox.repositories.snippet_repository import SnippetRepository
from snippetbox.repositories.taxonomy_repository import TaxonomyRepository
from snippetbox.repositories.user_repository import UserRepository

__all__ = ["SnippetRepository", "TaxonomyRepository", "UserRepository"]
