"""
SnippetBox Backend — Taxonomy Repository (Languages, Categories, Tags)
========================================================================

What:  CRUD for the three labelling resources.
How:   Languages are global; categories and tags are scoped to their owner.
       Mutations re-read the row first, so "absent" (404) and "someone
       else's" (403) are reported separately.

Reference Rules:
    - A language used by any snippet or snippet file cannot be deleted (409)
    - Deleting a category leaves its snippets uncategorized
    - Deleting a tag removes its snippet links, never the snippets
"""

import logging
from typing import Any, List, Optional, Type, TypeVar, Union

from sqlalchemy import delete, func, select, update

from snippetbox.database import fits_integer_column
from snippetbox.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from snippetbox.models.category import Category
from snippetbox.models.language import Language
from snippetbox.models.snippet import Snippet, SnippetFile, SnippetTag
from snippetbox.models.tag import Tag
from snippetbox.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

OwnedModel = TypeVar("OwnedModel", Category, Tag)


def _require_name(value: Any, label: str) -> str:
    """Return the stripped name or raise a 400 naming the resource."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(message=f"{label} name is required", field="name")
    return value.strip()


class TaxonomyRepository(BaseRepository):
    """Languages, categories and tags."""

    # ══════════════════════════════════════════════════════════════════════
    # Languages (global, no owner)
    # ══════════════════════════════════════════════════════════════════════

    async def list_languages(self) -> List[Language]:
        result = await self._session.execute(select(Language).order_by(Language.name.asc()))
        return list(result.scalars().all())

    async def create_language(self, name: Any) -> Language:
        name = _require_name(name, "Language")
        async with self._transaction("create language", conflict_message="Language already exists"):
            existing = await self._session.execute(select(Language.id).where(Language.name == name))
            if existing.first() is not None:
                raise ConflictError(message="Language already exists")
            language = Language(name=name)
            self._session.add(language)
            await self._session.flush()
        logger.info("Created language %d", language.id)
        return language

    async def delete_language(self, language_id: int) -> None:
        """
        Delete an unreferenced language.

        Raises:
            ConflictError: a snippet or snippet file still uses it
            NotFoundError: no language with that id
        """
        if not fits_integer_column(language_id):
            raise NotFoundError(resource="language", resource_id=language_id)
        async with self._transaction("delete language"):
            if await self._language_in_use(language_id):
                raise ConflictError(
                    message="Cannot delete language that has snippets associated with it",
                    context={"language_id": language_id},
                )
            result = await self._session.execute(delete(Language).where(Language.id == language_id))
            if result.rowcount == 0:
                raise NotFoundError(resource="language", resource_id=language_id)
        logger.info("Deleted language %d", language_id)

    async def _language_in_use(self, language_id: int) -> bool:
        snippet_count = await self._session.scalar(
            select(func.count(Snippet.id)).where(Snippet.language_id == language_id)
        )
        if snippet_count:
            return True
        file_count = await self._session.scalar(
            select(func.count(SnippetFile.id)).where(SnippetFile.language_id == language_id)
        )
        return bool(file_count)

    # ══════════════════════════════════════════════════════════════════════
    # Categories (per user)
    # ══════════════════════════════════════════════════════════════════════

    async def list_categories(self, owner_id: int) -> List[Category]:
        result = await self._session.execute(
            select(Category).where(Category.user_id == owner_id).order_by(Category.name.asc())
        )
        return list(result.scalars().all())

    async def create_category(self, owner_id: int, name: Any) -> Category:
        name = _require_name(name, "Category")
        async with self._transaction("create category", conflict_message="Category already exists"):
            await self._ensure_name_free(Category, owner_id, name, "Category already exists")
            category = Category(name=name, user_id=owner_id)
            self._session.add(category)
            await self._session.flush()
        logger.info("Created category %d for user %d", category.id, owner_id)
        return category

    async def update_category(self, owner_id: int, category_id: int, name: Any) -> Category:
        """
        Rename a category.

        Raises:
            ValidationError: name missing
            NotFoundError: no category with that id
            ForbiddenError: the category belongs to another user
            ConflictError: the user already has a category with that name
        """
        name = _require_name(name, "Category")
        async with self._transaction("update category", conflict_message="Category already exists"):
            category = await self._get_owned(Category, owner_id, category_id, "category")
            await self._ensure_name_free(
                Category, owner_id, name, "Category already exists", exclude_id=category_id
            )
            category.name = name
            await self._session.flush()
        logger.info("Renamed category %d for user %d", category_id, owner_id)
        return category

    async def delete_category(self, owner_id: int, category_id: int) -> None:
        async with self._transaction("delete category"):
            category = await self._get_owned(Category, owner_id, category_id, "category")
            await self._session.execute(
                update(Snippet).where(Snippet.category_id == category_id).values(category_id=None)
            )
            await self._session.delete(category)
        logger.info("Deleted category %d for user %d", category_id, owner_id)

    # ══════════════════════════════════════════════════════════════════════
    # Tags (per user)
    # ══════════════════════════════════════════════════════════════════════

    async def list_tags(self, owner_id: int) -> List[Tag]:
        result = await self._session.execute(
            select(Tag).where(Tag.user_id == owner_id).order_by(Tag.name.asc())
        )
        return list(result.scalars().all())

    async def create_tag(self, owner_id: int, name: Any) -> Tag:
        name = _require_name(name, "Tag")
        async with self._transaction("create tag", conflict_message="Tag already exists"):
            await self._ensure_name_free(Tag, owner_id, name, "Tag already exists")
            tag = Tag(name=name, user_id=owner_id)
            self._session.add(tag)
            await self._session.flush()
        logger.info("Created tag %d for user %d", tag.id, owner_id)
        return tag

    async def delete_tag(self, owner_id: int, tag_id: int) -> None:
        async with self._transaction("delete tag"):
            tag = await self._get_owned(Tag, owner_id, tag_id, "tag")
            await self._session.execute(delete(SnippetTag).where(SnippetTag.tag_id == tag_id))
            await self._session.delete(tag)
        logger.info("Deleted tag %d for user %d", tag_id, owner_id)

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _get_owned(
        self,
        model: Type[OwnedModel],
        owner_id: int,
        item_id: int,
        resource: str,
    ) -> OwnedModel:
        if not fits_integer_column(item_id):
            raise NotFoundError(resource=resource, resource_id=item_id)
        item = await self._session.get(model, item_id)
        if item is None:
            raise NotFoundError(resource=resource, resource_id=item_id)
        if item.user_id != owner_id:
            raise ForbiddenError(
                message=f"You do not have permission to modify this {resource}",
                context={"resource": resource, "resource_id": item_id},
            )
        return item

    async def _ensure_name_free(
        self,
        model: Union[Type[Category], Type[Tag]],
        owner_id: int,
        name: str,
        message: str,
        exclude_id: Optional[int] = None,
    ) -> None:
        query = select(model.id).where(model.user_id == owner_id, model.name == name)
        if exclude_id is not None:
            query = query.where(model.id != exclude_id)
        if (await self._session.execute(query)).first() is not None:
            raise ConflictError(message=message)
