"""
SnippetBox Backend — Snippet Repository
=========================================

What:  Every read and write of snippets together with their files and tag links.
How:   Multi-step writes run inside `_transaction()`, so a snippet row is
       never committed without its files. Reads return `SnippetResponse`
       objects with language/category names, tags and files attached.
Who:   Snippet routes, through the `get_snippet_repository` dependency.

Write Flow (create / update / duplicate):
    ┌────────────┐   ┌────────────────┐   ┌──────────────┐   ┌──────────────┐
    │  Validate  │──▶│ Check owner +  │──▶│ Write snippet │──▶│ Files + tag  │──▶ commit
    │  payload   │   │ references     │   │ row           │   │ links        │
    └────────────┘   └────────────────┘   └──────────────┘   └──────────────┘
    Any failure after the first write rolls back the whole transaction.

Consistency Rules:
    - A snippet has at least one file; `code` copies the first file's content
    - Update replaces the whole file set and tag-link set (delete, then insert)
    - Tag ids the caller does not own, or that are not storable integers,
      are skipped without error
    - Snippets of other users are reported as not found
"""

import logging
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional, Sequence

from sqlalchemy import Row, Select, delete, select

from snippetbox.database import fits_integer_column
from snippetbox.exceptions import NotFoundError, ValidationError
from snippetbox.models.category import Category
from snippetbox.models.language import Language
from snippetbox.models.snippet import Snippet, SnippetFile, SnippetTag
from snippetbox.models.tag import Tag
from snippetbox.models.user import utcnow
from snippetbox.repositories.base import BaseRepository
from snippetbox.schemas.snippet import (
    SnippetFileInput,
    SnippetFileResponse,
    SnippetResponse,
    SnippetTagResponse,
    SnippetWriteRequest,
)
from snippetbox.services.snippet_filter import SnippetFilter, parse_optional_int

logger = logging.getLogger(__name__)

COPY_SUFFIX = " (Copy)"


class SnippetRepository(BaseRepository):
    """
    Snippet persistence for one request.

    Responsibilities:
        - create() / update(): validated, atomic full writes
        - get() / list(): enriched reads, list narrowed by a SnippetFilter
        - duplicate(): atomic copy including files and tag links
        - delete(): removes the snippet, its files and its tag links
    """

    # ══════════════════════════════════════════════════════════════════════
    # Reads
    # ══════════════════════════════════════════════════════════════════════

    async def get(self, owner_id: int, snippet_id: int) -> SnippetResponse:
        """
        Fetch one snippet with tags and files.

        Raises:
            NotFoundError: absent, or owned by another user
        """
        if not fits_integer_column(snippet_id):
            raise NotFoundError(resource="snippet", resource_id=snippet_id)
        query = self._detail_select().where(
            Snippet.id == snippet_id,
            Snippet.user_id == owner_id,
        )
        row = (await self._session.execute(query)).one_or_none()
        if row is None:
            raise NotFoundError(resource="snippet", resource_id=snippet_id)
        return (await self._enrich([row]))[0]

    async def list(
        self,
        owner_id: int,
        snippet_filter: Optional[SnippetFilter] = None,
    ) -> List[SnippetResponse]:
        """
        List the owner's snippets, most recently updated first.

        Ordering: updated_at DESC, then id DESC so equal timestamps keep a
        stable order.
        """
        snippet_filter = snippet_filter or SnippetFilter()
        query = snippet_filter.apply(self._detail_select(), owner_id).order_by(
            Snippet.updated_at.desc(),
            Snippet.id.desc(),
        )
        rows = (await self._session.execute(query)).all()
        logger.debug(
            "Listed %d snippets for user %d (filter=%s)", len(rows), owner_id, snippet_filter
        )
        return await self._enrich(rows)

    # ══════════════════════════════════════════════════════════════════════
    # Writes
    # ══════════════════════════════════════════════════════════════════════

    async def create(self, owner_id: int, payload: SnippetWriteRequest) -> SnippetResponse:
        """
        Create a snippet with its files and tag links in one transaction.

        Raises:
            ValidationError: title missing, no files, a file without
                filename/content, or an unknown category/language reference
            DatabaseError: the store failed; nothing was written
        """
        title, files = self._validate(payload)

        async with self._transaction("create snippet"):
            await self._check_references(owner_id, payload)
            now = utcnow()
            snippet = Snippet(
                title=title,
                code=files[0].content,
                description=payload.description or None,
                language_id=payload.language_id or None,
                category_id=payload.category_id or None,
                user_id=owner_id,
                created_at=now,
                updated_at=now,
            )
            self._session.add(snippet)
            await self._session.flush()

            await self._insert_files(snippet.id, files)
            await self._link_tags(owner_id, snippet.id, payload.tags)

        logger.info("Created snippet %d for user %d (%d files)", snippet.id, owner_id, len(files))
        return await self.get(owner_id, snippet.id)

    async def update(
        self,
        owner_id: int,
        snippet_id: int,
        payload: SnippetWriteRequest,
    ) -> SnippetResponse:
        """
        Replace a snippet's fields, file set and tag set.

        The payload is validated before anything is read or written, so a
        rejected update leaves the stored snippet untouched.

        Raises:
            ValidationError: as for create()
            NotFoundError: absent, or owned by another user
        """
        title, files = self._validate(payload)

        async with self._transaction("update snippet"):
            snippet = await self._get_owned(owner_id, snippet_id)
            await self._check_references(owner_id, payload)

            snippet.title = title
            snippet.code = files[0].content
            snippet.description = payload.description or None
            snippet.language_id = payload.language_id or None
            snippet.category_id = payload.category_id or None
            snippet.updated_at = utcnow()

            await self._session.execute(
                delete(SnippetFile).where(SnippetFile.snippet_id == snippet_id)
            )
            await self._insert_files(snippet_id, files)

            await self._session.execute(
                delete(SnippetTag).where(SnippetTag.snippet_id == snippet_id)
            )
            await self._link_tags(owner_id, snippet_id, payload.tags)

        logger.info("Updated snippet %d for user %d (%d files)", snippet_id, owner_id, len(files))
        return await self.get(owner_id, snippet_id)

    async def duplicate(self, owner_id: int, snippet_id: int) -> SnippetResponse:
        """
        Copy a snippet, its files and its tag links into a new snippet
        titled "<title> (Copy)".

        Raises:
            NotFoundError: source absent, or owned by another user
        """
        async with self._transaction("duplicate snippet"):
            source = await self._get_owned(owner_id, snippet_id)
            now = utcnow()
            copy = Snippet(
                title=f"{source.title}{COPY_SUFFIX}",
                code=source.code,
                description=source.description,
                language_id=source.language_id,
                category_id=source.category_id,
                user_id=owner_id,
                created_at=now,
                updated_at=now,
            )
            self._session.add(copy)
            await self._session.flush()

            source_files = await self._session.execute(
                select(SnippetFile)
                .where(SnippetFile.snippet_id == snippet_id)
                .order_by(SnippetFile.id.asc())
            )
            await self._insert_files(
                copy.id,
                [
                    SnippetFileInput(
                        filename=source_file.filename,
                        content=source_file.content,
                        language_id=source_file.language_id,
                    )
                    for source_file in source_files.scalars().all()
                ],
            )

            tag_ids = await self._session.execute(
                select(SnippetTag.tag_id).where(SnippetTag.snippet_id == snippet_id)
            )
            self._session.add_all(
                SnippetTag(snippet_id=copy.id, tag_id=tag_id) for tag_id in tag_ids.scalars().all()
            )
            await self._session.flush()

        logger.info("Duplicated snippet %d as %d for user %d", snippet_id, copy.id, owner_id)
        return await self.get(owner_id, copy.id)

    async def delete(self, owner_id: int, snippet_id: int) -> None:
        """
        Delete a snippet together with its files and tag links.

        Tags and languages themselves are left alone.

        Raises:
            NotFoundError: absent, or owned by another user
        """
        async with self._transaction("delete snippet"):
            snippet = await self._get_owned(owner_id, snippet_id)
            await self._session.execute(
                delete(SnippetTag).where(SnippetTag.snippet_id == snippet_id)
            )
            await self._session.execute(
                delete(SnippetFile).where(SnippetFile.snippet_id == snippet_id)
            )
            await self._session.delete(snippet)

        logger.info("Deleted snippet %d for user %d", snippet_id, owner_id)

    # ══════════════════════════════════════════════════════════════════════
    # Helpers
    # ══════════════════════════════════════════════════════════════════════

    @staticmethod
    def _validate(payload: SnippetWriteRequest) -> tuple:
        """
        Return (title, files) or raise ValidationError. No store access.

        The title is returned exactly as sent; stripping only decides
        whether it is blank.
        """
        title = payload.title or ""
        files = payload.files or []
        if not title.strip() or not files:
            raise ValidationError(message="Title and at least one file are required")

        for index, file in enumerate(files):
            if not file.filename or not file.content:
                raise ValidationError(
                    message="Each file must have a filename and content",
                    field="files",
                    context={"index": index},
                )
        return title, files

    async def _get_owned(self, owner_id: int, snippet_id: int) -> Snippet:
        if not fits_integer_column(snippet_id):
            raise NotFoundError(resource="snippet", resource_id=snippet_id)
        result = await self._session.execute(
            select(Snippet).where(Snippet.id == snippet_id, Snippet.user_id == owner_id)
        )
        snippet = result.scalar_one_or_none()
        if snippet is None:
            raise NotFoundError(resource="snippet", resource_id=snippet_id)
        return snippet

    async def _check_references(self, owner_id: int, payload: SnippetWriteRequest) -> None:
        """
        Reject a category the caller does not own and languages that do not exist.

        Runs before the first write of a transaction.
        """
        if payload.category_id:
            owned = None
            if fits_integer_column(payload.category_id):
                owned = (
                    await self._session.execute(
                        select(Category.id).where(
                            Category.id == payload.category_id,
                            Category.user_id == owner_id,
                        )
                    )
                ).first()
            if owned is None:
                raise ValidationError(
                    message="Category not found",
                    field="category_id",
                    context={"category_id": payload.category_id},
                )

        language_ids = {payload.language_id} | {f.language_id for f in payload.files or []}
        language_ids = {language_id for language_id in language_ids if language_id}
        if language_ids:
            storable = [lid for lid in language_ids if fits_integer_column(lid)]
            found = await self._session.execute(
                select(Language.id).where(Language.id.in_(storable))
            )
            missing = language_ids - set(found.scalars().all())
            if missing:
                raise ValidationError(
                    message="Language not found",
                    field="language_id",
                    context={"language_ids": sorted(missing)},
                )

    async def _insert_files(self, snippet_id: int, files: Sequence[SnippetFileInput]) -> None:
        # Rows are flushed in add order, so file ids follow the payload order
        now = utcnow()
        for file in files:
            self._session.add(
                SnippetFile(
                    snippet_id=snippet_id,
                    filename=file.filename,
                    content=file.content,
                    language_id=file.language_id or None,
                    created_at=now,
                    updated_at=now,
                )
            )
        await self._session.flush()

    async def _link_tags(
        self,
        owner_id: int,
        snippet_id: int,
        tag_ids: Optional[Iterable[Any]],
    ) -> List[int]:
        """
        Link the caller's tags to a snippet; returns the ids actually linked.

        Values that are not integers, unknown ids and ids owned by other
        users are dropped silently. Repeated ids are linked once.
        """
        parsed = (parse_optional_int(tag_id) for tag_id in tag_ids or [])
        wanted = list(dict.fromkeys(tag_id for tag_id in parsed if tag_id is not None))
        if not wanted:
            return []

        result = await self._session.execute(
            select(Tag.id).where(Tag.id.in_(wanted), Tag.user_id == owner_id)
        )
        owned = set(result.scalars().all())
        linked = [tag_id for tag_id in wanted if tag_id in owned]

        if len(linked) != len(wanted):
            logger.debug(
                "Skipped %d tag ids not owned by user %d", len(wanted) - len(linked), owner_id
            )

        self._session.add_all(SnippetTag(snippet_id=snippet_id, tag_id=tag_id) for tag_id in linked)
        await self._session.flush()
        return linked

    @staticmethod
    def _detail_select() -> Select:
        """Snippet columns plus the language and category names (outer joins)."""
        return (
            select(
                Snippet.id,
                Snippet.title,
                Snippet.description,
                Snippet.code,
                Snippet.language_id,
                Snippet.category_id,
                Snippet.created_at,
                Snippet.updated_at,
                Language.name.label("language_name"),
                Category.name.label("category_name"),
            )
            .outerjoin(Language, Snippet.language_id == Language.id)
            .outerjoin(Category, Snippet.category_id == Category.id)
        )

    async def _enrich(self, rows: Sequence[Row]) -> List[SnippetResponse]:
        """
        Attach tags and files to snippet rows.

        Two queries for the whole batch (tags, then files), grouped by
        snippet id, regardless of how many snippets are in `rows`.
        """
        snippet_ids = [row.id for row in rows]
        if not snippet_ids:
            return []

        tag_rows = await self._session.execute(
            select(SnippetTag.snippet_id, Tag.id, Tag.name)
            .join(Tag, Tag.id == SnippetTag.tag_id)
            .where(SnippetTag.snippet_id.in_(snippet_ids))
            .order_by(Tag.name.asc(), Tag.id.asc())
        )
        tags_by_snippet: Dict[int, List[SnippetTagResponse]] = defaultdict(list)
        for snippet_id, tag_id, tag_name in tag_rows.all():
            tags_by_snippet[snippet_id].append(SnippetTagResponse(id=tag_id, name=tag_name))

        file_rows = await self._session.execute(
            select(
                SnippetFile.snippet_id,
                SnippetFile.id,
                SnippetFile.filename,
                SnippetFile.content,
                SnippetFile.language_id,
                Language.name.label("language_name"),
            )
            .outerjoin(Language, SnippetFile.language_id == Language.id)
            .where(SnippetFile.snippet_id.in_(snippet_ids))
            .order_by(SnippetFile.id.asc())
        )
        files_by_snippet: Dict[int, List[SnippetFileResponse]] = defaultdict(list)
        for file_row in file_rows.all():
            files_by_snippet[file_row.snippet_id].append(
                SnippetFileResponse(
                    id=file_row.id,
                    filename=file_row.filename,
                    content=file_row.content,
                    language_id=file_row.language_id,
                    language_name=file_row.language_name,
                )
            )

        return [
            SnippetResponse(
                id=row.id,
                title=row.title,
                description=row.description,
                code=row.code,
                language_id=row.language_id,
                category_id=row.category_id,
                created_at=row.created_at,
                updated_at=row.updated_at,
                language_name=row.language_name,
                category_name=row.category_name,
                tags=tags_by_snippet[row.id],
                files=files_by_snippet[row.id],
            )
            for row in rows
        ]
