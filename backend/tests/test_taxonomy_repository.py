"""
SnippetBox Backend — Taxonomy Repository Tests
================================================

What:  Languages, categories and tags against a temporary SQLite database.
"""

import pytest

from snippetbox.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from snippetbox.schemas.snippet import SnippetWriteRequest


def payload_with(**fields) -> SnippetWriteRequest:
    return SnippetWriteRequest(
        title="demo",
        files=[{"filename": "a.txt", "content": "x"}],
        **fields,
    )


class TestLanguages:

    @pytest.mark.asyncio
    async def test_listed_by_name(self, taxonomy_repo):
        for name in ("Rust", "Go", "Python"):
            await taxonomy_repo.create_language(name)

        assert [language.name for language in await taxonomy_repo.list_languages()] == ["Go", "Python", "Rust"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", [None, "", "   ", 42])
    async def test_name_is_required(self, taxonomy_repo, name):
        with pytest.raises(ValidationError) as exc_info:
            await taxonomy_repo.create_language(name)

        assert exc_info.value.message == "Language name is required"

    @pytest.mark.asyncio
    async def test_duplicate_name_conflicts(self, taxonomy_repo, python_language_id):
        with pytest.raises(ConflictError):
            await taxonomy_repo.create_language("Python")

    @pytest.mark.asyncio
    async def test_unused_language_can_be_deleted(self, taxonomy_repo, python_language_id):
        await taxonomy_repo.delete_language(python_language_id)

        assert await taxonomy_repo.list_languages() == []

    @pytest.mark.asyncio
    async def test_language_used_by_a_snippet_cannot_be_deleted(
        self, taxonomy_repo, snippet_repo, alice_id, python_language_id
    ):
        await snippet_repo.create(alice_id, payload_with(language_id=python_language_id))

        with pytest.raises(ConflictError) as exc_info:
            await taxonomy_repo.delete_language(python_language_id)

        assert "snippets associated" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_language_used_by_a_file_cannot_be_deleted(
        self, taxonomy_repo, snippet_repo, alice_id, python_language_id
    ):
        await snippet_repo.create(
            alice_id,
            SnippetWriteRequest(
                title="demo",
                files=[{"filename": "a.py", "content": "x", "language_id": python_language_id}],
            ),
        )

        with pytest.raises(ConflictError):
            await taxonomy_repo.delete_language(python_language_id)

    @pytest.mark.asyncio
    async def test_missing_language_is_not_found(self, taxonomy_repo):
        with pytest.raises(NotFoundError):
            await taxonomy_repo.delete_language(12345)

    @pytest.mark.asyncio
    async def test_ids_outside_the_column_range_are_not_found(self, taxonomy_repo, alice_id):
        with pytest.raises(NotFoundError):
            await taxonomy_repo.delete_language(2**63)
        with pytest.raises(NotFoundError):
            await taxonomy_repo.update_category(alice_id, 2**63, "Work")
        with pytest.raises(NotFoundError):
            await taxonomy_repo.delete_tag(alice_id, -(2**63) - 1)


class TestCategories:

    @pytest.mark.asyncio
    async def test_names_are_stripped_and_scoped_per_user(self, taxonomy_repo, alice_id, bob_id):
        category = await taxonomy_repo.create_category(alice_id, "  Work  ")
        await taxonomy_repo.create_category(bob_id, "Work")

        assert category.name == "Work"
        assert [c.name for c in await taxonomy_repo.list_categories(alice_id)] == ["Work"]

    @pytest.mark.asyncio
    async def test_duplicate_for_same_user_conflicts(self, taxonomy_repo, alice_id):
        await taxonomy_repo.create_category(alice_id, "Work")

        with pytest.raises(ConflictError):
            await taxonomy_repo.create_category(alice_id, "Work")

    @pytest.mark.asyncio
    async def test_rename(self, taxonomy_repo, alice_id):
        category = await taxonomy_repo.create_category(alice_id, "Wrok")
        category_id = category.id

        renamed = await taxonomy_repo.update_category(alice_id, category_id, "Work")

        assert renamed.id == category_id
        assert renamed.name == "Work"

    @pytest.mark.asyncio
    async def test_rename_to_existing_name_conflicts(self, taxonomy_repo, alice_id):
        await taxonomy_repo.create_category(alice_id, "Work")
        other = await taxonomy_repo.create_category(alice_id, "Home")

        with pytest.raises(ConflictError):
            await taxonomy_repo.update_category(alice_id, other.id, "Work")

    @pytest.mark.asyncio
    async def test_other_users_category_is_forbidden(self, taxonomy_repo, alice_id, bob_id):
        category = await taxonomy_repo.create_category(alice_id, "Work")
        category_id = category.id

        with pytest.raises(ForbiddenError):
            await taxonomy_repo.update_category(bob_id, category_id, "Mine")
        with pytest.raises(ForbiddenError):
            await taxonomy_repo.delete_category(bob_id, category_id)

    @pytest.mark.asyncio
    async def test_missing_category_is_not_found(self, taxonomy_repo, alice_id):
        with pytest.raises(NotFoundError):
            await taxonomy_repo.update_category(alice_id, 999, "Anything")

    @pytest.mark.asyncio
    async def test_delete_uncategorizes_snippets(self, taxonomy_repo, snippet_repo, alice_id):
        category = await taxonomy_repo.create_category(alice_id, "Work")
        snippet = await snippet_repo.create(alice_id, payload_with(category_id=category.id))

        await taxonomy_repo.delete_category(alice_id, category.id)

        reloaded = await snippet_repo.get(alice_id, snippet.id)
        assert reloaded.category_id is None
        assert reloaded.category_name is None


class TestTags:

    @pytest.mark.asyncio
    async def test_blank_name_is_rejected(self, taxonomy_repo, alice_id):
        with pytest.raises(ValidationError) as exc_info:
            await taxonomy_repo.create_tag(alice_id, " ")

        assert exc_info.value.message == "Tag name is required"

    @pytest.mark.asyncio
    async def test_delete_unlinks_but_keeps_snippets(self, taxonomy_repo, snippet_repo, alice_id):
        tag = await taxonomy_repo.create_tag(alice_id, "util")
        snippet = await snippet_repo.create(alice_id, payload_with(tags=[tag.id]))

        await taxonomy_repo.delete_tag(alice_id, tag.id)

        reloaded = await snippet_repo.get(alice_id, snippet.id)
        assert reloaded.tags == []
        assert await taxonomy_repo.list_tags(alice_id) == []

    @pytest.mark.asyncio
    async def test_other_users_tag_is_forbidden(self, taxonomy_repo, alice_id, bob_id):
        tag = await taxonomy_repo.create_tag(alice_id, "util")
        tag_id = tag.id

        with pytest.raises(ForbiddenError):
            await taxonomy_repo.delete_tag(bob_id, tag_id)
