"""
SnippetBox Backend — Snippet Filter Unit Tests
================================================

What:  Query-string normalization and the predicates SnippetFilter adds.
How:   Pure unit tests; queries are compiled to SQL text, no database needed.
"""

import pytest
from sqlalchemy import select

from snippetbox.models import Snippet
from snippetbox.services.snippet_filter import SnippetFilter, parse_optional_int


class TestParseOptionalInt:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("7", 7),
            (" 12 ", 12),
            (3, 3),
            ("-1", -1),
            ("9223372036854775807", 2**63 - 1),
            (-(2**63), -(2**63)),
        ],
    )
    def test_integers_are_parsed(self, raw, expected):
        assert parse_optional_int(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        [None, "", "abc", "1.5", True, 2.0, "1_000", "+5", "\u0661\u0662", "- 1"],
    )
    def test_everything_else_is_absent(self, raw):
        assert parse_optional_int(raw) is None

    @pytest.mark.parametrize("raw", ["9223372036854775808", "99999999999999999999", 2**63, -(2**63) - 1])
    def test_values_too_large_for_an_integer_column_are_absent(self, raw):
        assert parse_optional_int(raw) is None


class TestFromQuery:

    def test_non_numeric_ids_are_dropped(self):
        snippet_filter = SnippetFilter.from_query(language_id="abc", category_id="", tag_id="4")

        assert snippet_filter == SnippetFilter(tag_id=4)

    def test_out_of_range_ids_are_dropped(self):
        snippet_filter = SnippetFilter.from_query(tag_id="99999999999999999999", language_id="+5")

        assert snippet_filter.is_empty

    def test_empty_search_is_absent(self):
        assert SnippetFilter.from_query(search="").is_empty

    def test_search_text_is_kept_verbatim(self):
        assert SnippetFilter.from_query(search=" Foo ").search == " Foo "


class TestApply:

    @staticmethod
    def compile(snippet_filter: SnippetFilter, owner_id: int = 1) -> str:
        query = snippet_filter.apply(select(Snippet.id), owner_id)
        return str(query.compile(compile_kwargs={"literal_binds": True}))

    def test_owner_scope_is_always_applied(self):
        sql = self.compile(SnippetFilter(), owner_id=42)

        assert "snippets.user_id = 42" in sql
        assert "JOIN" not in sql

    def test_tag_filter_joins_snippet_tags(self):
        sql = self.compile(SnippetFilter(tag_id=9))

        assert "JOIN snippet_tags" in sql
        assert "snippet_tags.tag_id = 9" in sql

    def test_criteria_are_combined(self):
        sql = self.compile(SnippetFilter(language_id=2, category_id=3, search="sort"))

        assert "snippets.language_id = 2" in sql
        assert "snippets.category_id = 3" in sql
        assert sql.count("lower(") >= 3
        assert " OR " in sql

    def test_wildcards_in_search_are_escaped(self):
        query = SnippetFilter(search="100%").apply(select(Snippet.id), 1)
        params = query.compile().params

        assert any("100/%" in str(value) for value in params.values())
