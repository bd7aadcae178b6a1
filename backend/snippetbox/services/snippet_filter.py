"""
SnippetBox Backend — Snippet Filter/Search Resolver
=====================================================

What:  Turns the optional list criteria (language, category, tag, free text)
       into one owner-scoped SELECT.
How:   `SnippetFilter.from_query()` normalizes raw query-string values;
       `SnippetFilter.apply()` adds one predicate per supplied criterion.
Who:   Built by GET /snippets, consumed by SnippetRepository.list().

Matching Rules:
    language_id  → snippets.language_id = :id
    category_id  → snippets.category_id = :id
    tag_id       → INNER JOIN snippet_tags ON snippet_id, tag_id = :id
                   (untagged snippets can never match a tag filter)
    search       → title / description / code contain the text,
                   case-insensitive, combined with OR
    All supplied criteria are AND-ed. A numeric value that is not an
    integer ("abc", "1.5", "+5", "") or does not fit a 64-bit
    INTEGER column counts as not supplied.
"""

import re
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy import Select, or_

from snippetbox.database import fits_integer_column
from snippetbox.models.snippet import Snippet, SnippetTag

_PLAIN_INTEGER = re.compile(r"-?[0-9]+")


def parse_optional_int(value: Any) -> Optional[int]:
    """
    Lenient integer parsing for filter values and tag ids.

    Only a plain decimal integer (optional leading minus, surrounding
    whitespace allowed) that fits a 64-bit INTEGER column counts.

    >>> parse_optional_int("12")
    12
    >>> parse_optional_int("twelve") is None
    True
    >>> parse_optional_int("1_000") is None
    True
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = value.strip()
        if not _PLAIN_INTEGER.fullmatch(text):
            return None
        value = int(text)
    if not isinstance(value, int) or not fits_integer_column(value):
        return None
    return value


@dataclass(frozen=True)
class SnippetFilter:
    """Normalized list criteria; every field is optional."""

    language_id: Optional[int] = None
    category_id: Optional[int] = None
    tag_id: Optional[int] = None
    search: Optional[str] = None

    @classmethod
    def from_query(
        cls,
        language_id: Any = None,
        category_id: Any = None,
        tag_id: Any = None,
        search: Optional[str] = None,
    ) -> "SnippetFilter":
        return cls(
            language_id=parse_optional_int(language_id),
            category_id=parse_optional_int(category_id),
            tag_id=parse_optional_int(tag_id),
            search=search if search else None,
        )

    @property
    def is_empty(self) -> bool:
        return (
            self.language_id is None
            and self.category_id is None
            and self.tag_id is None
            and self.search is None
        )

    def apply(self, query: Select, owner_id: int) -> Select:
        """
        Narrow `query` (which must select from `snippets`) to the owner's
        snippets matching every supplied criterion.
        """
        query = query.where(Snippet.user_id == owner_id)

        if self.language_id is not None:
            query = query.where(Snippet.language_id == self.language_id)

        if self.category_id is not None:
            query = query.where(Snippet.category_id == self.category_id)

        if self.tag_id is not None:
            # (snippet_id, tag_id) is the primary key, so the join adds at most one row
            query = query.join(SnippetTag, SnippetTag.snippet_id == Snippet.id).where(
                SnippetTag.tag_id == self.tag_id
            )

        if self.search is not None:
            # autoescape: '%' and '_' typed by the user match literally
            query = query.where(
                or_(
                    Snippet.title.icontains(self.search, autoescape=True),
                    Snippet.description.icontains(self.search, autoescape=True),
                    Snippet.code.icontains(self.search, autoescape=True),
                )
            )

        return query
