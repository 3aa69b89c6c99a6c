"""
Gistbook - Snippet Service Tests
================================

What we test:
    ✅ create_snippet stores the values as given and echoes the stored row
    ✅ list_snippets returns newest first
    ✅ list_snippets_by_subject / count_by_subject ignore case, not whitespace
    ✅ get_snippet raises NotFoundError for unknown ids
    ✅ validation failures never reach the store
    ✅ StoreError propagates unchanged
"""

from datetime import datetime, timedelta, timezone

import pytest

from gistbook.exceptions import MissingFieldError, NotFoundError, StoreError
from gistbook.services.snippet_service import SnippetService


class TestCreateSnippet:

    def setup_method(self):
        self.service = SnippetService()

    @pytest.mark.asyncio
    async def test_create_returns_stored_row(self, store, sample_snippet):
        """The response carries the new id and exactly what was stored."""
        before = datetime.now(timezone.utc)
        created = await self.service.create_snippet(store, **sample_snippet)
        after = datetime.now(timezone.utc)

        assert created.id == 1
        assert created.title == "Hello world"
        assert created.category == "sub1"
        assert created.content == 'print("hello")\n'
        assert created.created_at.tzinfo is not None
        assert before - timedelta(seconds=1) <= created.created_at <= after + timedelta(seconds=1)

        fetched = await self.service.get_snippet(store, created.id)
        assert fetched == created

    @pytest.mark.asyncio
    async def test_values_are_not_trimmed(self, store):
        created = await self.service.create_snippet(
            store, title="  padded  ", category="sub2", content="\n    indented\n"
        )
        assert created.title == "  padded  "
        assert created.content == "\n    indented\n"

    @pytest.mark.asyncio
    async def test_category_need_not_name_a_subject(self, store):
        """Categories are free text; orphaned snippets are allowed."""
        created = await self.service.create_snippet(
            store, title="t", category="Nowhere", content="c"
        )
        assert created.category == "Nowhere"

    @pytest.mark.asyncio
    async def test_large_content_round_trips(self, store):
        content = "x" * 200_000
        created = await self.service.create_snippet(store, title="big", category="sub1", content=content)
        assert len(created.content) == 200_000

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["title", "category", "content"])
    async def test_missing_field_writes_nothing(self, mock_store, sample_snippet, missing):
        """Validation runs before any store call."""
        payload = dict(sample_snippet, **{missing: None})

        with pytest.raises(MissingFieldError) as exc_info:
            await self.service.create_snippet(mock_store, **payload)

        assert exc_info.value.field == missing
        assert exc_info.value.message == "Title, category, and content are required."
        mock_store.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_whitespace_only_field_is_missing(self, mock_store, sample_snippet):
        payload = dict(sample_snippet, content="   \n\t")
        with pytest.raises(MissingFieldError):
            await self.service.create_snippet(mock_store, **payload)
        mock_store.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_store_error_propagates(self, mock_store, sample_snippet):
        mock_store.execute.side_effect = StoreError(context={"original_error": "disk I/O error"})
        with pytest.raises(StoreError):
            await self.service.create_snippet(mock_store, **sample_snippet)


class TestListSnippets:

    def setup_method(self):
        self.service = SnippetService()

    @pytest.mark.asyncio
    async def test_empty(self, store):
        assert await self.service.list_snippets(store) == []

    @pytest.mark.asyncio
    async def test_newest_first(self, store):
        for title in ("first", "second", "third"):
            await self.service.create_snippet(store, title=title, category="sub1", content="c")

        result = await self.service.list_snippets(store)

        assert [s.title for s in result] == ["third", "second", "first"]
        assert [s.id for s in result] == [3, 2, 1]

    @pytest.mark.asyncio
    async def test_store_error_propagates(self, mock_store):
        mock_store.query_many.side_effect = StoreError()
        with pytest.raises(StoreError):
            await self.service.list_snippets(mock_store)


class TestSnippetsBySubject:

    def setup_method(self):
        self.service = SnippetService()

    @pytest.mark.asyncio
    async def test_matches_ignoring_case(self, store):
        await self.service.create_snippet(store, title="a", category="Math", content="1")
        await self.service.create_snippet(store, title="b", category="MATH", content="2")
        await self.service.create_snippet(store, title="c", category="Physics", content="3")

        refs = await self.service.list_snippets_by_subject(store, "math")

        assert [ref.id for ref in refs] == [1, 2]
        assert await self.service.count_by_subject(store, "mAtH") == 2

    @pytest.mark.asyncio
    async def test_whitespace_is_significant(self, store):
        await self.service.create_snippet(store, title="a", category=" Math", content="1")

        assert await self.service.list_snippets_by_subject(store, "Math") == []
        assert await self.service.count_by_subject(store, "Math") == 0

    @pytest.mark.asyncio
    async def test_unknown_subject_is_empty(self, store):
        assert await self.service.list_snippets_by_subject(store, "Nope") == []


class TestGetSnippet:

    @pytest.mark.asyncio
    async def test_not_found(self, store):
        with pytest.raises(NotFoundError) as exc_info:
            await SnippetService().get_snippet(store, 42)
        assert exc_info.value.message == "Snippet with ID '42' was not found"
