"""
Gistbook - Subject Service Tests
================================

What we test:
    ✅ list_subjects sorted by name, ignoring case
    ✅ create_subject trims, rejects blanks and case-insensitive duplicates
    ✅ a unique-index violation from a racing insert is reported as a duplicate
    ✅ delete_subject: unreferenced → deleted, referenced → 409 with count,
       unknown id → NotFoundError
"""

import pytest

from gistbook.exceptions import (
    ConstraintViolationError,
    DuplicateNameError,
    MissingFieldError,
    NotFoundError,
    SubjectInUseError,
)
from gistbook.services.snippet_service import SnippetService
from gistbook.services.subject_service import SubjectService


class TestListSubjects:

    @pytest.mark.asyncio
    async def test_seeded_defaults(self, store):
        result = await SubjectService().list_subjects(store)
        assert [(s.id, s.name) for s in result] == [
            (1, "sub1"), (2, "sub2"), (3, "sub3"), (4, "sub4"), (5, "sub5"),
        ]

    @pytest.mark.asyncio
    async def test_sorted_ignoring_case(self, store):
        service = SubjectService()
        for name in ("zeta", "Alpha", "beta"):
            await service.create_subject(store, name)

        names = [s.name for s in await service.list_subjects(store)]

        assert names[:3] == ["Alpha", "beta", "sub1"]
        assert names[-1] == "zeta"


class TestCreateSubject:

    def setup_method(self):
        self.service = SubjectService()

    @pytest.mark.asyncio
    async def test_create_returns_id_and_trimmed_name(self, store):
        created = await self.service.create_subject(store, "  Rust  ")
        assert created.id == 6
        assert created.name == "Rust"

        names = [s.name for s in await self.service.list_subjects(store)]
        assert "Rust" in names

    @pytest.mark.asyncio
    async def test_case_variants_are_duplicates(self, store):
        """Math, math and MATH are the same subject."""
        await self.service.create_subject(store, "Math")

        for variant in ("math", "MATH", " mAtH "):
            with pytest.raises(DuplicateNameError) as exc_info:
                await self.service.create_subject(store, variant)
            assert exc_info.value.message == "Subject with this name already exists."

        subjects = await self.service.list_subjects(store)
        assert sum(1 for s in subjects if s.name.lower() == "math") == 1

    @pytest.mark.asyncio
    async def test_non_ascii_case_variant_is_duplicate(self, store):
        await self.service.create_subject(store, "Ökonomie")
        with pytest.raises(DuplicateNameError):
            await self.service.create_subject(store, "ökonomie")

    @pytest.mark.asyncio
    async def test_seeded_name_is_a_duplicate(self, store):
        with pytest.raises(DuplicateNameError):
            await self.service.create_subject(store, "SUB3")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", [None, "", "   "])
    async def test_blank_name_rejected(self, mock_store, name):
        with pytest.raises(MissingFieldError) as exc_info:
            await self.service.create_subject(mock_store, name)
        assert exc_info.value.message == "Subject name is required."
        mock_store.query_many.assert_not_awaited()
        mock_store.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_index_violation_reported_as_duplicate(self, mock_store):
        """A concurrent insert that slips past the check hits the unique index."""
        mock_store.query_many.return_value = [{"name": "sub1"}]
        mock_store.execute.side_effect = ConstraintViolationError(
            context={"original_error": "UNIQUE constraint failed: index 'uq_subjects_name_lower'"}
        )

        with pytest.raises(DuplicateNameError) as exc_info:
            await self.service.create_subject(mock_store, "Rust")

        assert exc_info.value.name == "Rust"
        assert isinstance(exc_info.value.__cause__, ConstraintViolationError)


class TestDeleteSubject:

    def setup_method(self):
        self.service = SubjectService()
        self.snippets = SnippetService()

    @pytest.mark.asyncio
    async def test_delete_unreferenced(self, store):
        message = await self.service.delete_subject(store, 2)

        assert message == "Subject deleted successfully."
        ids = [s.id for s in await self.service.list_subjects(store)]
        assert 2 not in ids

    @pytest.mark.asyncio
    async def test_delete_referenced_reports_count(self, store):
        created = await self.service.create_subject(store, "Rust")
        await self.snippets.create_snippet(store, title="a", category="Rust", content="1")
        await self.snippets.create_snippet(store, title="b", category="rust", content="2")

        with pytest.raises(SubjectInUseError) as exc_info:
            await self.service.delete_subject(store, created.id)

        assert exc_info.value.snippet_count == 2
        assert exc_info.value.message == (
            "Cannot delete subject 'Rust'. It still has 2 associated gist(s). "
            "Please reassign or delete gists in this subject first."
        )
        ids = [s.id for s in await self.service.list_subjects(store)]
        assert created.id in ids

    @pytest.mark.asyncio
    async def test_non_ascii_case_variant_blocks(self, store):
        """"élan" is filed under "Élan", so it must also block the delete."""
        created = await self.service.create_subject(store, "Élan")
        await self.snippets.create_snippet(store, title="a", category="élan", content="1")

        with pytest.raises(SubjectInUseError) as exc_info:
            await self.service.delete_subject(store, created.id)

        assert exc_info.value.snippet_count == 1

    @pytest.mark.asyncio
    async def test_whitespace_variant_does_not_block(self, store):
        created = await self.service.create_subject(store, "Rust")
        await self.snippets.create_snippet(store, title="a", category="Rust ", content="1")

        assert await self.service.delete_subject(store, created.id) == "Subject deleted successfully."

    @pytest.mark.asyncio
    async def test_delete_unknown_id(self, store):
        with pytest.raises(NotFoundError):
            await self.service.delete_subject(store, 999)

    @pytest.mark.asyncio
    async def test_delete_twice(self, store):
        await self.service.delete_subject(store, 1)
        with pytest.raises(NotFoundError):
            await self.service.delete_subject(store, 1)

    @pytest.mark.asyncio
    async def test_deleted_name_can_be_reused(self, store):
        await self.service.delete_subject(store, 1)
        created = await self.service.create_subject(store, "SUB1")
        assert created.name == "SUB1"
