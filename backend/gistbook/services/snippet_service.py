"""
Gistbook Backend - Snippet Service
==================================

What:  Listing, creating and fetching snippets.
Who:   Called by the snippet routes, and by SubjectService for the
       "how many snippets block this delete" count.

Timestamps:
    created_at is generated here once, written to the row, and the response
    is the row read back from the store. The echoed value is exactly the
    persisted one.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import func, insert, select

from gistbook.database import RecordStore
from gistbook.exceptions import NotFoundError
from gistbook.models import Snippet
from gistbook.schemas.snippet import SnippetRef, SnippetResponse
from gistbook.validation import validate_snippet_input

logger = logging.getLogger(__name__)

snippets = Snippet.__table__

_COLUMNS = (
    snippets.c.id,
    snippets.c.title,
    snippets.c.category,
    snippets.c.content,
    snippets.c.created_at,
)


def refers_to(subject_name):
    """SQL form of validation.same_subject for the category column."""
    return func.fold(snippets.c.category) == func.fold(subject_name)


class SnippetService:
    """
    Business logic for snippet operations.

    Store errors are not caught here: they reach the global StoreError
    handler, which logs them and answers 500.
    """

    async def list_snippets(self, store: RecordStore) -> List[SnippetResponse]:
        """
        All snippets, newest first.

        Query plan:
            SELECT ... FROM snippets ORDER BY created_at DESC, id DESC
            → idx_snippets_created_at; id breaks ties between inserts that
              share a timestamp
        """
        rows = await store.query_many(
            select(*_COLUMNS).order_by(snippets.c.created_at.desc(), snippets.c.id.desc())
        )
        return [SnippetResponse(**row) for row in rows]

    async def list_snippets_by_subject(
        self, store: RecordStore, subject_name: str
    ) -> List[SnippetRef]:
        """Ids of the snippets whose category refers to `subject_name`."""
        rows = await store.query_many(
            select(snippets.c.id).where(refers_to(subject_name)).order_by(snippets.c.id)
        )
        return [SnippetRef(**row) for row in rows]

    async def count_by_subject(self, store: RecordStore, subject_name: str) -> int:
        row = await store.query_one(
            select(func.count().label("count")).select_from(snippets).where(refers_to(subject_name))
        )
        return row["count"] if row else 0

    async def create_snippet(
        self,
        store: RecordStore,
        title: Optional[str],
        category: Optional[str],
        content: Optional[str],
    ) -> SnippetResponse:
        """
        Validate and insert a snippet.

        Workflow:
            1. validate_snippet_input (raises before anything is written)
            2. INSERT with a server-generated UTC timestamp
            3. Read the row back and return it

        Raises:
            MissingFieldError: title, category or content absent/empty (→ 400)
            StoreError: insert or read-back failed (→ 500)
        """
        validate_snippet_input(title, category, content)

        result = await store.execute(
            insert(snippets).values(
                title=title,
                category=category,
                content=content,
                created_at=datetime.now(timezone.utc),
            )
        )
        logger.info("Snippet %s created in category '%s'", result.inserted_id, category)
        return await self.get_snippet(store, result.inserted_id)

    async def get_snippet(self, store: RecordStore, snippet_id: int) -> SnippetResponse:
        """
        Retrieve a single snippet.

        Raises:
            NotFoundError: no snippet with this id (→ 404)
        """
        row = await store.query_one(select(*_COLUMNS).where(snippets.c.id == snippet_id))
        if row is None:
            raise NotFoundError(resource="snippet", resource_id=snippet_id)
        return SnippetResponse(**row)


snippet_service = SnippetService()
