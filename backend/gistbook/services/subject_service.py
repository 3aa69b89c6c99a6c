"""
Gistbook Backend - Subject Service
==================================

What:  Listing, creating and deleting subjects.

Integrity rules:
    Create:  the trimmed name must be non-empty and must not match an
             existing name ignoring case. The unique index on fold(name)
             catches the case where two creates race past the check; that
             violation is reported as the same DuplicateNameError.
    Delete:  a subject is removed only if no snippet refers to it. Check and
             delete are one statement:

                 DELETE FROM subjects
                 WHERE id = :id
                   AND NOT EXISTS (SELECT 1 FROM snippets
                                   WHERE fold(category) = fold(subjects.name))

             When nothing was deleted, a follow-up read tells "no such
             subject" (404) apart from "still referenced" (409 with count).
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, func, insert, select

from gistbook.database import RecordStore
from gistbook.exceptions import (
    ConstraintViolationError,
    DuplicateNameError,
    NotFoundError,
    SubjectInUseError,
)
from gistbook.models import Snippet, Subject
from gistbook.schemas.subject import SubjectResponse
from gistbook.services.snippet_service import snippet_service
from gistbook.validation import is_duplicate_subject, validate_subject_name

logger = logging.getLogger(__name__)

subjects = Subject.__table__
snippets = Snippet.__table__


class SubjectService:

    async def list_subjects(self, store: RecordStore) -> List[SubjectResponse]:
        """All subjects ordered by name (case-insensitive, ties by exact name)."""
        rows = await store.query_many(
            select(subjects.c.id, subjects.c.name).order_by(
                func.fold(subjects.c.name), subjects.c.name
            )
        )
        return [SubjectResponse(**row) for row in rows]

    async def create_subject(self, store: RecordStore, name: Optional[str]) -> SubjectResponse:
        """
        Trim, validate, check for duplicates, insert.

        Raises:
            MissingFieldError: name absent or blank (→ 400)
            DuplicateNameError: a subject with this name exists, any case (→ 409)
        """
        clean = validate_subject_name(name)

        existing = await store.query_many(select(subjects.c.name))
        if is_duplicate_subject(clean, (row["name"] for row in existing)):
            raise DuplicateNameError(clean)

        try:
            result = await store.execute(insert(subjects).values(name=clean))
        except ConstraintViolationError as e:
            raise DuplicateNameError(clean, context=dict(e.context)) from e

        logger.info("Subject %s created: '%s'", result.inserted_id, clean)
        return SubjectResponse(id=result.inserted_id, name=clean)

    async def delete_subject(self, store: RecordStore, subject_id: int) -> str:
        """
        Delete a subject unless snippets still refer to it.

        Returns:
            Confirmation message

        Raises:
            NotFoundError: no subject with this id (→ 404)
            SubjectInUseError: N ≥ 1 snippets refer to it (→ 409)
        """
        referencing = (
            select(snippets.c.id)
            .where(func.fold(snippets.c.category) == func.fold(subjects.c.name))
            .correlate(subjects)
        )
        result = await store.execute(
            delete(subjects)
            .where(subjects.c.id == subject_id)
            .where(~referencing.exists())
        )
        if result.rows_affected:
            logger.info("Subject %s deleted", subject_id)
            return "Subject deleted successfully."

        row = await store.query_one(
            select(subjects.c.id, subjects.c.name).where(subjects.c.id == subject_id)
        )
        if row is None:
            raise NotFoundError(resource="subject", resource_id=subject_id)

        count = await snippet_service.count_by_subject(store, row["name"])
        logger.info(
            "Refused to delete subject %s ('%s'): %d snippet(s) refer to it",
            subject_id, row["name"], count,
        )
        raise SubjectInUseError(name=row["name"], snippet_count=count)


subject_service = SubjectService()
