"""
Gistbook Backend - Snippet Schemas
==================================

What:  Pydantic models for the snippet endpoints.

Request fields are all Optional: a missing field must come back as a 400
`missing_field` error from validate_snippet_input, not as a 422.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class SnippetCreate(BaseModel):
    """Body of POST /api/snippets."""
    title: Optional[str] = Field(default=None, description="Snippet title")
    category: Optional[str] = Field(default=None, description="Name of the subject it belongs to")
    content: Optional[str] = Field(default=None, description="Snippet text, any length")


class SnippetResponse(BaseModel):
    """
    A stored snippet.

    created_at is always returned timezone-aware (UTC). SQLite hands back
    naive datetimes, which are UTC by construction.
    """
    id: int = Field(description="Store-assigned identifier")
    title: str
    category: str
    content: str
    created_at: datetime = Field(description="Insert time (UTC ISO 8601)")

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class SnippetRef(BaseModel):
    """Item of GET /api/snippets/by-subject/{subject_name}."""
    id: int
