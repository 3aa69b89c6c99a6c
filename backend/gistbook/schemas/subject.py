"""Pydantic models for the subject endpoints."""

from typing import Optional

from pydantic import BaseModel, Field


class SubjectCreate(BaseModel):
    """Body of POST /api/subjects. Trimmed and checked by the service."""
    name: Optional[str] = Field(default=None, description="Subject name")


class SubjectResponse(BaseModel):
    id: int = Field(description="Store-assigned identifier")
    name: str = Field(description="Subject name, unique ignoring case")


class MessageResponse(BaseModel):
    """Confirmation body, e.g. after DELETE /api/subjects/{id}."""
    message: str
