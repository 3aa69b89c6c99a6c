"""SQLAlchemy models for the two Gistbook tables."""

from gistbook.models.snippet import Snippet
from gistbook.models.subject import Subject

__all__ = ["Snippet", "Subject"]
