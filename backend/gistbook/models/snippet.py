"""
Gistbook Backend - Snippet SQLAlchemy Model
===========================================

What:  ORM model for the `snippets` table.
Who:   SnippetService builds its statements against `Snippet.__table__`;
       RecordStore.initialize() creates the table from this declaration.

Table Design:
    - id: INTEGER autoincrement primary key assigned by the store
    - category: plain text holding a subject name. There is no foreign key;
      the link to `subjects.name` is a soft reference and is never cascaded.
    - created_at: assigned by the service at insert time, never updated.
      Stored as UTC.

Index on created_at DESC:
    The snippet list is always read newest first.
"""

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from gistbook.database import Base


class Snippet(Base):
    """
    A stored text record (code or gist) filed under a subject name.

    Lifecycle:
        1. Created by POST /api/snippets
        2. Never updated, never deleted through the API
    """

    __tablename__ = "snippets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(Text, nullable=False)

    # Soft reference to Subject.name (see module docstring)
    category: Mapped[str] = mapped_column(Text, nullable=False)

    # Arbitrary length, rendered verbatim (escaped) by the client
    content: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    __table_args__ = (
        Index("idx_snippets_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return (
            f"<Snippet(id={self.id}, category='{self.category}', "
            f"created_at='{self.created_at}')>"
        )
