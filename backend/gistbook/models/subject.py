"""
Gistbook Backend - Subject SQLAlchemy Model
===========================================

What:  ORM model for the `subjects` table.

Uniqueness:
    Subject names are unique ignoring case. The unique index is declared on
    fold(name), so "Math" and "MATH" collide at the store level even if two
    requests pass the service-level duplicate check at the same time.
"""

from sqlalchemy import Index, Integer, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from gistbook.database import Base


class Subject(Base):
    """A named grouping category for snippets."""

    __tablename__ = "subjects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<Subject(id={self.id}, name='{self.name}')>"


# fold() is registered per connection by RecordStore
Index("uq_subjects_name_fold", func.fold(Subject.__table__.c.name), unique=True)
