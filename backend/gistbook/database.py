"""
Gistbook Backend - Record Store
===============================

What:  The RecordStore owns the async SQLAlchemy engine and exposes three
       statement primitives (execute, query_one, query_many) plus an explicit
       initialize/shutdown lifecycle.
How:   One RecordStore is constructed by the app factory and kept on
       `app.state.store`. Route handlers receive it through the `get_store`
       dependency and pass it to the services.
When:  initialize() runs once from the FastAPI lifespan (or a test fixture);
       shutdown() runs when the application stops.

Transaction model:
    Every primitive runs in its own transaction, so each call is atomic on
    its own. Nothing here spans several statements; operations that need an
    atomic check-and-act express it as a single statement instead (see
    SubjectService.delete_subject).

SQL functions:
    Every SQLite connection gets `fold(text)`, the Python `fold_case` rule.
    Name comparisons, the delete guard and the unique name index all use
    it, so SQL agrees with the Python side on non-ASCII letters.

Schema management:
    initialize() creates missing tables from the declarative models and
    seeds the default subjects when the subjects table is empty. Both steps
    are idempotent, so a second initialize() against the same file is a no-op.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from fastapi import Request
from sqlalchemy import event, func, insert, select, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.sql.expression import Executable

from gistbook.exceptions import ConstraintViolationError, StoreError
from gistbook.validation import fold_case

logger = logging.getLogger(__name__)

# Seeded in this order on first run, only when the subjects table is empty
DEFAULT_SUBJECTS = ("sub1", "sub2", "sub3", "sub4", "sub5")

Statement = Union[str, Executable]
Params = Optional[Union[Mapping[str, Any], Sequence[Mapping[str, Any]]]]


class Base(DeclarativeBase):
    """Base class for the snippet and subject ORM models."""
    pass


@dataclass(frozen=True)
class ExecuteResult:
    """Outcome of a mutating statement."""

    inserted_id: Optional[int]
    rows_affected: int


class RecordStore:
    """
    Relational store holding the `snippets` and `subjects` tables.

    Usage:
        store = RecordStore("sqlite+aiosqlite:///./data/gistbook.db")
        await store.initialize()
        row = await store.query_one(select(subjects).where(subjects.c.id == 1))
        await store.shutdown()

    Statements may be SQLAlchemy Core constructs or plain SQL strings
    (wrapped in text(), using :named parameters).

    Errors:
        Any SQLAlchemyError is re-raised as StoreError with the original
        message in its context. Integrity violations are raised as the
        ConstraintViolationError subclass so callers can translate them.
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        url = make_url(database_url)
        self._sqlite_path: Optional[Path] = None
        connect_args: Dict[str, Any] = {}
        if url.get_backend_name() == "sqlite":
            # Wait for the writer lock instead of failing immediately
            connect_args["timeout"] = 15
            if url.database and url.database != ":memory:":
                self._sqlite_path = Path(url.database)
        self._engine: AsyncEngine = create_async_engine(
            database_url,
            echo=echo,
            connect_args=connect_args,
        )
        if url.get_backend_name() == "sqlite":
            event.listen(self._engine.sync_engine, "connect", _register_sql_functions)

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    # ── Lifecycle ─────────────────────────────────────────────────────────

    async def initialize(self) -> None:
        """
        Ensure the schema exists and seed default subjects on first run.

        Steps (strictly ordered, single outcome):
            1. Create the SQLite file's parent directory if missing
            2. CREATE TABLE IF NOT EXISTS for snippets and subjects
            3. In one transaction: count subjects, insert DEFAULT_SUBJECTS if 0

        Raises:
            StoreError: the database could not be opened or written
        """
        # Importing the models registers both tables on Base.metadata
        from gistbook.models import Subject

        if self._sqlite_path is not None:
            self._sqlite_path.parent.mkdir(parents=True, exist_ok=True)

        subjects = Subject.__table__
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
                count = (
                    await conn.execute(select(func.count()).select_from(subjects))
                ).scalar_one()
                if count == 0:
                    await conn.execute(
                        insert(subjects),
                        [{"name": name} for name in DEFAULT_SUBJECTS],
                    )
                    logger.info("No subjects found, seeded %d defaults", len(DEFAULT_SUBJECTS))
        except SQLAlchemyError as e:
            raise StoreError(
                message="Could not initialize the database.",
                context={"original_error": str(e), "database_url": self._safe_url()},
            ) from e

        logger.info("Record store ready: %s", self._safe_url())

    async def shutdown(self) -> None:
        """Close all pooled connections."""
        await self._engine.dispose()
        logger.info("Record store closed")

    async def ping(self) -> bool:
        """Lightweight connectivity check used by GET /health."""
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning("Database ping failed: %s", str(e))
            return False

    # ── Primitives ────────────────────────────────────────────────────────

    async def execute(self, statement: Statement, params: Params = None) -> ExecuteResult:
        """
        Run a mutating statement (INSERT/UPDATE/DELETE) in its own transaction.

        Returns:
            ExecuteResult with the new primary key (single-row Core inserts
            only, otherwise None) and the number of rows affected.
        """
        stmt = _coerce(statement)
        many = isinstance(params, (list, tuple))
        try:
            async with self._engine.begin() as conn:
                result = await conn.execute(stmt, params)
                inserted_id = None
                if result.is_insert and not many:
                    inserted_id = result.inserted_primary_key[0]
                return ExecuteResult(inserted_id=inserted_id, rows_affected=result.rowcount)
        except IntegrityError as e:
            raise ConstraintViolationError(
                message="The change violates a database constraint.",
                context={"original_error": str(e.orig)},
            ) from e
        except SQLAlchemyError as e:
            raise StoreError(context={"original_error": str(e)}) from e

    async def query_one(self, statement: Statement, params: Params = None) -> Optional[Dict[str, Any]]:
        """Return the first row as a dict, or None when nothing matches."""
        try:
            async with self._engine.connect() as conn:
                result = await conn.execute(_coerce(statement), params)
                row = result.mappings().first()
        except SQLAlchemyError as e:
            raise StoreError(context={"original_error": str(e)}) from e
        return dict(row) if row is not None else None

    async def query_many(self, statement: Statement, params: Params = None) -> List[Dict[str, Any]]:
        """Return every matching row as a list of dicts."""
        try:
            async with self._engine.connect() as conn:
                result = await conn.execute(_coerce(statement), params)
                rows = result.mappings().all()
        except SQLAlchemyError as e:
            raise StoreError(context={"original_error": str(e)}) from e
        return [dict(row) for row in rows]

    def _safe_url(self) -> str:
        return make_url(self.database_url).render_as_string(hide_password=True)


def _register_sql_functions(dbapi_connection, connection_record) -> None:
    # Index expressions only accept deterministic functions
    dbapi_connection.create_function("fold", 1, fold_case, deterministic=True)


def _coerce(statement: Statement) -> Executable:
    if isinstance(statement, str):
        return text(statement)
    return statement


# ── FastAPI Dependency ────────────────────────────────────────────────────
def get_store(request: Request) -> RecordStore:
    """
    Provide the application's RecordStore to a route handler.

    Example usage in a route:
        @router.get("/snippets")
        async def list_snippets(store: RecordStore = Depends(get_store)):
            return await snippet_service.list_snippets(store)
    """
    return request.app.state.store
