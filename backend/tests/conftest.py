"""
Gistbook - Test Configuration (conftest.py)
===========================================

Shared pytest fixtures for the test suite.

Fixtures (function-scoped, created fresh for each test):
    ├── store:          RecordStore on a temporary SQLite file, initialized
    ├── mock_store:     AsyncMock with the RecordStore interface
    ├── app:            FastAPI app serving `store`
    ├── test_client:    HTTPX AsyncClient talking to `app` in-process
    └── sample_snippet: Valid snippet payload
"""

import os

# Set before gistbook.config is imported anywhere
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./data/unused-by-tests.db"

from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from gistbook.database import RecordStore


@pytest_asyncio.fixture
async def store(tmp_path):
    """
    A real store on a fresh database file.

    initialize() has run, so the five default subjects are present.
    """
    record_store = RecordStore(f"sqlite+aiosqlite:///{tmp_path / 'gistbook.db'}")
    await record_store.initialize()
    yield record_store
    await record_store.shutdown()


@pytest.fixture
def mock_store():
    """
    A RecordStore stand-in for error-path tests.

    Usage:
        mock_store.query_many.side_effect = StoreError()
        await snippet_service.list_snippets(mock_store)
    """
    return AsyncMock(spec=RecordStore)


@pytest.fixture
def app(store):
    from gistbook.main import create_app
    return create_app(store=store)


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient routed straight into the app through ASGITransport.

    The ASGI lifespan does not run here; the `store` fixture has already
    initialized the database.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def sample_snippet():
    return {
        "title": "Hello world",
        "category": "sub1",
        "content": 'print("hello")\n',
    }
