"""
Gistbook Backend - Snippet Route Handlers
=========================================

What:  HTTP surface for snippets. There are no update or delete endpoints;
       snippets are immutable once created.
"""

from typing import Any, List

from fastapi import APIRouter, Body, Depends, status

from gistbook.database import RecordStore, get_store
from gistbook.schemas.common import ErrorResponse, read_body
from gistbook.schemas.snippet import SnippetCreate, SnippetRef, SnippetResponse
from gistbook.services.snippet_service import snippet_service

router = APIRouter(prefix="/api", tags=["Snippets"])


@router.get(
    "/snippets",
    response_model=List[SnippetResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List all snippets, newest first",
)
async def list_snippets(store: RecordStore = Depends(get_store)) -> List[SnippetResponse]:
    return await snippet_service.list_snippets(store)


@router.get(
    "/snippets/by-subject/{subject_name:path}",
    response_model=List[SnippetRef],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="Ids of the snippets filed under a subject",
    description=(
        "Returns `[{id}]` for every snippet whose category matches the subject "
        "name ignoring case. The name may contain `/` (sent as `%2F`). Clients "
        "use it to warn before deleting a subject."
    ),
)
async def list_snippets_by_subject(
    subject_name: str,
    store: RecordStore = Depends(get_store),
) -> List[SnippetRef]:
    return await snippet_service.list_snippets_by_subject(store, subject_name)


@router.post(
    "/snippets",
    response_model=SnippetResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Missing title, category or content", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a snippet",
    openapi_extra={"requestBody": {"content": {"application/json": {"schema": SnippetCreate.model_json_schema()}}}},
)
async def create_snippet(
    body: Any = Body(default=None),
    store: RecordStore = Depends(get_store),
) -> SnippetResponse:
    """
    Create a snippet and return the stored row, including the id and the
    created_at value exactly as persisted.
    """
    payload = read_body(SnippetCreate, body)
    return await snippet_service.create_snippet(
        store,
        title=payload.title,
        category=payload.category,
        content=payload.content,
    )


@router.get(
    "/snippets/{snippet_id}",
    response_model=SnippetResponse,
    responses={
        404: {"description": "Snippet not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a single snippet by ID",
)
async def get_snippet(
    snippet_id: int,
    store: RecordStore = Depends(get_store),
) -> SnippetResponse:
    return await snippet_service.get_snippet(store, snippet_id)
