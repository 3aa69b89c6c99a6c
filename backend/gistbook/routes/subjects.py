"""
Gistbook Backend - Subject Route Handlers
=========================================

What:  HTTP surface for subjects: list, create, delete. Subjects cannot be
       renamed.
"""

from typing import Any, List

from fastapi import APIRouter, Body, Depends, status

from gistbook.database import RecordStore, get_store
from gistbook.schemas.common import ErrorResponse, read_body
from gistbook.schemas.subject import MessageResponse, SubjectCreate, SubjectResponse
from gistbook.services.subject_service import subject_service

router = APIRouter(prefix="/api", tags=["Subjects"])


@router.get(
    "/subjects",
    response_model=List[SubjectResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List subjects sorted by name",
)
async def list_subjects(store: RecordStore = Depends(get_store)) -> List[SubjectResponse]:
    return await subject_service.list_subjects(store)


@router.post(
    "/subjects",
    response_model=SubjectResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Missing or blank name", "model": ErrorResponse},
        409: {"description": "Name already exists (case-insensitive)", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a subject",
    openapi_extra={"requestBody": {"content": {"application/json": {"schema": SubjectCreate.model_json_schema()}}}},
)
async def create_subject(
    body: Any = Body(default=None),
    store: RecordStore = Depends(get_store),
) -> SubjectResponse:
    payload = read_body(SubjectCreate, body)
    return await subject_service.create_subject(store, payload.name)


@router.delete(
    "/subjects/{subject_id}",
    response_model=MessageResponse,
    responses={
        404: {"description": "Subject not found", "model": ErrorResponse},
        409: {"description": "Snippets still refer to the subject", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a subject that no snippet refers to",
    description=(
        "The reference check and the delete run as one statement. If snippets "
        "still refer to the subject the response is 409 and the message states "
        "how many."
    ),
)
async def delete_subject(
    subject_id: int,
    store: RecordStore = Depends(get_store),
) -> MessageResponse:
    message = await subject_service.delete_subject(store, subject_id)
    return MessageResponse(message=message)
