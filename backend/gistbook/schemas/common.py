"""
Gistbook Backend - Shared Response Schemas
==========================================

Error and health payloads shared by every router, and the request-body
reader used by the POST endpoints.
"""

from typing import Any, Optional, Type, TypeVar

from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


class ErrorResponse(BaseModel):
    """
    What:  Standardized error body for all API errors.

    Fields:
        error: Machine-readable error code (e.g., "missing_field", "duplicate_name")
        message: Human-readable description, shown to users as-is
        details: Optional extra context (e.g., which field was missing)
        request_id: Correlation ID for tracing this error in server logs

    Example:
        {
            "error": "subject_in_use",
            "message": "Cannot delete subject 'Rust'. It still has 1 associated gist(s). ...",
            "details": {"name": "Rust", "snippet_count": 1},
            "request_id": "1f2e3d4c"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")


def read_body(model: Type[ModelT], body: Any) -> ModelT:
    """
    Read a decoded JSON body into `model`.

    An absent body, or one that is not a JSON object, reads as an object
    with every field missing, so the service answers 400 `missing_field`.
    A field of the wrong type is still reported as FastAPI's 422.
    """
    if not isinstance(body, dict):
        return model()
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False), body=body) from e
