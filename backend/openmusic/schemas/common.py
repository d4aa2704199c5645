"""
OpenMusic API — Shared Pydantic Schemas
========================================

What:  Base model, success envelopes and error/health models used by every resource.
How:   CamelModel maps snake_case attributes to the camelCase keys of the public
       contract (albumId, songId, coverUrl…). FastAPI serializes response models
       by alias, and request bodies accept either spelling.

Success envelope:
    {"status": "success", "data": {...}}       ← DataResponse[T]
    {"status": "success", "message": "..."}    ← MessageResponse
"""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    """Base for every request/response body of the public API."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class DataResponse(BaseModel, Generic[DataT]):
    """Success envelope carrying a payload."""
    status: str = Field(default="success")
    data: DataT


class MessageResponse(BaseModel):
    """Success envelope carrying only a human-readable message."""
    status: str = Field(default="success")
    message: str


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "playlist with ID 'playlist-xyz' was not found",
            "request_id": "1a2b3c4d"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and database status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
