"""Common DTOs for API responses and error handling."""
from __future__ import annotations

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response model."""
    detail: str = Field(..., description="Short user-facing message describing what went wrong")
    kind: str = Field(
        ...,
        description="Error category: validation, conflict, auth, forbidden, not_found or store_error",
        examples=["forbidden"],
    )


class DeleteResponse(BaseModel):
    """Response model for deletions."""
    ok: bool = Field(True, description="True when a record was removed")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Health status", examples=["healthy"])


class RootResponse(BaseModel):
    """Root endpoint response model."""
    status: str = Field(..., description="API status", examples=["ok"])
    service: str = Field(..., description="Service name", examples=["lfgboard-backend"])
    version: str = Field(..., description="API version", examples=["0.1.0"])
