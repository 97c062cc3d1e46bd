"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
"""

from uuid import UUID

from pydantic import BaseModel, Field


class UserAccountRequest(BaseModel):
    """Request model for storing or updating an account's username."""

    account_id: UUID = Field(..., description="Opaque account identifier (UUID)")
    username: str = Field("", description="Requested username (6-30 alphanumeric characters)")


class UserAccountResponse(BaseModel):
    """Response model for store and update operations."""

    success: bool
    message: str
    account_id: UUID | None = None
    username: str | None = None
    errors: list[str] = Field(default_factory=list)


class UsernameValidationResponse(BaseModel):
    """Response model for username validation."""

    is_valid: bool
    message: str
    errors: list[str] = Field(default_factory=list)


class AvailabilityResponse(BaseModel):
    """Response model for username availability checks."""

    available: bool
    username: str


class AccountExistsResponse(BaseModel):
    """Response model for account registration checks."""

    exists: bool
    account_id: UUID


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
