"""Pydantic schemas for user and role endpoints."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class UserSyncRequest(BaseModel):
    """Request model for get-or-create of the caller's user record."""

    display_name: str | None = Field(None, max_length=255)


class UserCreateRequest(BaseModel):
    """Request model for creating a user explicitly."""

    external_id: str = Field(..., min_length=1, max_length=255)
    display_name: str = Field(..., max_length=255)
    roles: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] | None = None


class UserUpdateRequest(BaseModel):
    """Request model for replacing a user's name, roles and metadata."""

    display_name: str = Field(..., max_length=255)
    roles: list[str]
    metadata: dict[str, Any] | None = None


class RoleRequest(BaseModel):
    """Request model naming a role."""

    role: str = Field(..., min_length=1, max_length=64, examples=["admin"])


class MetadataUpdateRequest(BaseModel):
    """Request model for replacing a user's metadata bag."""

    metadata: dict[str, Any] | None


class RoleCheckResponse(BaseModel):
    """Response model for a role membership check."""

    external_id: str
    role: str
    has_role: bool


class UserResponse(BaseModel):
    """Response model for a user."""

    id: int
    external_id: str
    display_name: str
    roles: list[str]
    is_admin: bool
    # read from the ORM attribute, serialized as "metadata"
    metadata: dict[str, Any] | None = Field(None, validation_alias="user_metadata")
    created_at: datetime

    model_config = {"from_attributes": True}
