"""Pydantic schemas for category endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class CategoryCreateRequest(BaseModel):
    """Request model for creating a category."""

    name: str = Field(..., min_length=1, max_length=255, examples=["Cardiology"])
    slug: str = Field(
        ...,
        min_length=1,
        max_length=255,
        pattern=SLUG_PATTERN,
        examples=["cardiology"],
    )
    description: str | None = Field(None, description="Category description")
    color: str | None = Field(None, max_length=32, description="UI color hex code")
    icon_ref: str | None = Field(None, description="Storage id of the category icon")


class CategoryUpdateRequest(BaseModel):
    """Request model for partially updating a category."""

    name: str | None = Field(None, min_length=1, max_length=255)
    slug: str | None = Field(None, min_length=1, max_length=255, pattern=SLUG_PATTERN)
    description: str | None = None
    color: str | None = Field(None, max_length=32)
    icon_ref: str | None = None

    @field_validator("name", "slug", mode="before")
    @classmethod
    def reject_null(cls, v: str | None) -> str:
        """Required columns may be omitted but not cleared."""
        if v is None:
            raise ValueError("field cannot be null")
        return v


class CategoryResponse(BaseModel):
    """Response model for a category."""

    id: int = Field(..., description="Category ID")
    name: str = Field(..., description="Display name")
    slug: str = Field(..., description="Unique URL-safe identifier")
    description: str | None = None
    color: str | None = None
    icon_ref: str | None = None
    created_at: datetime = Field(..., description="Creation timestamp")

    model_config = {"from_attributes": True}


class CategoryWithStatsResponse(CategoryResponse):
    """Category annotated with its number of active questions."""

    question_count: int = Field(..., ge=0, description="Active questions in category")
