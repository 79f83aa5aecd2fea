"""Pydantic schemas for media file endpoints."""

from pydantic import BaseModel, Field


class UploadUrlResponse(BaseModel):
    """Short-lived URL that accepts a media upload."""

    upload_url: str = Field(..., description="POST the file here as multipart form")


class FileUploadResponse(BaseModel):
    """Response model for a stored media blob."""

    storage_id: str = Field(..., description="Opaque id to store on records")


class FileUrlResponse(BaseModel):
    """Public URL of a stored blob, or null if it does not exist."""

    url: str | None = None


class FileMetadataResponse(BaseModel):
    """Metadata about a stored blob."""

    storage_id: str
    url: str | None = None
