"""Pydantic schemas for the ExamPrep API."""

from examprep.schemas.common import (
    ErrorResponse,
    ErrorResponseWithDetails,
    HealthResponse,
)

__all__ = [
    "ErrorResponse",
    "ErrorResponseWithDetails",
    "HealthResponse",
]
