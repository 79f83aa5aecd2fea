"""Custom exceptions for the ExamPrep application."""

from typing import Any


class ExamPrepException(Exception):
    """Base exception for all ExamPrep errors."""

    def __init__(
        self,
        message: str,
        error_code: str = "INTERNAL_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(message)


class NotFoundError(ExamPrepException):
    """Resource not found."""

    def __init__(
        self,
        resource: str,
        resource_id: Any,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=f"{resource} with id '{resource_id}' not found",
            error_code="NOT_FOUND",
            details={
                "resource": resource,
                "resource_id": str(resource_id),
                **(details or {}),
            },
        )


class DomainValidationError(ExamPrepException):
    """Input validation failed."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details={"field": field, **(details or {})} if field else details,
        )


class ConflictError(ExamPrepException):
    """A uniqueness constraint would be violated."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code="CONFLICT",
            details={"field": field, **(details or {})} if field else details,
        )


class ReferentialIntegrityError(ExamPrepException):
    """Record is still referenced by dependent records."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code="REFERENCED",
            details=details,
        )


class UnauthenticatedError(ExamPrepException):
    """No valid caller identity was presented."""

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message=message, error_code="UNAUTHENTICATED")


class ForbiddenError(ExamPrepException):
    """Caller is authenticated but lacks the required role."""

    def __init__(self, role: str) -> None:
        super().__init__(
            message=f"Role '{role}' is required for this operation",
            error_code="FORBIDDEN",
            details={"required_role": role},
        )
