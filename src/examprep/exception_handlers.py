"""Exception handlers for FastAPI application."""

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from examprep.exceptions import (
    ConflictError,
    DomainValidationError,
    ExamPrepException,
    ForbiddenError,
    NotFoundError,
    ReferentialIntegrityError,
    UnauthenticatedError,
)

_STATUS_BY_EXCEPTION: dict[type[ExamPrepException], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    DomainValidationError: status.HTTP_400_BAD_REQUEST,
    ConflictError: status.HTTP_409_CONFLICT,
    ReferentialIntegrityError: status.HTTP_409_CONFLICT,
    UnauthenticatedError: status.HTTP_401_UNAUTHORIZED,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
}


def get_request_id(request: Request) -> str | None:
    """Extract request_id from request state if available."""
    return getattr(request.state, "request_id", None)


async def examprep_exception_handler(
    request: Request,
    exc: ExamPrepException,
) -> JSONResponse:
    """Handle custom ExamPrep exceptions."""
    status_code = _STATUS_BY_EXCEPTION.get(
        type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR
    )

    headers = None
    if isinstance(exc, UnauthenticatedError):
        headers = {"WWW-Authenticate": "Bearer"}

    return JSONResponse(
        status_code=status_code,
        content={
            "detail": exc.message,
            "error_code": exc.error_code,
            "request_id": get_request_id(request),
            **exc.details,
        },
        headers=headers,
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Handle Pydantic validation errors."""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": "Validation error",
            "error_code": "VALIDATION_ERROR",
            "request_id": get_request_id(request),
            "errors": jsonable_encoder(exc.errors()),
        },
    )


async def generic_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.opt(exception=exc).error(
        "Unhandled exception",
        request_id=get_request_id(request),
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Internal server error",
            "error_code": "INTERNAL_ERROR",
            "request_id": get_request_id(request),
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the app."""
    app.add_exception_handler(ExamPrepException, examprep_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
