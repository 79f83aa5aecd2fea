"""Media file endpoints."""

from fastapi import APIRouter, Depends, UploadFile, status
from fastapi.responses import FileResponse
from loguru import logger

from examprep.auth import require_admin
from examprep.exceptions import NotFoundError
from examprep.schemas import ErrorResponse
from examprep.schemas.file import (
    FileMetadataResponse,
    FileUploadResponse,
    FileUrlResponse,
    UploadUrlResponse,
)
from examprep.services.storage import FileStorageService

router = APIRouter(
    prefix="/files",
    tags=["Files"],
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)


@router.post(
    "/upload-url",
    response_model=UploadUrlResponse,
    summary="Issue an upload URL",
    description="POST the file to the returned URL to receive its storage id.",
    dependencies=[Depends(require_admin)],
)
async def generate_upload_url() -> UploadUrlResponse:
    """Issue a short-lived media upload URL."""
    return UploadUrlResponse(upload_url=FileStorageService().generate_upload_url())


@router.post(
    "/upload/{token}",
    response_model=FileUploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a media file",
)
async def upload_file(token: str, file: UploadFile) -> FileUploadResponse:
    """Store an uploaded file and return its storage id."""
    storage_service = FileStorageService()
    storage_service.verify_upload_token(token)

    storage_id = await storage_service.save_blob(file)
    logger.info(
        "Media file stored",
        storage_id=storage_id,
        content_type=file.content_type,
    )
    return FileUploadResponse(storage_id=storage_id)


@router.get(
    "/{storage_id}/url",
    response_model=FileUrlResponse,
    summary="Get the URL of a stored file",
)
async def get_file_url(storage_id: str) -> FileUrlResponse:
    """Return the file URL, or null if the file does not exist."""
    return FileUrlResponse(url=FileStorageService().get_url(storage_id))


@router.get(
    "/{storage_id}/metadata",
    response_model=FileMetadataResponse,
    summary="Get metadata of a stored file",
)
async def get_file_metadata(storage_id: str) -> FileMetadataResponse:
    """Return the storage id and URL of a file."""
    return FileMetadataResponse(**FileStorageService().get_metadata(storage_id))


@router.get(
    "/{storage_id}",
    response_class=FileResponse,
    summary="Download a stored file",
)
async def download_file(storage_id: str) -> FileResponse:
    """Stream a stored file."""
    path = FileStorageService().get_path(storage_id)
    if path is None:
        raise NotFoundError(resource="File", resource_id=storage_id)
    return FileResponse(path)


@router.delete(
    "/{storage_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a stored file",
    description="Only delete files no category, question or answer still refers to.",
    dependencies=[Depends(require_admin)],
)
async def delete_file(storage_id: str) -> None:
    """Delete a stored file."""
    FileStorageService().delete(storage_id)
    logger.info("Media file deleted", storage_id=storage_id)
