"""File storage service for question and category media."""

import re
import uuid
from datetime import UTC, datetime, timedelta
from pathlib import Path

import aiofiles
import jwt
from fastapi import UploadFile

from examprep.config import settings
from examprep.exceptions import DomainValidationError, UnauthenticatedError

ALLOWED_CONTENT_PREFIXES = ("image/", "audio/", "video/")
UPLOAD_TOKEN_PURPOSE = "media-upload"
UPLOAD_TOKEN_TTL_MINUTES = 10

_STORAGE_ID_PATTERN = re.compile(r"^[0-9a-f]{32}(\.[a-z0-9]{1,10})?$")


class FileStorageService:
    """Store media blobs on local disk under opaque storage ids."""

    def __init__(
        self,
        upload_dir: str | None = None,
        base_url: str | None = None,
    ) -> None:
        self.upload_dir = Path(upload_dir or settings.upload_dir)
        self.base_url = (base_url or settings.public_base_url).rstrip("/")

    def generate_upload_url(self) -> str:
        """Return a short-lived signed URL that accepts media uploads."""
        now = datetime.now(UTC)
        token = jwt.encode(
            {
                "purpose": UPLOAD_TOKEN_PURPOSE,
                "jti": uuid.uuid4().hex,
                "exp": int(
                    (now + timedelta(minutes=UPLOAD_TOKEN_TTL_MINUTES)).timestamp()
                ),
            },
            settings.auth_secret_key,
            algorithm=settings.auth_algorithm,
        )
        return f"{self.base_url}/api/files/upload/{token}"

    def verify_upload_token(self, token: str) -> None:
        """Check that an upload token was issued here and has not expired."""
        try:
            payload = jwt.decode(
                token,
                settings.auth_secret_key,
                algorithms=[settings.auth_algorithm],
            )
        except jwt.PyJWTError as e:
            raise UnauthenticatedError("Invalid or expired upload URL") from e
        if payload.get("purpose") != UPLOAD_TOKEN_PURPOSE:
            raise UnauthenticatedError("Invalid or expired upload URL")

    async def save_blob(self, file: UploadFile) -> str:
        """
        Save an uploaded media file.

        Returns:
            The storage id of the saved blob

        Raises:
            DomainValidationError: If file type or size is invalid
        """
        self._validate_content_type(file)

        self.upload_dir.mkdir(parents=True, exist_ok=True)

        storage_id = self._generate_storage_id(file.filename or "")
        file_path = self.upload_dir / storage_id

        file_size = await self._write_file(file, file_path)
        if file_size > settings.max_upload_size_bytes:
            file_path.unlink(missing_ok=True)
            raise DomainValidationError(
                message=f"File size exceeds maximum of {settings.max_upload_size_mb}MB",
                field="file",
                details={
                    "size_bytes": file_size,
                    "max_bytes": settings.max_upload_size_bytes,
                },
            )

        return storage_id

    def get_path(self, storage_id: str) -> Path | None:
        """Return the on-disk path of a blob, or None if it does not exist."""
        if not _STORAGE_ID_PATTERN.match(storage_id):
            return None
        path = self.upload_dir / storage_id
        return path if path.is_file() else None

    def get_url(self, storage_id: str) -> str | None:
        """Return the public URL of a blob, or None if it does not exist."""
        if self.get_path(storage_id) is None:
            return None
        return f"{self.base_url}/api/files/{storage_id}"

    def get_metadata(self, storage_id: str) -> dict[str, str | None]:
        """Return the storage id and public URL of a blob."""
        return {"storage_id": storage_id, "url": self.get_url(storage_id)}

    def delete(self, storage_id: str) -> None:
        """Delete a blob. Deleting a missing blob is a no-op."""
        path = self.get_path(storage_id)
        if path is not None:
            path.unlink()

    def _validate_content_type(self, file: UploadFile) -> None:
        """Validate that the uploaded file is an image, audio or video file."""
        content_type = file.content_type or ""
        if not content_type.startswith(ALLOWED_CONTENT_PREFIXES):
            raise DomainValidationError(
                message="Only image, audio and video files are allowed",
                field="file",
                details={"content_type": content_type},
            )

    def _generate_storage_id(self, original_filename: str) -> str:
        """Generate an opaque storage id preserving the original extension."""
        extension = Path(original_filename).suffix.lower()
        if not re.fullmatch(r"\.[a-z0-9]{1,10}", extension):
            extension = ""
        return f"{uuid.uuid4().hex}{extension}"

    async def _write_file(self, file: UploadFile, file_path: Path) -> int:
        """Write uploaded file to disk and return size."""
        total_size = 0
        async with aiofiles.open(file_path, "wb") as out_file:
            while chunk := await file.read(1024 * 1024):
                await out_file.write(chunk)
                total_size += len(chunk)
        return total_size
