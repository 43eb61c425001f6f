"""Storage for vendor branding logos."""

import uuid
from pathlib import Path

import aiofiles
from fastapi import HTTPException, UploadFile, status

from invoicebox.config import settings

# The PDF renderer embeds only JPEG and PNG
EXTENSION_MIME_MAP = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
}

# (magic_bytes, stored extension)
LOGO_MAGIC_SIGNATURES = [
    (b"\xff\xd8\xff", ".jpg"),
    (b"\x89PNG\r\n\x1a\n", ".png"),
]


def detect_logo_type(content: bytes) -> str | None:
    """Detect a JPEG or PNG from its leading bytes.

    Returns:
        The extension to store the file under, or None for anything else.
    """
    for magic, ext in LOGO_MAGIC_SIGNATURES:
        if content.startswith(magic):
            return ext
    return None


class LogoStorageService:
    """Validates and stores uploaded logos under the uploads directory."""

    def __init__(
        self,
        storage_path: Path | None = None,
        max_size_bytes: int | None = None,
    ) -> None:
        self.storage_path = storage_path or settings.uploads_dir
        self.storage_path.mkdir(parents=True, exist_ok=True)
        self.max_size_bytes = max_size_bytes or settings.max_logo_size_bytes

    async def save_logo(self, upload_file: UploadFile) -> str:
        """Validate and save an uploaded logo.

        Args:
            upload_file: The uploaded file from FastAPI.

        Returns:
            The stored filename.

        Raises:
            HTTPException: 400 for a wrong type or content, 413 when too large.
        """
        ext = Path(upload_file.filename or "").suffix.lower()
        if ext not in EXTENSION_MIME_MAP:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Only JPG and PNG image files are allowed for logos",
            )

        content = await upload_file.read()
        if len(content) > self.max_size_bytes:
            max_mb = self.max_size_bytes / (1024 * 1024)
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File size exceeds maximum allowed size of {max_mb:.1f} MB",
            )

        detected_ext = detect_logo_type(content)
        if detected_ext is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid {ext.lstrip('.').upper()} file format",
            )

        filename = f"logo-{uuid.uuid4()}{detected_ext}"
        async with aiofiles.open(self.storage_path / filename, "wb") as f:
            await f.write(content)

        return filename

    def get_logo_url(self, filename: str) -> str:
        """Get the URL path a stored logo is served from."""
        return f"/uploads/{filename}"
