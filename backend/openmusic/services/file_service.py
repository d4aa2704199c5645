"""
OpenMusic API — Cover Storage Service
======================================

What:  Validates, stores and cleans up uploaded album cover images.
How:   Checks extension, size and sniffed MIME type, then writes the bytes
       into a date-organized directory under a UUID filename.
Who:   Called by AlbumsService.upload_cover; files are served back by
       routes/uploads.py.

Validation order (cheapest first):
    1. Extension check:  rejects obviously wrong files without reading content
    2. Size check:       Content-Length header, then actual byte count
    3. MIME check:       libmagic inspects the header bytes (catches renamed files)
    4. Store:            UUID filename, so no user input reaches the file system
"""

import logging
import os
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Tuple

import aiofiles

from openmusic.config import settings
from openmusic.exceptions import ValidationError, FileStorageError

logger = logging.getLogger(__name__)

# ── Allowed File Types ────────────────────────────────────────────────────
ALLOWED_MIME_TYPES = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/gif": ".gif",
    "image/webp": ".webp",
}

ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp"}


class FileService:
    """
    Manages cover upload validation and storage lifecycle.

    Directory Structure:
        storage/
        └── 2024/
            └── 01/
                └── 15/
                    ├── a1b2c3d4-5678.jpg
                    └── e5f6g7h8-9012.png
    """

    def __init__(self, storage_root: Optional[str] = None):
        """
        Args:
            storage_root: Override the default storage path (used in tests).
                          If None, uses settings.storage_root.
        """
        self.storage_root = Path(storage_root or settings.storage_root).resolve()
        self.storage_root.mkdir(parents=True, exist_ok=True)
        logger.info("FileService initialized with storage_root=%s", self.storage_root)

    def validate_extension(self, filename: str) -> str:
        """
        Returns the normalized extension (lowercase with dot).

        Raises:
            ValidationError if the extension is not allowed.
        """
        ext = Path(filename).suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                message=(
                    f"File type '{ext}' is not supported. "
                    f"Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
                ),
                field="cover",
                context={"extension": ext, "allowed": sorted(ALLOWED_EXTENSIONS)},
            )
        return ext

    def validate_size(self, content_length: Optional[int], actual_size: int) -> None:
        """
        Reject empty files and files larger than settings.max_cover_size.

        Args:
            content_length: Value from the upload's declared size (may be None)
            actual_size: Actual byte count of the uploaded file
        """
        max_kb = settings.max_cover_size / 1024

        if actual_size == 0:
            raise ValidationError(message="Uploaded cover is empty", field="cover")

        if content_length and content_length > settings.max_cover_size:
            raise ValidationError(
                message=f"Cover size exceeds maximum of {max_kb:.0f}KB. Please upload a smaller image.",
                field="cover",
                context={"max_size_kb": max_kb, "reported_size": content_length},
            )

        if actual_size > settings.max_cover_size:
            raise ValidationError(
                message=f"Cover size ({actual_size / 1024:.1f}KB) exceeds maximum of {max_kb:.0f}KB.",
                field="cover",
                context={"max_size_kb": max_kb, "actual_size": actual_size},
            )

    def _detect_mime_type(self, file_content: bytes) -> str:
        """Sniff the MIME type from the header bytes with libmagic."""
        import magic  # needs the libmagic system library; loaded on first upload

        return magic.from_buffer(file_content, mime=True)

    def validate_mime_type(self, file_content: bytes) -> str:
        """
        Validate the actual MIME type by inspecting file content bytes.

        Returns:
            Detected MIME type string (e.g., "image/jpeg")

        Raises:
            ValidationError if the MIME type is not an allowed image type
            FileStorageError if detection itself fails
        """
        try:
            mime_type = self._detect_mime_type(file_content)
        except Exception as e:
            logger.error("MIME type detection failed: %s", str(e))
            raise FileStorageError(
                message="Could not verify file type. Please try again.",
                context={"error": str(e)},
            )

        if mime_type not in ALLOWED_MIME_TYPES:
            raise ValidationError(
                message=(
                    f"File content type '{mime_type}' is not supported. "
                    f"The cover must be a valid image."
                ),
                field="cover",
                context={"detected_mime": mime_type, "allowed": list(ALLOWED_MIME_TYPES.keys())},
            )

        return mime_type

    def _generate_storage_path(self, extension: str) -> Tuple[Path, str]:
        """
        Creates a YYYY/MM/DD/<uuid>.<ext> path.

        Returns: Tuple of (absolute_path, relative_path_from_storage_root).
        """
        now = datetime.now(timezone.utc)
        date_dir = now.strftime("%Y/%m/%d")
        unique_name = f"{uuid.uuid4()}{extension}"

        relative_path = f"{date_dir}/{unique_name}"
        absolute_path = self.storage_root / relative_path

        return absolute_path, relative_path

    async def store_file(self, content: bytes, extension: str) -> Tuple[str, str]:
        """
        Write validated file content to disk with async I/O.

        Returns: Tuple of (absolute_path, relative_path).

        Raises:
            FileStorageError if directory creation or file write fails.
        """
        absolute_path, relative_path = self._generate_storage_path(extension)

        try:
            absolute_path.parent.mkdir(parents=True, exist_ok=True)

            async with aiofiles.open(absolute_path, "wb") as f:
                await f.write(content)

            logger.info("Cover stored: %s (%d bytes)", relative_path, len(content))
            return str(absolute_path), relative_path

        except OSError as e:
            logger.error("Failed to store file at %s: %s", absolute_path, str(e))
            raise FileStorageError(
                message="Failed to save uploaded cover. Please try again.",
                context={"path": str(absolute_path), "os_error": str(e)},
            )

    async def cleanup_file(self, file_path: str) -> None:
        """
        Remove a stored file after a failed follow-up step.

        Best effort: missing files are ignored and OS errors are only logged.
        """
        path = Path(file_path)
        try:
            if path.exists():
                os.remove(path)
                logger.info("Cleaned up file: %s", path.name)
            else:
                logger.debug("Cleanup: file already gone: %s", path.name)
        except OSError as e:
            logger.warning("Failed to clean up file %s: %s", file_path, str(e))

    def resolve_stored_path(self, relative_path: str) -> Path:
        """
        Map a relative path from a cover URL back to a file under storage_root.

        Raises:
            ValidationError: the path escapes storage_root (e.g. ../../etc/passwd)
        """
        full_path = (self.storage_root / relative_path).resolve()
        if not full_path.is_relative_to(self.storage_root):
            raise ValidationError(message="Invalid file path")
        return full_path

    async def validate_and_store(
        self,
        filename: str,
        content: bytes,
        content_length: Optional[int] = None,
    ) -> Tuple[str, str]:
        """
        Complete validation and storage pipeline.

        Returns: Tuple of (absolute_path, relative_path_for_url).
        """
        ext = self.validate_extension(filename)
        self.validate_size(content_length, len(content))
        self.validate_mime_type(content)
        return await self.store_file(content, ext)


# ── Singleton Instance ────────────────────────────────────────────────────
file_service = FileService()
