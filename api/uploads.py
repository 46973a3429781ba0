"""
Attachment uploads — type/size filter and on-disk storage.

Files land in a single directory as ``<field>-<epoch ms>-<random><ext>``
and the relative path (``uploads/...``) is what gets stored on the
account and served back by the static mount.
"""

from __future__ import annotations

import logging
import pathlib
import random
import time

import aiofiles
from fastapi import UploadFile

from utils.errors import ValidationError

logger = logging.getLogger(__name__)

# Stored references are relative to the static mount, independent of
# where the directory lives on disk.
URL_PREFIX = "uploads"

PROFILE_PICTURE_FIELD = "profilePicture"
RESUME_FIELD = "resume"

RESUME_CONTENT_TYPES = frozenset({
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
})


def check_content_type(field: str, content_type: str | None) -> None:
    """Raise ``ValidationError`` if ``content_type`` is not allowed for ``field``."""
    content_type = (content_type or "").lower()
    if field == PROFILE_PICTURE_FIELD:
        if not content_type.startswith("image/"):
            raise ValidationError("Only image files are allowed for profile picture!")
    elif field == RESUME_FIELD:
        if content_type not in RESUME_CONTENT_TYPES:
            raise ValidationError("Only PDF, DOC, and DOCX files are allowed for resume!")


class UploadStorage:
    def __init__(self, directory: str | pathlib.Path, max_bytes: int) -> None:
        self.directory = pathlib.Path(directory)
        self.max_bytes = max_bytes

    def ensure_directory(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    async def validate(self, field: str, upload: UploadFile) -> bytes:
        """Check type and size of ``upload``; return its content."""
        check_content_type(field, upload.content_type)
        content = await upload.read(self.max_bytes + 1)
        if len(content) > self.max_bytes:
            limit_mb = self.max_bytes / (1024 * 1024)
            raise ValidationError(f"File too large. Maximum size is {limit_mb:g}MB")
        return content

    def _filename(self, field: str, original: str | None) -> str:
        suffix = pathlib.Path(original or "").suffix.lower()
        stamp = int(time.time() * 1000)
        return f"{field}-{stamp}-{random.randint(0, 999_999_999)}{suffix}"

    async def save(self, field: str, upload: UploadFile, content: bytes) -> str:
        """Write ``content`` to disk and return the stored path reference."""
        self.ensure_directory()
        path = self.directory / self._filename(field, upload.filename)
        async with aiofiles.open(path, "wb") as out_file:
            await out_file.write(content)
        logger.info("Stored %s upload at %s (%d bytes)", field, path, len(content))
        return f"{URL_PREFIX}/{path.name}"

    def path_for(self, reference: str) -> pathlib.Path:
        return self.directory / pathlib.PurePosixPath(reference).name

    def discard(self, stored_path: str) -> None:
        """Remove a stored file whose account write did not happen."""
        try:
            self.path_for(stored_path).unlink(missing_ok=True)
            logger.warning("Discarded orphaned upload %s", stored_path)
        except OSError as exc:
            logger.error("Could not remove orphaned upload %s: %s", stored_path, exc)
