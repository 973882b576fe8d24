"""Picture Asset Manager — resolves picture inputs to stored paths and removes replaced assets.

Invariants:
    - A string source must be "" or an existing file under the public directory
    - An UploadedFile is copied to <pictures_subdir>/<filename>.<ext>, where ext is
      the mimetype subtype, and its temporary file is deleted afterwards
    - Returned paths are relative to the public directory
    - discard() is only called after the owning record update is persisted;
      its failure never rolls that update back
    - An upload stored for a record write that fails is removed again
      (release_upload); path sources are never removed on failure

Design Decisions:
    - Filesystem failures wrapped as AssetWriteError / AssetCleanupError with the
      OSError chained, so the HTTP layer reports them and logs keep the cause
"""

import logging
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Union

from app.core.errors import (
    AssetCleanupError, AssetWriteError, ErrorContext, InputValidationError,
)
from app.core.repository_protocols import AssetStore
from app.core.validation import validate_picture_location

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadedFile:
    """Descriptor of a file already received by the upload middleware."""
    path: str
    mimetype: str
    filename: str


PictureSource = Union[str, UploadedFile]


class PictureAssetManager:
    """Coordinates picture files with the records that point at them."""

    def __init__(self, assets: AssetStore, pictures_subdir: str = "pictures"):
        self.assets = assets
        self.pictures_subdir = pictures_subdir.strip("/")

    async def resolve(
        self, source: PictureSource | None, field: str = "pictureLocation",
    ) -> str:
        """Return the stored location for a path string or an upload descriptor."""
        if isinstance(source, UploadedFile):
            return await self.store_upload(source)
        location = validate_picture_location(source, field)
        if location and not await self.assets.exists(location):
            raise InputValidationError(f"{field}: file {location} does not exist", field)
        return location

    async def store_upload(self, upload: UploadedFile) -> str:
        try:
            data = await self.assets.read_bytes(upload.path)
            _, _, extension = upload.mimetype.partition("/")
            if not extension:
                raise ValueError(f"cannot derive extension from mimetype '{upload.mimetype}'")
            name = f"{PurePosixPath(upload.filename).name}.{extension}"
            location = f"{self.pictures_subdir}/{name}"
            await self.assets.write_bytes(location, data)
            await self.assets.delete(upload.path)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to store upload {upload.filename}: {e}")
            raise AssetWriteError(str(e)) from e
        logger.info(f"Stored picture at {location}")
        return location

    async def discard(self, location: str, context: ErrorContext | None = None) -> None:
        try:
            await self.assets.delete(location)
        except OSError as e:
            logger.error(
                f"Failed to delete old picture {location}: {e}",
                extra={"user_id": context.user_id if context else None},
            )
            raise AssetCleanupError(location, context) from e

    async def release_upload(self, source: PictureSource | None, location: str) -> None:
        """Remove a file store_upload just wrote for a record write that then failed.

        Path sources are left alone: they name files other records may use.
        Runs on an error path, so a failed delete is logged and the caller's
        original error keeps propagating.
        """
        if not isinstance(source, UploadedFile) or not location:
            return
        try:
            await self.assets.delete(location)
        except OSError as e:
            logger.error(f"Failed to remove unused upload {location}: {e}")
