"""
Upload Pipeline

Turns a user-selected image into a public URL, strictly in order:

1. Type check (image/* only)          -> InvalidFileType, no network call
2. Size check (<= 5 MiB by default)   -> FileTooLarge, no network call
3. Storage key: nanosecond timestamp + filename with whitespace removed
4. Upload with overwrite allowed      -> UploadError on any storage failure
5. Public URL for the key

The caller merges the URL into its entity payload and only then writes the
row, so a row never points at an object that failed to upload.
"""

import re
import time
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Optional

from loguru import logger

from caterdesk.errors import CaterDeskException, FileTooLarge, InvalidFileType, UploadError
from caterdesk.storage.gateway import BlobStore


MAX_UPLOAD_BYTES = 5 * 1024 * 1024  # 5 MiB
IMAGE_MIME_PREFIX = "image/"

MENU_IMAGES_BUCKET = "menu-images"
ADMIN_AVATARS_BUCKET = "admin-avatars"

_WHITESPACE = re.compile(r"\s+")


@dataclass
class UploadedFile:
    """A file picked in a form."""
    filename: str
    content_type: Optional[str]
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


def derive_key(filename: str, timestamp_ns: Optional[int] = None) -> str:
    """Build a collision-resistant storage key for ``filename``."""
    if timestamp_ns is None:
        timestamp_ns = time.time_ns()
    name = PurePosixPath((filename or "").replace("\\", "/")).name
    name = _WHITESPACE.sub("", name) or "upload"
    return f"{timestamp_ns}_{name}"


class UploadPipeline:
    """
    Validate, upload and resolve one image.

    Usage:
        pipeline = UploadPipeline(LocalBlobStore("./data/media"))
        url = await pipeline.run(file, MENU_IMAGES_BUCKET)
    """

    def __init__(self, blob_store: BlobStore, max_bytes: int = MAX_UPLOAD_BYTES):
        self.blob_store = blob_store
        self.max_bytes = max_bytes

    def validate(self, file: UploadedFile) -> None:
        content_type = (file.content_type or "").lower()
        if not content_type.startswith(IMAGE_MIME_PREFIX):
            raise InvalidFileType(file.content_type)
        if file.size > self.max_bytes:
            raise FileTooLarge(file.size, self.max_bytes)

    async def run(self, file: UploadedFile, bucket: str) -> str:
        """
        Upload ``file`` into ``bucket``.

        Returns:
            Public URL of the stored object.

        Raises:
            InvalidFileType, FileTooLarge: Before any network call.
            UploadError: Storage failed.
        """
        self.validate(file)

        key = derive_key(file.filename)
        try:
            await self.blob_store.upload(
                bucket,
                key,
                file.data,
                content_type=file.content_type,
                overwrite=True,
            )
        except CaterDeskException as e:
            raise UploadError(e.detail or e.message) from e
        except Exception as e:
            logger.exception(f"Upload of {file.filename} to {bucket} failed")
            raise UploadError(str(e) or type(e).__name__) from e

        url = self.blob_store.get_public_url(bucket, key)
        logger.info(f"Uploaded {file.filename} -> {bucket}/{key} ({file.size // 1024}KB)")
        return url
