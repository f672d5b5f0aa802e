"""
Local blob store.

Writes uploaded objects under ``<root>/<bucket>/<key>``; the API serves the
root directory as static files so public URLs resolve.
"""

import asyncio
from pathlib import Path
from typing import Union

from loguru import logger

from caterdesk.errors import GatewayError


class LocalBlobStore:
    """Filesystem-backed blob storage."""

    def __init__(self, root: Union[str, Path], base_url: str = "/media"):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, bucket: str, key: str) -> Path:
        path = (self.root / bucket / key).resolve()
        if self.root.resolve() not in path.parents:
            raise GatewayError("upload", f"Key escapes storage root: {bucket}/{key}")
        return path

    async def upload(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str,
        overwrite: bool = True,
    ) -> None:
        path = self._path(bucket, key)
        if path.exists() and not overwrite:
            raise GatewayError("upload", f"Object already exists: {bucket}/{key}")

        def _write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)

        try:
            await asyncio.to_thread(_write)
        except OSError as e:
            raise GatewayError("upload", str(e)) from e

        logger.debug(f"Stored {bucket}/{key} ({len(data)} bytes, {content_type})")

    def get_public_url(self, bucket: str, key: str) -> str:
        return f"{self.base_url}/{bucket}/{key}"
