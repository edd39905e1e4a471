"""Staging of multipart uploads on local disk before they go to the blob store."""

import logging
import os
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from vidtube.errors import BadRequestError

from .blob_store import discard

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


class UploadStager:
    """Writes incoming upload streams into the temp directory."""

    def __init__(self, temp_dir: str, max_bytes: int):
        self.temp_dir = temp_dir
        self.max_bytes = max_bytes

    async def stage(self, upload) -> Optional[str]:
        """
        Persist an upload to a uniquely named temp file.

        Args:
            upload: Starlette UploadFile (anything with filename and async read)

        Returns:
            Local path, or None when no file was sent

        Raises:
            BadRequestError: If the file is larger than the configured limit
        """
        if upload is None or not getattr(upload, "filename", None):
            return None

        os.makedirs(self.temp_dir, exist_ok=True)
        suffix = os.path.splitext(upload.filename)[1]
        path = os.path.join(self.temp_dir, f"{uuid.uuid4().hex}{suffix}")

        written = 0
        try:
            with open(path, "wb") as fh:
                while True:
                    chunk = await upload.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self.max_bytes:
                        raise BadRequestError("File is too large")
                    fh.write(chunk)
        except Exception:
            discard(path)
            raise

        logger.debug(f"Staged {upload.filename} as {path} ({written} bytes)")
        return path

    @asynccontextmanager
    async def staged(self, *uploads) -> AsyncIterator[List[Optional[str]]]:
        """
        Stage several uploads for the duration of a request.

        Yields one local path (or None) per upload. Whatever is still on disk
        when the block exits is removed, so files are never left behind when
        a handler fails before uploading them.
        """
        paths: List[Optional[str]] = []
        try:
            for upload in uploads:
                paths.append(await self.stage(upload))
            yield paths
        finally:
            for path in paths:
                discard(path)
