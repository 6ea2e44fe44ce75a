"""Local filesystem blob store for uploaded project media.

The project core only ever sees the returned URL and the declared content
type; it never inspects file bytes.
"""

import asyncio
import re
from functools import lru_cache
from pathlib import Path
from uuid import uuid4

from fastapi import UploadFile

from src.portfolio.core.config import get_settings
from src.portfolio.core.exceptions import ValidationError
from src.portfolio.core.logging import get_logger
from src.portfolio.models.enums import MediaType

logger = get_logger(__name__)

PROJECT_PICTURES_FOLDER = "project_pictures"
PROJECT_MEDIA_FOLDER = "project_media"

_EXTENSION_PATTERN = re.compile(r"^\.[A-Za-z0-9]{1,10}$")
_CHUNK_SIZE = 64 * 1024


def media_type_for_content_type(content_type: str | None) -> MediaType | None:
    """Classify an upload by its declared content type (image/* or video/*)."""
    if not content_type:
        return None
    main_type = content_type.split(";", 1)[0].strip().lower()
    if main_type.startswith("image/"):
        return MediaType.IMAGE
    if main_type.startswith("video/"):
        return MediaType.VIDEO
    return None


class LocalMediaStorage:
    """Stores uploads under a root directory and serves them under a URL prefix."""

    def __init__(self, root: str | Path, url_prefix: str, max_bytes: int):
        self.root = Path(root)
        self.url_prefix = "/" + url_prefix.strip("/")
        self.max_bytes = max_bytes

    async def save(self, upload: UploadFile, folder: str, field_name: str) -> str:
        """Persist an uploaded file and return its public URL.

        Raises:
            ValidationError: If the file exceeds the configured size limit.
        """
        data = await self._read_limited(upload, field_name)

        suffix = Path(upload.filename or "").suffix
        extension = suffix.lower() if _EXTENSION_PATTERN.match(suffix) else ""
        filename = f"{field_name}-{uuid4()}{extension}"
        target = self.root / folder / filename

        def _write() -> None:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)

        await asyncio.to_thread(_write)
        url = f"{self.url_prefix}/{folder}/{filename}"
        logger.info("Media stored", url=url, size=len(data), content_type=upload.content_type)
        return url

    async def _read_limited(self, upload: UploadFile, field_name: str) -> bytes:
        """Read an upload in chunks, stopping as soon as it exceeds max_bytes."""
        if upload.size is not None and upload.size > self.max_bytes:
            raise self._too_large(field_name)

        chunks: list[bytes] = []
        total = 0
        while chunk := await upload.read(_CHUNK_SIZE):
            total += len(chunk)
            if total > self.max_bytes:
                raise self._too_large(field_name)
            chunks.append(chunk)
        return b"".join(chunks)

    def _too_large(self, field_name: str) -> ValidationError:
        return ValidationError(
            f"File exceeds the maximum size of {self.max_bytes} bytes",
            field=field_name,
        )

    async def delete(self, url: str) -> None:
        """Remove a previously stored file. Unknown or missing files are ignored."""
        path = self.path_for_url(url)
        if path is None:
            return
        await asyncio.to_thread(path.unlink, missing_ok=True)
        logger.info("Media removed", url=url)

    def path_for_url(self, url: str) -> Path | None:
        """Map a URL produced by save() back to its file, or None if it is foreign."""
        prefix = f"{self.url_prefix}/"
        if not url.startswith(prefix):
            return None
        relative = Path(url[len(prefix) :])
        if relative.is_absolute() or ".." in relative.parts:
            return None
        return self.root / relative


@lru_cache
def get_media_storage() -> LocalMediaStorage:
    """Get the process-wide media store configured from settings."""
    settings = get_settings()
    return LocalMediaStorage(
        root=settings.media_root,
        url_prefix=settings.media_url_prefix,
        max_bytes=settings.max_upload_bytes,
    )
