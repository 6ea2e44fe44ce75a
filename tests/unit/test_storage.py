"""Tests for the local media store and content-type classification."""

import io
from pathlib import Path

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from src.portfolio.core.exceptions import ValidationError
from src.portfolio.core.storage import (
    PROJECT_MEDIA_FOLDER,
    PROJECT_PICTURES_FOLDER,
    LocalMediaStorage,
    media_type_for_content_type,
)
from src.portfolio.models import MediaType

pytestmark = pytest.mark.unit


def make_upload(data: bytes, filename: str, content_type: str) -> UploadFile:
    return UploadFile(
        file=io.BytesIO(data),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


@pytest.mark.parametrize(
    ("content_type", "expected"),
    [
        ("image/png", MediaType.IMAGE),
        ("image/jpeg; charset=binary", MediaType.IMAGE),
        ("IMAGE/GIF", MediaType.IMAGE),
        ("video/mp4", MediaType.VIDEO),
        ("application/pdf", None),
        ("text/plain", None),
        ("", None),
        (None, None),
    ],
)
def test_media_type_for_content_type(content_type, expected):
    assert media_type_for_content_type(content_type) == expected


@pytest.fixture
def storage(tmp_path: Path) -> LocalMediaStorage:
    return LocalMediaStorage(root=tmp_path, url_prefix="uploads/", max_bytes=16)


async def test_save_writes_file_and_returns_url(storage: LocalMediaStorage, tmp_path: Path):
    upload = make_upload(b"png-bytes", "Screen Shot.PNG", "image/png")

    url = await storage.save(upload, PROJECT_PICTURES_FOLDER, "picture")

    assert url.startswith(f"/uploads/{PROJECT_PICTURES_FOLDER}/picture-")
    assert url.endswith(".png")
    path = storage.path_for_url(url)
    assert path is not None
    assert path.parent == tmp_path / PROJECT_PICTURES_FOLDER
    assert path.read_bytes() == b"png-bytes"


async def test_save_drops_suspicious_extensions(storage: LocalMediaStorage):
    upload = make_upload(b"x", "clip.m p4", "video/mp4")

    url = await storage.save(upload, PROJECT_MEDIA_FOLDER, "project_media")

    assert "." not in url.rsplit("/", 1)[1]


async def test_save_rejects_oversized_files(storage: LocalMediaStorage, tmp_path: Path):
    upload = make_upload(b"x" * 17, "big.png", "image/png")

    with pytest.raises(ValidationError) as exc_info:
        await storage.save(upload, PROJECT_MEDIA_FOLDER, "project_media")

    assert exc_info.value.field == "project_media"
    assert not (tmp_path / PROJECT_MEDIA_FOLDER).exists()


class _UnreadableFile(io.BytesIO):
    def read(self, size: int = -1) -> bytes:
        raise AssertionError("upload body should not be read")


async def test_save_rejects_declared_size_before_reading(storage: LocalMediaStorage):
    upload = UploadFile(
        file=_UnreadableFile(),
        size=1024,
        filename="big.png",
        headers=Headers({"content-type": "image/png"}),
    )

    with pytest.raises(ValidationError):
        await storage.save(upload, PROJECT_MEDIA_FOLDER, "project_media")


async def test_save_stops_reading_once_limit_is_exceeded(storage: LocalMediaStorage):
    payload = b"x" * (1024 * 1024)
    upload = make_upload(payload, "big.mp4", "video/mp4")

    with pytest.raises(ValidationError):
        await storage.save(upload, PROJECT_MEDIA_FOLDER, "project_media")

    assert upload.file.tell() < len(payload)


async def test_delete_removes_file(storage: LocalMediaStorage):
    url = await storage.save(make_upload(b"x", "a.png", "image/png"), PROJECT_MEDIA_FOLDER, "m")
    path = storage.path_for_url(url)

    await storage.delete(url)

    assert path is not None and not path.exists()


async def test_delete_ignores_missing_and_foreign_urls(storage: LocalMediaStorage):
    await storage.delete("/uploads/project_media/missing.png")
    await storage.delete("https://cdn.example.com/a.png")


@pytest.mark.parametrize(
    "url",
    [
        "https://cdn.example.com/a.png",
        "/uploads/../secrets.txt",
        "/uploads/project_media/../../etc/passwd",
        "/other/project_media/a.png",
    ],
)
def test_path_for_url_refuses_foreign_urls(storage: LocalMediaStorage, url: str):
    assert storage.path_for_url(url) is None
