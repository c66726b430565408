"""Unit tests for image validation and local storage."""
import os
from io import BytesIO

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from schoolhub.core.config import settings
from schoolhub.core.errors import ValidationError
from schoolhub.services.storage_service import LocalStorage, StorageError, read_image

pytestmark = pytest.mark.unit

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def upload(content: bytes, content_type: str = "image/png", filename: str = "logo.png") -> UploadFile:
    return UploadFile(
        file=BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type})
    )


class TestReadImage:
    """Tests for upload validation."""

    async def test_accepts_allowed_type(self):
        assert await read_image(upload(PNG)) == PNG

    async def test_rejects_disallowed_type(self):
        with pytest.raises(ValidationError) as exc_info:
            await read_image(upload(b"%PDF-1.4", "application/pdf", "doc.pdf"))
        assert exc_info.value.message == "Invalid file type"
        assert exc_info.value.status_code == 400

    async def test_rejects_oversized_file(self):
        with pytest.raises(ValidationError) as exc_info:
            await read_image(upload(b"x" * (settings.MAX_UPLOAD_SIZE + 1)))
        assert exc_info.value.message == "File too large"

    async def test_rejects_empty_file(self):
        with pytest.raises(ValidationError):
            await read_image(upload(b""))


class TestLocalStorage:
    """Tests for the filesystem backend."""

    async def test_upload_writes_below_folder(self, storage):
        reference = await storage.upload(PNG, "my logo.png", "logos")
        assert reference.startswith("logos/")
        assert reference.endswith("-my_logo.png")
        with open(os.path.join(storage.root, reference), "rb") as f:
            assert f.read() == PNG

    async def test_delete_removes_file(self, storage):
        reference = await storage.upload(PNG, "a.png", "gallery")
        await storage.delete(reference)
        assert not os.path.exists(os.path.join(storage.root, reference))

    async def test_delete_of_missing_file_raises(self, storage):
        with pytest.raises(StorageError):
            await storage.delete("gallery/missing.png")

    async def test_references_outside_root_are_refused(self, tmp_path):
        storage = LocalStorage(str(tmp_path / "root"))
        with pytest.raises(StorageError):
            await storage.delete("../escape.png")
