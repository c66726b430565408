# schoolhub/services/storage_service.py
import asyncio
import json
import os
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional

import aiohttp
from fastapi import UploadFile
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from schoolhub.core.config import settings, get_upload_folder
from schoolhub.core.errors import ValidationError
from schoolhub.core.logging import logger, log_function_call
from schoolhub.core.security import sanitize_filename


class StorageError(Exception):
    """Raised when the storage provider rejects an operation"""
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class StorageService(ABC):
    """Accepts a binary payload and returns a stable reference; removes objects by reference."""

    @abstractmethod
    async def upload(self, content: bytes, filename: str, folder: str) -> str:
        ...

    @abstractmethod
    async def delete(self, reference: str) -> None:
        ...


def build_filename(original: Optional[str]) -> str:
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S%f")
    return f"{stamp}-{sanitize_filename(original or 'upload')}"


async def read_image(upload: UploadFile) -> bytes:
    """Read an uploaded image, enforcing the allowed types and size limit."""
    content_type = (upload.content_type or "").lower()
    if content_type not in settings.ALLOWED_IMAGE_TYPES:
        raise ValidationError(
            "Invalid file type",
            details=[{"field": "file", "message": f"Allowed types: {', '.join(sorted(settings.ALLOWED_IMAGE_TYPES))}"}]
        )

    content = await upload.read(settings.MAX_UPLOAD_SIZE + 1)
    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise ValidationError(
            "File too large",
            details=[{"field": "file", "message": f"Maximum size is {settings.MAX_UPLOAD_SIZE} bytes"}]
        )
    if not content:
        raise ValidationError("Empty file", details=[{"field": "file", "message": "File is empty"}])
    return content


class LocalStorage(StorageService):
    """Stores files below the configured upload folder."""

    def __init__(self, root: Optional[str] = None):
        self.root = os.path.abspath(root) if root else get_upload_folder()

    def _path(self, reference: str) -> str:
        path = os.path.abspath(os.path.join(self.root, reference))
        if os.path.commonpath([path, self.root]) != self.root:
            raise StorageError(f"Reference outside storage root: {reference}")
        return path

    @log_function_call(logger)
    async def upload(self, content: bytes, filename: str, folder: str) -> str:
        reference = f"{sanitize_filename(folder)}/{build_filename(filename)}"
        path = self._path(reference)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        await asyncio.to_thread(self._write, path, content)
        return reference

    @staticmethod
    def _write(path: str, content: bytes) -> None:
        with open(path, "wb") as f:
            f.write(content)

    async def delete(self, reference: str) -> None:
        path = self._path(reference)
        try:
            await asyncio.to_thread(os.remove, path)
        except FileNotFoundError:
            raise StorageError(f"File not found: {reference}")


class DropboxStorage(StorageService):
    """Dropbox HTTP API client."""

    UPLOAD_URL = "https://content.dropboxapi.com/2/files/upload"
    DELETE_URL = "https://api.dropboxapi.com/2/files/delete_v2"

    def __init__(self, access_token: str, root: str = "/schoolhub", timeout: int = 30):
        if not access_token:
            raise StorageError("Dropbox access token is not configured")
        self.access_token = access_token
        self.root = "/" + root.strip("/") if root.strip("/") else ""
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    @property
    def _auth_header(self) -> dict:
        return {"Authorization": f"Bearer {self.access_token}"}

    @log_function_call(logger)
    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        retry=retry_if_exception_type(aiohttp.ClientError),
        reraise=True
    )
    async def upload(self, content: bytes, filename: str, folder: str) -> str:
        path = f"{self.root}/{sanitize_filename(folder)}/{build_filename(filename)}"
        headers = {
            **self._auth_header,
            "Content-Type": "application/octet-stream",
            "Dropbox-API-Arg": json.dumps({"path": path, "mode": "add", "autorename": True}),
        }
        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            async with session.post(self.UPLOAD_URL, data=content, headers=headers) as response:
                if response.status != 200:
                    body = await response.text()
                    raise StorageError(f"Dropbox upload failed ({response.status}): {body}")
                result = await response.json(content_type=None)
        return result.get("path_display", path)

    async def delete(self, reference: str) -> None:
        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            async with session.post(
                self.DELETE_URL,
                json={"path": reference},
                headers=self._auth_header
            ) as response:
                if response.status != 200:
                    body = await response.text()
                    raise StorageError(f"Dropbox delete failed ({response.status}): {body}")


def get_storage() -> StorageService:
    """FastAPI dependency returning the configured storage backend."""
    if settings.STORAGE_BACKEND == "dropbox":
        return DropboxStorage(settings.DROPBOX_ACCESS_TOKEN, settings.DROPBOX_ROOT)
    return LocalStorage()
