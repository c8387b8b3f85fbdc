# src/storefront/services/images.py

import base64
import logging
import uuid
from mimetypes import guess_extension
from pathlib import Path
from typing import Protocol

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from ..core.config import settings
from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)


class ImageStore(Protocol):
    """Turns an uploaded image into the string stored in `product.image`."""

    async def save(self, upload: UploadFile) -> str:
        ...


async def read_image(upload: UploadFile, max_bytes: int) -> bytes:
    """Reads the upload after checking it is a non-empty image within the size limit."""
    content_type = upload.content_type or ""
    if not content_type.startswith("image/"):
        raise ValidationError("Only image files are allowed")

    # one extra byte is enough to detect an oversized file
    content = await upload.read(max_bytes + 1)
    if not content:
        raise ValidationError("Uploaded image is empty")
    if len(content) > max_bytes:
        raise ValidationError(f"Image must not exceed {max_bytes} bytes")
    return content


class InlineImageStore:
    """Embeds the image in the document as a `data:<mime>;base64,<payload>` URL."""

    def __init__(self, max_bytes: int = settings.MAX_IMAGE_BYTES):
        self.max_bytes = max_bytes

    async def save(self, upload: UploadFile) -> str:
        content = await read_image(upload, self.max_bytes)
        encoded = base64.b64encode(content).decode("ascii")
        return f"data:{upload.content_type};base64,{encoded}"


class FileSystemImageStore:
    """Writes the image under `directory` and returns its public path."""

    def __init__(self, directory: Path, url_path: str, max_bytes: int = settings.MAX_IMAGE_BYTES):
        self.directory = Path(directory)
        self.url_path = url_path.rstrip("/")
        self.max_bytes = max_bytes

    async def save(self, upload: UploadFile) -> str:
        content = await read_image(upload, self.max_bytes)
        extension = guess_extension(upload.content_type) or Path(upload.filename or "").suffix
        filename = f"{uuid.uuid4().hex}{extension}"

        await run_in_threadpool(self._write, filename, content)
        logger.info(f"Stored uploaded image '{upload.filename}' as {filename} ({len(content)} bytes)")
        return f"{self.url_path}/{filename}"

    def _write(self, filename: str, content: bytes) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        (self.directory / filename).write_bytes(content)


def build_image_store() -> ImageStore:
    if settings.IMAGE_STORAGE == "filesystem":
        return FileSystemImageStore(Path(settings.UPLOAD_DIR), settings.UPLOAD_URL_PATH)
    return InlineImageStore()
