"""
Uploaded files and product image storage.

Provides:
- UploadFile: a file part received in a multipart request
- ImageStore protocol and LocalImageStore implementation
"""

from __future__ import annotations

import logging
import os
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Union

import aiofiles

from .faults import UnsupportedMediaTypeFault, UploadFault

logger = logging.getLogger("showroom.uploads")


# Accepted image MIME types and the extension stored for each
IMAGE_TYPES = {
    "image/png": "png",
    "image/jpeg": "jpeg",
    "image/jpg": "jpg",
}


def image_extension(content_type: Optional[str]) -> str:
    """
    Extension for an accepted image MIME type.

    Raises:
        UnsupportedMediaTypeFault: content type outside ``IMAGE_TYPES``
    """
    mime = (content_type or "").split(";", 1)[0].strip().lower()
    try:
        return IMAGE_TYPES[mime]
    except KeyError:
        raise UnsupportedMediaTypeFault(content_type or "")


# ============================================================================
# UploadFile
# ============================================================================

@dataclass
class UploadFile:
    """File part received in a multipart request, held in memory."""

    filename: str
    content_type: str
    content: bytes = b""

    async def read(self) -> bytes:
        return self.content


@dataclass(frozen=True)
class StoredImage:
    """Location of a stored image."""

    url: str
    key: str


# ============================================================================
# ImageStore
# ============================================================================

class ImageStore(Protocol):
    """
    Protocol for product image storage backends.

    Implementations can store images on disk, in an object store, etc.
    """

    async def upload(self, data: bytes, content_type: str) -> StoredImage:
        """
        Store ``data`` and return where it can be fetched from.

        Raises:
            UnsupportedMediaTypeFault: content type not accepted
            UploadFault: the backend could not store the object
        """
        ...


class LocalImageStore:
    """
    Local filesystem image store.

    Images are written as ``<media_root>/products/<uuid>.<ext>`` and served
    from ``<media_url>/products/<uuid>.<ext>``.
    """

    prefix = "products"

    def __init__(self, media_root: Union[str, Path] = "media", media_url: str = "/media"):
        self.media_root = Path(media_root)
        self.media_url = media_url.rstrip("/")

    async def upload(self, data: bytes, content_type: str) -> StoredImage:
        ext = image_extension(content_type)
        key = f"{self.prefix}/{uuid.uuid4()}.{ext}"
        dest = self.media_root / key
        try:
            os.makedirs(dest.parent, exist_ok=True)
            async with aiofiles.open(dest, "wb") as f:
                await f.write(data)
        except OSError as exc:
            raise UploadFault(str(exc), filename=key) from exc

        logger.info(f"Stored image {key} ({len(data)} bytes)")
        return StoredImage(url=f"{self.media_url}/{key}", key=key)
