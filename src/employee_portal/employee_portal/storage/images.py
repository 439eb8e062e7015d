"""Image uploads for profile and family photos.

Preconditions (``image/*`` content type, at most 5 MiB) are checked locally
before any call to the object store.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from urllib.parse import urlsplit

from ..common.datetime_utils import now_local
from ..core.constants import MAX_IMAGE_BYTES
from ..core.exceptions import ImageSizeError, ImageTypeError
from .storage import ObjectStorage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageUpload:
    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


def check_image(upload: ImageUpload, *, max_bytes: int = MAX_IMAGE_BYTES) -> None:
    if not (upload.content_type or "").lower().startswith("image/"):
        raise ImageTypeError("Please select a valid image file", {"file": "not an image"})
    if upload.size > max_bytes:
        raise ImageSizeError(
            f"Image size must be less than {max_bytes // (1024 * 1024)}MB",
            {"file": "too large"},
        )


def _extension(upload: ImageUpload) -> str:
    _, ext = os.path.splitext(upload.filename or "")
    if ext:
        return ext.lstrip(".").lower()
    return upload.content_type.split("/", 1)[1].split(";")[0].strip() or "img"


def object_path(user_id: str, upload: ImageUpload, *, now: Optional[datetime] = None) -> str:
    millis = int((now or now_local()).timestamp() * 1000)
    return f"{user_id}/{millis}.{_extension(upload)}"


def upload_image(
    storage: ObjectStorage,
    bucket: str,
    user_id: str,
    upload: ImageUpload,
    *,
    overwrite: bool = False,
    now: Optional[datetime] = None,
) -> str:
    """Store the image under ``<user_id>/<millis>.<ext>`` and return its public URL."""
    check_image(upload)
    path = storage.upload(
        bucket,
        object_path(user_id, upload, now=now),
        upload.data,
        content_type=upload.content_type,
        overwrite=overwrite,
    )
    return storage.get_public_url(bucket, path)


def path_from_public_url(url: str) -> Optional[str]:
    """Recover ``<user_id>/<file>`` from the last two segments of a public URL."""
    parts = [p for p in urlsplit(url or "").path.split("/") if p]
    if len(parts) < 2:
        return None
    return "/".join(parts[-2:])


def delete_image(storage: ObjectStorage, bucket: str, url: str) -> bool:
    path = path_from_public_url(url)
    if not path:
        logger.warning("cannot derive an object path from %r", url)
        return False
    storage.remove(bucket, [path])
    return True
