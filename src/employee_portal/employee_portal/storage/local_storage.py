from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from ..core.enums import ErrorKind
from ..core.exceptions import StorageError
from .storage import ObjectStorage

logger = logging.getLogger(__name__)


class LocalObjectStorage(ObjectStorage):
    """Bucket storage on the local filesystem: ``<root>/<bucket>/<path>``.

    Public URLs are ``<public_url>/<bucket>/<path>``.
    """

    def __init__(self, root: str | Path, public_url: str):
        self._root = Path(root).resolve()
        self._public_url = public_url.rstrip("/")

    def _resolve(self, bucket: str, path: str) -> Path:
        bucket = (bucket or "").strip().strip("/")
        path = (path or "").strip().lstrip("/")
        if not bucket or not path:
            raise StorageError("Bucket and path are required", kind=ErrorKind.INVALID_REQUEST)
        base = (self._root / bucket).resolve()
        target = (base / path).resolve()
        if base not in target.parents:
            raise StorageError(f"Invalid object path: {path}", kind=ErrorKind.INVALID_REQUEST)
        return target

    def upload(self, bucket: str, path: str, data: bytes, *, content_type: str = "", overwrite: bool = False) -> str:
        target = self._resolve(bucket, path)
        if target.exists() and not overwrite:
            raise StorageError("The resource already exists", kind=ErrorKind.OBJECT_EXISTS)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as exc:
            logger.exception("failed to write %s", target)
            raise StorageError("Could not save the file", kind=ErrorKind.BACKEND) from exc

        logger.info("saved %s/%s (%d bytes, %s)", bucket, path, len(data), content_type or "unknown type")
        return path

    def get_public_url(self, bucket: str, path: str) -> str:
        self._resolve(bucket, path)
        return f"{self._public_url}/{bucket.strip('/')}/{path.lstrip('/')}"

    def remove(self, bucket: str, paths: Sequence[str]) -> None:
        for path in paths:
            target = self._resolve(bucket, path)
            if not target.exists():
                logger.warning("delete requested but object not found: %s/%s", bucket, path)
                continue
            try:
                target.unlink()
            except OSError as exc:
                logger.error("error deleting %s: %s", target, exc)
                raise StorageError("Error deleting file", kind=ErrorKind.BACKEND) from exc
            logger.info("deleted %s/%s", bucket, path)
