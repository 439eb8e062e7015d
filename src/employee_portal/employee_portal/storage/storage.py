from __future__ import annotations

from typing import Protocol, Sequence


class ObjectStorage(Protocol):
    """Interface of the remote object store (buckets of uploaded files).

    Failures are raised as StorageError.
    """

    def upload(self, bucket: str, path: str, data: bytes, *, content_type: str = "", overwrite: bool = False) -> str:
        raise NotImplementedError

    def get_public_url(self, bucket: str, path: str) -> str:
        raise NotImplementedError

    def remove(self, bucket: str, paths: Sequence[str]) -> None:
        raise NotImplementedError
