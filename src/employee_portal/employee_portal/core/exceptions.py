from __future__ import annotations

from typing import Mapping, Optional

from .enums import ErrorKind


class PortalError(Exception):
    """Base exception for the employee portal."""


class ValidationError(PortalError):
    """Raised when input data is invalid. Blocks submission."""

    def __init__(self, message: str, field_errors: Optional[Mapping[str, str]] = None):
        super().__init__(message)
        self.field_errors = dict(field_errors or {})


class UploadRejected(ValidationError):
    """Upload precondition failed locally; no storage call was made."""


class ImageTypeError(UploadRejected):
    pass


class ImageSizeError(UploadRejected):
    pass


class NotAuthenticatedError(PortalError):
    """Raised when identity-scoped data is requested without a signed-in identity."""


class RemoteError(PortalError):
    """A collaborator (auth, table, storage) rejected the call.

    The message is kept verbatim so it can be shown to the user.
    """

    def __init__(self, message: str, *, kind: ErrorKind = ErrorKind.BACKEND):
        super().__init__(message)
        self.kind = kind


class AuthError(RemoteError):
    pass


class TableError(RemoteError):
    @property
    def is_no_rows(self) -> bool:
        return self.kind == ErrorKind.NO_ROWS


class StorageError(RemoteError):
    pass
