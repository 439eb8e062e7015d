from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Protocol

from .model import Identity

IdentityListener = Callable[[Optional[Identity]], None]


class AuthProvider(Protocol):
    """Interface of the remote auth collaborator.

    Failures are raised as AuthError; the portal never retries them.
    """

    def sign_up(self, email: str, password: str, metadata: Mapping[str, Any]) -> Identity:
        raise NotImplementedError

    def sign_in(self, email: str, password: str) -> Identity:
        raise NotImplementedError

    def sign_out(self) -> None:
        raise NotImplementedError

    def get_identity(self) -> Optional[Identity]:
        raise NotImplementedError

    def on_identity_changed(self, listener: IdentityListener) -> Callable[[], None]:
        """Subscribe to identity changes; returns an unsubscribe callable."""
        raise NotImplementedError
