from __future__ import annotations

import logging
from typing import Any, Callable, List, Mapping, Optional

from ..core.enums import SessionState
from .model import Identity
from .provider import AuthProvider, IdentityListener

logger = logging.getLogger(__name__)


def _user_id(identity: Optional[Identity]) -> Optional[str]:
    return identity.user_id if identity else None


class SessionProvider:
    """Process-wide view of who is signed in.

    State machine: UNKNOWN -> {ANONYMOUS, AUTHENTICATED}; AUTHENTICATED ->
    ANONYMOUS on sign-out. Subscribers are told about identity changes only
    (a repeated notification for the same user id is ignored).
    """

    def __init__(self, auth: AuthProvider):
        self._auth = auth
        self._identity: Optional[Identity] = None
        self._state = SessionState.UNKNOWN
        self._listeners: List[IdentityListener] = []
        self._unsubscribe_auth = auth.on_identity_changed(self._apply)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def current_identity(self) -> Optional[Identity]:
        return self._identity

    @property
    def is_loading(self) -> bool:
        return self._state == SessionState.UNKNOWN

    def restore(self) -> Optional[Identity]:
        """Resolve the initial state from whatever session the auth collaborator holds."""
        self._apply(self._auth.get_identity())
        return self._identity

    def sign_in(self, email: str, password: str) -> Identity:
        identity = self._auth.sign_in(email, password)
        self._apply(identity)
        return identity

    def sign_up(self, email: str, password: str, metadata: Mapping[str, Any]) -> Identity:
        identity = self._auth.sign_up(email, password, metadata)
        self._apply(identity)
        return identity

    def sign_out(self) -> None:
        self._auth.sign_out()
        self._apply(None)

    def subscribe(self, listener: IdentityListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        self._unsubscribe_auth()
        self._listeners.clear()

    def _apply(self, identity: Optional[Identity]) -> None:
        new_state = SessionState.AUTHENTICATED if identity else SessionState.ANONYMOUS
        changed = self._state == SessionState.UNKNOWN or _user_id(identity) != _user_id(self._identity)

        self._identity = identity
        self._state = new_state
        if not changed:
            return

        logger.info("session %s (user=%s)", new_state.value, _user_id(identity) or "-")
        for listener in list(self._listeners):
            listener(identity)
