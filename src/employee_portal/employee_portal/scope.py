"""Identity-scoped state.

The signed-in identity is passed explicitly into every accessor. A scope
owns the accessors built for one identity; when the session's identity
changes the old scope is closed (caches emptied) and never reused.
"""
from __future__ import annotations

import logging
from typing import Dict, Optional

from .auth.model import Identity
from .auth.session import SessionProvider
from .backend.table import TableClient
from .core.exceptions import NotAuthenticatedError, RemoteError
from .profile.bootstrap import ProfileBootstrap
from .records.accessors import duty_accessor, family_accessor, health_accessor, pass_accessor, profile_accessor

logger = logging.getLogger(__name__)


class IdentityScope:
    def __init__(self, tables: TableClient, identity: Identity):
        self.identity = identity
        self.profile = profile_accessor(tables, identity)
        self.passes = pass_accessor(tables, identity)
        self.health = health_accessor(tables, identity)
        self.family = family_accessor(tables, identity)
        self.duties = duty_accessor(tables, identity)
        self.bootstrap = ProfileBootstrap(self.profile)
        self.closed = False

    def load(self) -> Dict[str, RemoteError]:
        """Bootstrap the profile and fetch every record set.

        One failing accessor does not stop the others. Failures are returned
        by accessor name for the caller to report.
        """
        failures: Dict[str, RemoteError] = {}
        steps = (
            ("profile", self.bootstrap.run),
            ("passes", self.passes.fetch_all),
            ("health", self.health.fetch),
            ("family", self.family.fetch_all),
            ("duties", self.duties.fetch_all),
        )
        for name, step in steps:
            try:
                step()
            except RemoteError as exc:
                logger.warning("loading %s for %s failed: %s", name, self.identity.user_id, exc)
                failures[name] = exc
        return failures

    def close(self) -> None:
        for accessor in (self.profile, self.passes, self.health, self.family, self.duties):
            accessor.clear()
        self.closed = True


class PortalContext:
    """Follows the session and keeps exactly one scope per signed-in identity."""

    def __init__(self, session: SessionProvider, tables: TableClient):
        self._session = session
        self._tables = tables
        self._scope: Optional[IdentityScope] = None
        self._unsubscribe = session.subscribe(self._on_identity_changed)
        if session.current_identity is not None:
            self._on_identity_changed(session.current_identity)

    @property
    def session(self) -> SessionProvider:
        return self._session

    @property
    def scope(self) -> Optional[IdentityScope]:
        return self._scope

    def require_scope(self) -> IdentityScope:
        if self._scope is None:
            raise NotAuthenticatedError("Please sign in to continue")
        return self._scope

    def close(self) -> None:
        self._unsubscribe()
        self._on_identity_changed(None)

    def _on_identity_changed(self, identity: Optional[Identity]) -> None:
        if self._scope is not None:
            self._scope.close()
            self._scope = None
        if identity is not None:
            self._scope = IdentityScope(self._tables, identity)


class ScopeRegistry:
    """Scopes for the HTTP front end, one per signed-in user id.

    Every request resolves its own identity from the client's session cookie
    and is handed that identity's scope only. Clients signed in as the same
    user share one scope.
    """

    def __init__(self, tables: TableClient):
        self._tables = tables
        self._scopes: Dict[str, IdentityScope] = {}

    def open(self, identity: Identity) -> IdentityScope:
        """Start a fresh scope for ``identity``, closing the one it replaces."""
        self.discard(identity.user_id)
        scope = IdentityScope(self._tables, identity)
        self._scopes[identity.user_id] = scope
        return scope

    def scope_for(self, identity: Identity) -> IdentityScope:
        scope = self._scopes.get(identity.user_id)
        if scope is None:
            # the cookie outlived this process; rebuild the caches before serving
            scope = self.open(identity)
            scope.load()
        return scope

    def discard(self, user_id: str) -> None:
        scope = self._scopes.pop(user_id, None)
        if scope is not None:
            scope.close()

    def __contains__(self, user_id: str) -> bool:
        return user_id in self._scopes
