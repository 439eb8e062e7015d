from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass(frozen=True)
class Identity:
    """The authenticated subject a session represents.

    Note: read-only to the portal; created by the auth collaborator at sign-up.
    """

    user_id: str
    email: str
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def meta(self, key: str) -> Any:
        return self.metadata.get(key)
