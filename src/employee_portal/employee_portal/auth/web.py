"""Per-client identity for the HTTP front end.

Each browser carries its own signed-in identity in Flask's signed session
cookie; nothing about who is signed in is shared between clients.
"""
from __future__ import annotations

from typing import Optional

from flask import session

from ..core.exceptions import NotAuthenticatedError
from .model import Identity


def remember(identity: Identity) -> None:
    session.clear()
    session["user_id"] = identity.user_id
    session["email"] = identity.email
    session["metadata"] = dict(identity.metadata)


def forget() -> None:
    session.clear()


def request_identity() -> Optional[Identity]:
    if "user_id" not in session:
        return None
    return Identity(
        user_id=session["user_id"],
        email=session.get("email", ""),
        metadata=session.get("metadata") or {},
    )


def require_identity() -> Identity:
    identity = request_identity()
    if identity is None:
        raise NotAuthenticatedError("Please sign in to continue")
    return identity
