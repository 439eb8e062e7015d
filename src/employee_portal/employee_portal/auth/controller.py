from __future__ import annotations

from typing import Optional

from flask import Flask, jsonify, request

from ..container import Container
from ..core.enums import SessionState
from ..forms import sign_in_form, sign_up_form
from .model import Identity
from .web import forget, remember, request_identity


def identity_json(identity: Optional[Identity]):
    if identity is None:
        return None
    return {"user_id": identity.user_id, "email": identity.email, "metadata": dict(identity.metadata)}


def register(app: Flask, container: Container) -> None:
    auth = container.auth
    scopes = container.scopes

    def _signed_in(identity: Identity, status: int = 200):
        remember(identity)
        # a fresh scope per sign-in; load it so the dashboard has data
        scope = scopes.open(identity)
        failures = scope.load()
        profile = scope.profile.record
        return (
            jsonify(
                identity=identity_json(identity),
                profile=profile.to_dict() if profile else None,
                errors={name: str(exc) for name, exc in failures.items()},
            ),
            status,
        )

    @app.route("/auth/session", methods=["GET"], endpoint="auth_session")
    def auth_session():
        identity = request_identity()
        state = SessionState.AUTHENTICATED if identity else SessionState.ANONYMOUS
        return jsonify(state=state.value, loading=False, identity=identity_json(identity))

    @app.route("/auth/sign-up", methods=["POST"], endpoint="auth_sign_up")
    def auth_sign_up():
        email, password, metadata = sign_up_form(request.get_json(silent=True) or request.form)
        return _signed_in(auth.sign_up(email, password, metadata), 201)

    @app.route("/auth/sign-in", methods=["POST"], endpoint="auth_sign_in")
    def auth_sign_in():
        email, password = sign_in_form(request.get_json(silent=True) or request.form)
        return _signed_in(auth.sign_in(email, password))

    @app.route("/auth/sign-out", methods=["POST"], endpoint="auth_sign_out")
    def auth_sign_out():
        identity = request_identity()
        forget()
        if identity is not None:
            scopes.discard(identity.user_id)
        return jsonify(state=SessionState.ANONYMOUS.value)
