from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.web import require_identity
from ..container import Container
from ..core.constants import FAMILY_IMAGE_BUCKET, PROFILE_IMAGE_BUCKET
from ..core.exceptions import ValidationError
from ..forms import (
    create_profile_form,
    duty_form,
    family_member_form,
    health_form,
    pass_form,
    profile_form,
)
from ..scope import IdentityScope
from ..storage.images import ImageUpload, delete_image, upload_image


def _payload():
    return request.get_json(silent=True) or request.form


def _rows(items):
    return [item.to_dict() for item in items]


def _one(item):
    return item.to_dict() if item is not None else None


def _image_from_request() -> ImageUpload:
    file = request.files.get("file")
    if file is None or not file.filename:
        raise ValidationError("No file uploaded", {"file": "required"})
    return ImageUpload(filename=file.filename, content_type=file.mimetype or "", data=file.read())


def register(app: Flask, container: Container) -> None:
    scopes = container.scopes
    storage = container.storage

    def _scope() -> IdentityScope:
        return scopes.scope_for(require_identity())

    @app.route("/dashboard", methods=["GET"], endpoint="dashboard")
    def dashboard():
        scope = _scope()
        failures = scope.load()
        return jsonify(
            profile=_one(scope.profile.record),
            passes=_rows(scope.passes.rows),
            expiring_soon=_rows(scope.passes.expiring_soon()),
            health=_one(scope.health.record),
            family=_rows(scope.family.rows),
            duties=_rows(scope.duties.rows),
            errors={name: str(exc) for name, exc in failures.items()},
        )

    # -- profile --------------------------------------------------------
    @app.route("/profile", methods=["GET", "POST", "PATCH"], endpoint="profile")
    def profile():
        scope = _scope()
        if request.method == "GET":
            return jsonify(profile=_one(scope.profile.fetch()))
        if request.method == "POST":
            # manual creation path, used when the bootstrap could not create one
            created = scope.profile.create(create_profile_form(_payload()))
            return jsonify(profile=created.to_dict()), 201

        current = scope.profile.record or scope.profile.fetch()
        if current is None:
            return jsonify(error="Profile not found"), 404
        updated = scope.profile.update(current.id, profile_form(_payload(), partial=True))
        return jsonify(profile=updated.to_dict())

    @app.route("/profile/image", methods=["POST"], endpoint="profile_image")
    def profile_image():
        scope = _scope()
        url = upload_image(storage, PROFILE_IMAGE_BUCKET, scope.identity.user_id, _image_from_request(), overwrite=True)
        return jsonify(url=url), 201

    # -- passes ---------------------------------------------------------
    @app.route("/passes", methods=["GET", "POST"], endpoint="passes")
    def passes():
        scope = _scope()
        if request.method == "POST":
            created = scope.passes.add(pass_form(_payload()))
            return jsonify(item=created.to_dict()), 201
        return jsonify(items=_rows(scope.passes.fetch_all()))

    @app.route("/passes/expiring", methods=["GET"], endpoint="passes_expiring")
    def passes_expiring():
        scope = _scope()
        return jsonify(items=_rows(scope.passes.expiring_soon()))

    @app.route("/passes/<row_id>", methods=["PATCH", "DELETE"], endpoint="pass_item")
    def pass_item(row_id: str):
        scope = _scope()
        if request.method == "DELETE":
            scope.passes.delete(row_id)
            return "", 204
        current = scope.passes.get(row_id)
        if current is None:
            scope.passes.fetch_all()
            current = scope.passes.get(row_id)
        if current is None:
            return jsonify(error="Pass not found"), 404
        updated = scope.passes.update(row_id, pass_form(_payload(), partial=True, current=current))
        return jsonify(item=updated.to_dict())

    # -- health ---------------------------------------------------------
    @app.route("/health", methods=["GET", "PUT"], endpoint="health")
    def health():
        scope = _scope()
        if request.method == "PUT":
            return jsonify(record=scope.health.upsert(health_form(_payload())).to_dict())
        return jsonify(record=_one(scope.health.fetch()))

    # -- family ---------------------------------------------------------
    @app.route("/family", methods=["GET", "POST"], endpoint="family")
    def family():
        scope = _scope()
        if request.method == "POST":
            created = scope.family.add(family_member_form(_payload()))
            return jsonify(item=created.to_dict()), 201
        return jsonify(items=_rows(scope.family.fetch_all()))

    @app.route("/family/<row_id>", methods=["PATCH", "DELETE"], endpoint="family_item")
    def family_item(row_id: str):
        scope = _scope()
        if request.method == "DELETE":
            member = scope.family.get(row_id)
            scope.family.delete(row_id)
            if member is not None and member.profile_image_url:
                delete_image(storage, FAMILY_IMAGE_BUCKET, member.profile_image_url)
            return "", 204
        updated = scope.family.update(row_id, family_member_form(_payload(), partial=True))
        return jsonify(item=updated.to_dict())

    @app.route("/family/image", methods=["POST"], endpoint="family_image")
    def family_image():
        scope = _scope()
        url = upload_image(storage, FAMILY_IMAGE_BUCKET, scope.identity.user_id, _image_from_request())
        return jsonify(url=url), 201

    # -- duties ---------------------------------------------------------
    @app.route("/duties", methods=["GET", "POST"], endpoint="duties")
    def duties():
        scope = _scope()
        if request.method == "POST":
            created = scope.duties.add(duty_form(_payload()))
            return jsonify(item=created.to_dict()), 201
        return jsonify(items=_rows(scope.duties.fetch_all()))

    @app.route("/duties/<row_id>", methods=["PATCH", "DELETE"], endpoint="duty_item")
    def duty_item(row_id: str):
        scope = _scope()
        if request.method == "DELETE":
            scope.duties.delete(row_id)
            return "", 204
        updated = scope.duties.update(row_id, duty_form(_payload(), partial=True))
        return jsonify(item=updated.to_dict())
