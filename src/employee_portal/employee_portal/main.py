from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .auth.controller import register as register_auth
from .container import Container, build_container
from .core.enums import ErrorKind
from .core.exceptions import AuthError, NotAuthenticatedError, RemoteError, TableError, ValidationError
from .database.bootstrap import apply_schema
from .database.connection import DBConfig, DatabaseConnection
from .records.controller import register as register_records

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation(exc: ValidationError):
        return jsonify(error=str(exc), fields=exc.field_errors), 400

    @app.errorhandler(NotAuthenticatedError)
    def _not_authenticated(exc: NotAuthenticatedError):
        return jsonify(error=str(exc)), 401

    @app.errorhandler(AuthError)
    def _auth(exc: AuthError):
        status = 401 if exc.kind == ErrorKind.INVALID_CREDENTIALS else 400
        return jsonify(error=str(exc), kind=exc.kind.value), status

    @app.errorhandler(TableError)
    def _table(exc: TableError):
        # no row owned by the caller matched the id
        if exc.is_no_rows:
            return jsonify(error="Record not found", kind=exc.kind.value), 404
        return jsonify(error=str(exc), kind=exc.kind.value), 502

    @app.errorhandler(RemoteError)
    def _remote(exc: RemoteError):
        return jsonify(error=str(exc), kind=exc.kind.value), 502


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=logging.DEBUG if app.config["DEBUG"] else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(DatabaseConnection.get_instance(DBConfig.from_mapping(db_config)), schema_path=SCHEMA_PATH)
        container = build_container(
            db_config=db_config,
            storage_root=getattr(settings, "STORAGE_ROOT"),
            storage_public_url=getattr(settings, "STORAGE_PUBLIC_URL"),
        )

    app.extensions["employee_portal"] = container

    register_error_handlers(app)
    register_auth(app, container)
    register_records(app, container)

    return app
