from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

import mysql.connector
from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .awards.controller import register as register_awards
from .classes.controller import register as register_classes
from .container import Container, build_container
from .core.exceptions import NotFoundError, StorageError, ValidationError
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DBConfig
from .points.controller import register as register_points
from .register.controller import register as register_register
from .students.controller import register as register_students
from .sync.controller import register as register_sync

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(NotFoundError)
    def handle_not_found(e: NotFoundError):
        return jsonify({"error": str(e)}), 404

    @app.errorhandler(ValidationError)
    def handle_validation(e: ValidationError):
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(StorageError)
    def handle_storage(e: StorageError):
        logger.error("Local storage failure: %s", e)
        return jsonify({"error": "Could not save your changes on this device"}), 500


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"), format=LOG_FORMAT)
    logger.debug("settings=%s", settings_module)

    sync_enabled = bool(getattr(settings, "SYNC_ENABLED", False))
    if container is None and sync_enabled and bool(getattr(settings, "AUTO_INIT_DB", False)):
        db_config = DBConfig.from_mapping(getattr(settings, "REMOTE_DB_CONFIG"))
        schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
        try:
            apply_schema(db_config, schema_path=schema_path)
            logger.info("Remote schema ready (tables=%d)", len(list_tables(db_config)))
        except (mysql.connector.Error, OSError) as e:
            logger.warning("Could not prepare remote schema, continuing offline: %s", e)

    container = container or build_container(settings=settings)

    if container.sync_manager.is_online:
        container.sync_manager.full_sync()

    register_classes(app, container)
    register_students(app, container)
    register_register(app, container)
    register_points(app, container)
    register_awards(app, container)
    register_attendance(app, container)
    register_sync(app, container)
    _register_error_handlers(app)

    app.extensions["studio_register"] = container
    return app
