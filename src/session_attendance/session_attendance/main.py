from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container_from_settings
from .database.bootstrap import apply_schema
from .progress.controller import register as register_progress

logger = logging.getLogger(__name__)


def create_app(container: Container | None = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(
        "settings=%s storage=%s notifier=%s",
        settings_module,
        getattr(settings, "STORAGE_BACKEND", "memory"),
        getattr(settings, "NOTIFIER", "console"),
    )

    if container is None:
        if getattr(settings, "STORAGE_BACKEND", "memory") == "mysql" and getattr(settings, "AUTO_INIT_DB", False):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(getattr(settings, "DB_CONFIG"), schema_path=schema_path)
        container = build_container_from_settings(settings)

    app.extensions["session_attendance"] = container
    register_attendance(app, container)
    register_progress(app, container)

    return app
