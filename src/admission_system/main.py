from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .database.bootstrap import apply_schema, ensure_super_admin, list_tables

from .common.http import register_error_handlers
from .container import Container, build_container
from .assignments.controller import register as register_assignments
from .calls.controller import register as register_calls
from .dashboard.controller import register as register_dashboard
from .students.controller import register as register_students
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory.

    Pass a ready container to skip the database bootstrap (tests do this).
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["MAX_CONTENT_LENGTH"] = getattr(settings, "MAX_CONTENT_LENGTH", None)

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("Schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            password = getattr(settings, "SEED_ADMIN_PASSWORD", "")
            if password:
                ensure_super_admin(
                    db_config,
                    username=getattr(settings, "SEED_ADMIN_USERNAME", "admin"),
                    password=password,
                )
            else:
                logger.warning("AUTO_SEED_DB is set but SEED_ADMIN_PASSWORD is empty; skipping seed")

        container = build_container(db_config=db_config)

    register_error_handlers(app)
    register_dashboard(app, container)
    register_users(app, container)
    register_students(app, container)
    register_assignments(app, container)
    register_calls(app, container)

    return app
