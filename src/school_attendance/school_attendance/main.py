from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .database.bootstrap import apply_schema, ensure_admin_user, list_tables

from .container import Container, build_container
from .attendance.controller import register as register_attendance
from .classes.controller import register as register_classes
from .dashboard.controller import register as register_dashboard
from .earnings.controller import register as register_earnings
from .holidays.controller import register as register_holidays
from .reports.controller import register as register_reports
from .roster.controller import register as register_roster
from .students.controller import register as register_students
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app.

    A prepared container (e.g. over in-memory repositories) skips all
    database setup.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

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
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            ensure_admin_user(
                db_config,
                username=getattr(settings, "ADMIN_USERNAME"),
                password=getattr(settings, "ADMIN_PASSWORD"),
            )
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(db_config=db_config)

    register_users(app, container)
    register_students(app, container)
    register_classes(app, container)
    register_roster(app, container)
    register_attendance(app, container)
    register_holidays(app, container)
    register_earnings(app, container)
    register_reports(app, container)
    register_dashboard(app, container)

    return app
