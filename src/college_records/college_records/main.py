from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .common.web import register_error_handlers
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables
from .database.connection import DBConfig

from .container import Container, build_container
from .assignments.controller import register as register_assignments
from .attendance.controller import register as register_attendance
from .dashboard.controller import register as register_dashboard
from .exams.controller import register as register_exams
from .ledger.controller import register as register_ledger
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def create_app(container: Optional[Container] = None, settings_module: Optional[str] = None) -> Flask:
    """Build the Flask app.

    Passing a ready ``container`` skips every database step, which is how the
    HTTP tests run against in-memory repositories.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        db_config = DBConfig.from_mapping(getattr(settings, "DB_CONFIG"))
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.user,
            db_config.host,
            db_config.port,
            db_config.database,
        )

        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if getattr(settings, "AUTO_SEED_DB", False):
            ensure_demo_users(db_config)
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            logger.info("demo seed ready")

        container = build_container(
            db_config=getattr(settings, "DB_CONFIG"),
            admin_secret=getattr(settings, "ADMIN_SECRET"),
            college_email_domain=getattr(settings, "COLLEGE_EMAIL_DOMAIN", "@college.edu"),
        )

    register_error_handlers(app)
    register_users(app, container)
    register_ledger(app, container)
    register_attendance(app, container)
    register_assignments(app, container)
    register_exams(app, container)
    register_dashboard(app, container)

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok"})

    return app
