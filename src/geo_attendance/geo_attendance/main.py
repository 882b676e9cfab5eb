from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.datetime_utils import now_local, parse_clock_time
from .common.responses import register_error_handlers, success
from .container import AuthSettings, Container, build_container
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables
from .mail.sender import build_email_sender

from .admin.controller import register as register_admin
from .attendance.controller import register as register_attendance
from .auth.controller import register as register_auth
from .geofence.controller import register as register_geofence
from .notifications.controller import register as register_notifications

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def _bootstrap_database(settings, db_config: dict) -> None:
    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
        logger.info("schema ready tables=%d", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
        ensure_demo_users(db_config)
        logger.info("demo seed ready")


def build_app_container(settings) -> Container:
    access_secret = getattr(settings, "ACCESS_TOKEN_SECRET", "")
    refresh_secret = getattr(settings, "REFRESH_TOKEN_SECRET", "")
    if not access_secret or not refresh_secret:
        raise RuntimeError("ACCESS_TOKEN_SECRET and REFRESH_TOKEN_SECRET must be set")

    return build_container(
        db_config=dict(getattr(settings, "DB_CONFIG")),
        auth=AuthSettings(
            access_secret=access_secret,
            refresh_secret=refresh_secret,
            access_minutes=int(getattr(settings, "ACCESS_TOKEN_MINUTES", 15)),
            refresh_days=int(getattr(settings, "REFRESH_TOKEN_DAYS", 7)),
        ),
        email_sender=build_email_sender(getattr(settings, "MAIL_CONFIG", None)),
        work_start=parse_clock_time(getattr(settings, "WORK_START_TIME", "08:00")),
    )


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory; pass ``container`` to run over prebuilt services (tests)."""
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["COOKIE_SECURE"] = bool(getattr(settings, "COOKIE_SECURE", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if container is None:
        db_config = dict(getattr(settings, "DB_CONFIG"))
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        _bootstrap_database(settings, db_config)
        container = build_app_container(settings)

    app.extensions["geo_attendance"] = container
    register_error_handlers(app)

    register_auth(app, container)
    register_attendance(app, container)
    register_geofence(app, container)
    register_admin(app, container)
    register_notifications(app, container)

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return success("OK", {"status": "ok", "timestamp": now_local().isoformat()})

    return app
