from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .core.constants import CHURCH_NAME, MAX_PHOTO_BYTES
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_accounts, list_tables

from .container import Container, build_container
from .attendance.controller import register as register_attendance
from .members.controller import register as register_members
from .statistics.controller import register as register_statistics
from .storage.controller import register as register_storage
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[3]


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__, template_folder="../../../templates", static_folder="../../../static")

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    max_photo_bytes = int(getattr(settings, "MAX_PHOTO_BYTES", MAX_PHOTO_BYTES))
    # Room for the other form fields around the photo.
    app.config["MAX_CONTENT_LENGTH"] = max_photo_bytes + 1024 * 1024

    if container is None:
        if app.config["DEBUG"]:
            logger.info(
                "settings=%s db=%s@%s:%s/%s",
                settings_module,
                db_config.get("user"),
                db_config.get("host"),
                db_config.get("port", 3306),
                db_config.get("database"),
            )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=PROJECT_ROOT / "database" / "schema.sql")
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=PROJECT_ROOT / "database" / "seed.sql")
            ensure_demo_accounts(db_config)
            logger.info("Demo seed ready")

        container = build_container(
            db_config=db_config,
            upload_dir=str(getattr(settings, "UPLOAD_DIR", PROJECT_ROOT / "uploads")),
            photo_url_prefix=str(getattr(settings, "PHOTO_URL_PREFIX", "/photos")),
            max_photo_bytes=max_photo_bytes,
            photo_fetch_timeout=float(getattr(settings, "PHOTO_FETCH_TIMEOUT", 10.0)),
            church_name=str(getattr(settings, "CHURCH_NAME", CHURCH_NAME)),
        )

    register_users(app, container)
    register_members(app, container)
    register_attendance(app, container)
    register_statistics(app, container)
    register_storage(app, container)

    return app
