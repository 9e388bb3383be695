from __future__ import annotations

import importlib
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .activity.controller import register as register_activity
from .common.logger import get_logger
from .config import get_settings_module
from .core.constants import DEFAULT_SUMMARY_CACHE_TTL_SECONDS
from .container import Container, build_container
from .database.bootstrap import apply_schema, ensure_default_settings, list_tables
from .maintenance.controller import register as register_maintenance
from .registration.controller import register as register_registration
from .reporting.controller import register as register_reporting
from .settings.controller import register as register_settings

logger = get_logger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["CRON_SECRET"] = getattr(settings, "CRON_SECRET", "")
    app.config["DEFAULT_PAGE_SIZE"] = int(getattr(settings, "DEFAULT_PAGE_SIZE", 10))

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
            ensure_default_settings(db_config)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            cache_ttl_seconds=float(getattr(settings, "SUMMARY_CACHE_TTL_SECONDS", DEFAULT_SUMMARY_CACHE_TTL_SECONDS)),
        )

    register_registration(app, container)
    register_reporting(app, container)
    register_settings(app, container)
    register_maintenance(app, container)
    register_activity(app, container)

    return app
