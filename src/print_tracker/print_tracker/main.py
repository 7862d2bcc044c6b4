from __future__ import annotations

import atexit
import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .audit.controller import register as register_audit
from .audit.middleware import register_audit_logging
from .common.http import fail, ok, register_error_handlers
from .container import build_container
from .core.logging_config import get_logger, setup_logging
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_database_exists, ensure_demo_users, list_tables, schema_path_for
from .database.connection import build_data_access
from .jobs.controller import register as register_jobs
from .machines.controller import register as register_machines
from .maintenance.controller import register as register_maintenance
from .pricing.controller import register as register_pricing
from .reports.controller import register as register_reports
from .security.middleware import register_rate_limiting
from .users.controller import register as register_users

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"

logger = get_logger(__name__)


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["CURRENCY"] = getattr(settings, "CURRENCY", "USD")

    setup_logging(
        log_level=getattr(logging, str(getattr(settings, "LOG_LEVEL", "INFO")).upper(), logging.INFO),
        log_dir=getattr(settings, "LOG_DIR", None),
        enable_file_logging=bool(getattr(settings, "ENABLE_FILE_LOGGING", False)),
    )

    backend = str(getattr(settings, "DB_BACKEND", "mysql")).lower()
    db_config = dict(getattr(settings, "DB_CONFIG", {}))
    sqlite_path = getattr(settings, "SQLITE_PATH", None)
    if backend == "sqlite":
        logger.info("settings=%s db=sqlite:%s", settings_module, sqlite_path)
    else:
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

    auto_init_db = bool(getattr(settings, "AUTO_INIT_DB", False))
    auto_seed_db = bool(getattr(settings, "AUTO_SEED_DB", False))
    if backend == "mysql" and auto_init_db:
        ensure_database_exists(db_config)

    data = build_data_access(
        backend=backend,
        db_config=db_config,
        sqlite_path=sqlite_path,
        retry_attempts=int(getattr(settings, "DB_RETRY_ATTEMPTS", 3)),
        retry_backoff_seconds=float(getattr(settings, "DB_RETRY_BACKOFF_SECONDS", 0.5)),
    )

    if auto_init_db:
        apply_schema(data, schema_path=schema_path_for(DATABASE_DIR, data.dialect))
        logger.info("Schema ready (tables=%s)", len(list_tables(data)))
    if auto_seed_db:
        apply_seed_sql(data, seed_path=DATABASE_DIR / "seed.sql")
        ensure_demo_users(data)

    container = build_container(data=data, settings=settings)
    app.extensions["print_tracker"] = container

    register_error_handlers(app)
    register_rate_limiting(app, container.rate_limiter)
    register_audit_logging(app, container.audit_service)

    register_users(app, container)
    register_jobs(app, container)
    register_pricing(app, container)
    register_reports(app, container)
    register_machines(app, container)
    register_audit(app, container)
    register_maintenance(app, container)

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        if container.data.ping():
            return ok({"status": "ok", "database": data.dialect})
        return fail("Database unavailable", 503)

    if bool(getattr(settings, "ENABLE_SWEEPER", True)):
        container.sweeper.start()
        atexit.register(container.sweeper.stop)
    if bool(getattr(settings, "ENABLE_BACKUP_SCHEDULER", False)):
        container.backup_scheduler.start()
        atexit.register(container.backup_scheduler.stop)

    return app
