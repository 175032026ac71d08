"""Health check endpoint."""

from __future__ import annotations

from flask import Blueprint, current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from cms_api.api.deps import success, timing
from cms_api.core.extensions import db

bp = Blueprint("health", __name__)


@bp.get("/health")
@timing
def healthcheck():
    """Return application and database health information."""

    db_status = "ok"
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:  # pragma: no cover - depends on DB backend
        current_app.logger.exception("healthcheck.db_error")
        db.session.rollback()
        db_status = "fail"
    payload = {
        "db": db_status,
        "refresh_backend": current_app.config.get("REFRESH_TOKEN_BACKEND", "sql"),
        "version": current_app.config.get("APP_VERSION", "dev"),
    }
    message = "Service healthy" if db_status == "ok" else "Service degraded"
    return success(payload, message=message, status=200 if db_status == "ok" else 503)
