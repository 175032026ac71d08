"""CORS policy for the console front-end."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS


def init_app(app: Flask) -> None:
    """Allow the configured console origins to call ``/api/*``.

    :param app: Application whose ``CORS_ORIGINS`` and ``CORS_MAX_AGE`` are read.
        A blank value or ``"*"`` opens the API to any origin without
        credential support.
    """
    origins = [o.strip() for o in app.config.get("CORS_ORIGINS", "").split(",") if o.strip()]
    any_origin = not origins or origins == ["*"]

    CORS(
        app,
        resources={r"/api/*": {"origins": "*" if any_origin else origins}},
        supports_credentials=not any_origin,
        expose_headers=["X-Request-ID"],
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
