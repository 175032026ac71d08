"""Version 1 of the console API."""

from __future__ import annotations

from flask import Blueprint

from .auth import bp as auth_bp
from .categories import bp as categories_bp
from .health import bp as health_bp
from .tags import bp as tags_bp
from .users import bp as users_bp

API_VERSION = "v1"

# (blueprint, prefix below /api/v1)
REGISTRY: list[tuple[Blueprint, str]] = [
    (health_bp, ""),
    (auth_bp, "/auth"),
    (users_bp, "/users"),
    (categories_bp, "/categories"),
    (tags_bp, "/tags"),
]
