"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import timedelta
from typing import Final

from dotenv import load_dotenv

# Public selector env var (keep neutral name to avoid collisions)
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'


# Load .env during development (no-op when the file is missing)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back to ``default``."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return int(val)


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret. Defaults to a development-safe placeholder and should be
        overridden in production.
    JWT_SECRET_KEY: str
        Key used by ``flask-jwt-extended`` for signing access tokens. Read
        once when the application is created.
    JWT_ACCESS_TOKEN_EXPIRES: timedelta
        Lifetime of access tokens (``ACCESS_TOKEN_TTL_MINUTES``).
    REFRESH_TOKEN_EXPIRES: timedelta
        Lifetime of refresh tokens (``REFRESH_TOKEN_TTL_MINUTES``).
    REFRESH_TOKEN_BACKEND: str
        ``"sql"`` (default) or ``"redis"``; selects the refresh token store.
    REDIS_URL: str | None
        Redis connection string. Required when the backend is ``"redis"``.
    REDIS_REFRESH_RETENTION: timedelta
        How long an expired refresh record is kept in Redis so it can still
        be reported as expired before the key TTL reaps it.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    AUTH_LOGIN_RATE_LIMIT: str
        Flask-Limiter rule applied to ``POST /auth/login``.
    ERROR_INCLUDE_DETAILS: bool
        Adds raw exception text to 5xx envelopes. Follows ``DEBUG`` unless set.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"
    APP_ENV = "production"
    APP_VERSION = os.getenv("APP_VERSION", "dev")

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "CHANGE_ME_JWT")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(minutes=env_int("ACCESS_TOKEN_TTL_MINUTES", 60))
    REFRESH_TOKEN_EXPIRES = timedelta(minutes=env_int("REFRESH_TOKEN_TTL_MINUTES", 43200))

    # Refresh token storage
    REFRESH_TOKEN_BACKEND = os.getenv("REFRESH_TOKEN_BACKEND", "sql").strip().lower()
    REDIS_URL = os.getenv("REDIS_URL")
    REDIS_REFRESH_RETENTION = timedelta(hours=env_int("REDIS_REFRESH_RETENTION_HOURS", 24))

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Rate limiting
    AUTH_LOGIN_RATE_LIMIT = os.getenv("AUTH_LOGIN_RATE_LIMIT", "5 per minute")
    RATELIMIT_ENABLED = env_bool("RATELIMIT_ENABLED", True)
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False
    ERROR_INCLUDE_DETAILS = env_bool("ERROR_INCLUDE_DETAILS", False)

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")

    # Seeding
    SEED_DEFAULT_PASSWORD = os.getenv("SEED_DEFAULT_PASSWORD", "Password123")

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode and verbose 5xx envelopes by default.
    """

    APP_ENV = "development"
    DEBUG = env_bool("FLASK_DEBUG", True)
    ERROR_INCLUDE_DETAILS = env_bool("ERROR_INCLUDE_DETAILS", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Disables rate limiting and pins the SQL refresh token backend.
    """

    APP_ENV = "testing"
    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = False
    JWT_SECRET_KEY = "testing-secret-key-with-enough-entropy-for-hs256"
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(minutes=60)
    REFRESH_TOKEN_EXPIRES = timedelta(days=30)
    REFRESH_TOKEN_BACKEND = "sql"
    REDIS_URL = None
    RATELIMIT_ENABLED = False
    ERROR_INCLUDE_DETAILS = False


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug, SQL echoing and error details disabled while relying on
    WSGI-level log configuration for noise control.
    """

    APP_ENV = "production"
    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False
    ERROR_INCLUDE_DETAILS = False


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
