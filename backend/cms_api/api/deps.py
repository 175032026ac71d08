"""Shared API helpers: service wiring, bearer authentication and envelopes."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request

from cms_api.core.extensions import get_redis
from cms_api.core.logger import ensure_request_id
from cms_api.infra.jwt.flask_jwt_access_token_codec import FlaskJWTAccessTokenCodec
from cms_api.infra.redis.redis_refresh_token_store import RedisRefreshTokenStore
from cms_api.infra.sql.sql_refresh_token_store import SQLRefreshTokenStore
from cms_api.models.user import Role
from cms_api.services import (
    AuthService,
    AuthTokenConfig,
    CategoryService,
    DeviceInfo,
    Identity,
    ServiceContext,
    TagService,
    UserService,
)
from cms_api.services._shared.errors import AuthenticationRequired, TokenMalformed
from cms_api.services._shared.policies import authorize
from cms_api.services._shared.ports import RefreshTokenStore

F = TypeVar("F", bound=Callable[..., Any])


# ------------------------------------------------------------------ #
# Service wiring
# ------------------------------------------------------------------ #


def get_refresh_store() -> RefreshTokenStore:
    """Build the refresh store selected by ``REFRESH_TOKEN_BACKEND``."""
    backend = current_app.config.get("REFRESH_TOKEN_BACKEND", "sql")
    if backend == "redis":
        return RedisRefreshTokenStore(
            get_redis(), retention=current_app.config["REDIS_REFRESH_RETENTION"]
        )
    if backend == "sql":
        return SQLRefreshTokenStore()
    raise RuntimeError(f"Unknown REFRESH_TOKEN_BACKEND {backend!r}")


def service_context() -> ServiceContext:
    identity: Identity | None = g.get("identity")
    return ServiceContext(
        actor_id=identity.user_id if identity else None,
        request_id=ensure_request_id(),
    )


def get_auth_service() -> AuthService:
    """Return a request-scoped :class:`AuthService` wired from app config."""
    cfg = current_app.config
    return AuthService(
        codec=FlaskJWTAccessTokenCodec(expires=cfg["JWT_ACCESS_TOKEN_EXPIRES"]),
        refresh_store=get_refresh_store(),
        token_cfg=AuthTokenConfig(refresh_expires=cfg["REFRESH_TOKEN_EXPIRES"]),
        ctx=service_context(),
    )


def get_user_service() -> UserService:
    return UserService(sessions=get_auth_service(), ctx=service_context())


def get_category_service() -> CategoryService:
    return CategoryService(ctx=service_context())


def get_tag_service() -> TagService:
    return TagService(ctx=service_context())


def device_info() -> DeviceInfo:
    """Client address (after ProxyFix) and ``User-Agent`` of the current request."""
    agent = request.headers.get("User-Agent")
    return DeviceInfo(
        ip_address=request.remote_addr,
        user_agent=agent[:512] if agent else None,
    )


# ------------------------------------------------------------------ #
# Authentication / authorization decorators
# ------------------------------------------------------------------ #


def _bearer_token() -> str:
    header = request.headers.get("Authorization", "").strip()
    if not header:
        raise AuthenticationRequired()
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise TokenMalformed("Authorization header must be 'Bearer <token>'")
    return token.strip()


def require_auth(func: F) -> F:
    """Resolve the bearer token into ``g.identity`` or fail with 401."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        g.identity = get_auth_service().authenticate(_bearer_token())
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def require_roles(*roles: Role | str) -> Callable[[F], F]:
    """Authenticate, then let the request through only for ``roles``."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            authorize(g.get("identity"), roles)
            return func(*args, **kwargs)

        return require_auth(wrapper)  # type: ignore[return-value]

    return decorator


def current_identity() -> Identity:
    identity: Identity | None = g.get("identity")
    if identity is None:
        raise AuthenticationRequired()
    return identity


# ------------------------------------------------------------------ #
# Responses
# ------------------------------------------------------------------ #


def success(data: Any = None, *, message: str, status: int = 200) -> Response:
    """Render the success envelope ``{status, message, data?}``."""
    body: dict[str, Any] = {"status": status, "message": message}
    if data is not None:
        body["data"] = data
    response = jsonify(body)
    response.status_code = status
    return response


def json_body() -> dict[str, Any]:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request.endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
