"""Authentication endpoints: login, registration, rotation, logout and the caller's profile."""

from __future__ import annotations

from flask import Blueprint, current_app

from cms_api.api.deps import (
    current_identity,
    device_info,
    get_auth_service,
    json_body,
    require_auth,
    require_roles,
    success,
    timing,
)
from cms_api.api.v1.users import create_from_payload
from cms_api.core.extensions import limiter
from cms_api.models.user import Role
from cms_api.schemas import (
    LoginResponseSchema,
    LoginSchema,
    LogoutSchema,
    ProfileUpdateSchema,
    RefreshSchema,
    SessionSchema,
    TokenPairSchema,
    UserSchema,
)
from cms_api.services import LoginIn, LogoutIn, ProfileUpdateIn, RefreshIn

bp = Blueprint("auth", __name__, url_prefix="/auth")

login_schema = LoginSchema()
refresh_schema = RefreshSchema()
logout_schema = LogoutSchema()
profile_update_schema = ProfileUpdateSchema()
login_response_schema = LoginResponseSchema()
token_schema = TokenPairSchema()
session_list_schema = SessionSchema(many=True)
user_schema = UserSchema()


def _login_rate_limit() -> str:
    return str(current_app.config.get("AUTH_LOGIN_RATE_LIMIT", "5 per minute"))


@bp.post("/login")
@limiter.limit(_login_rate_limit)
@timing
def login():
    """Authenticate credentials and issue an access/refresh token pair."""

    data = login_schema.load(json_body())
    out = get_auth_service().login(
        LoginIn(email=data["email"], password=data["password"], device=device_info())
    )
    tokens = out.tokens
    body = login_response_schema.dump(
        {
            "user": out.user,
            "access_token": tokens.access_token,
            "refresh_token": tokens.refresh_token,
            "token_type": tokens.token_type,
            "expires_in": tokens.expires_in,
        }
    )
    return success(body, message="Login successful")


@bp.post("/register")
@require_roles(Role.ADMIN)
@timing
def register():
    """Create an account on behalf of an administrator; same rules as ``POST /users``."""

    user = create_from_payload(json_body())
    return success(user_schema.dump(user), message="User registered successfully", status=201)


@bp.post("/refresh")
@timing
def refresh():
    """Rotate a refresh token into a new pair."""

    data = refresh_schema.load(json_body())
    pair = get_auth_service().refresh(RefreshIn(refresh_token=data["refresh_token"]))
    return success(token_schema.dump(pair), message="Token refreshed successfully")


@bp.post("/logout")
@require_auth
@timing
def logout():
    """End the session bound to the supplied refresh token, if any."""

    data = logout_schema.load(json_body())
    identity = current_identity()
    get_auth_service().logout(
        LogoutIn(user_id=identity.user_id, refresh_token=data.get("refresh_token"))
    )
    return success(message="Logged out successfully")


@bp.post("/logout-all")
@require_auth
@timing
def logout_all():
    """Revoke every session of the caller."""

    get_auth_service().logout_all(current_identity().user_id)
    return success(message="Logged out from all devices successfully")


@bp.get("/profile")
@require_auth
@timing
def get_profile():
    """Return the caller and their active refresh sessions."""

    out = get_auth_service().get_profile(current_identity().user_id)
    body = user_schema.dump(out.user)
    body["sessions"] = session_list_schema.dump(out.sessions)
    return success(body, message="Profile retrieved successfully")


@bp.put("/profile")
@require_auth
@timing
def update_profile():
    """Update the caller's own name, email or password."""

    data = profile_update_schema.load(json_body())
    user = get_auth_service().update_profile(
        current_identity().user_id,
        ProfileUpdateIn(
            name=data.get("name"),
            email=data.get("email"),
            password=data.get("password"),
        ),
    )
    return success(user_schema.dump(user), message="Profile updated successfully")
