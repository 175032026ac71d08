"""User administration endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from cms_api.api.deps import get_user_service, json_body, require_roles, success, timing
from cms_api.models.user import Role
from cms_api.schemas import (
    RoleChangeSchema,
    UserCreateSchema,
    UserQuerySchema,
    UserSchema,
    UserUpdateSchema,
)
from cms_api.services import UserCreateIn, UserUpdateIn

bp = Blueprint("users", __name__, url_prefix="/users")

user_schema = UserSchema()
user_create_schema = UserCreateSchema()
user_update_schema = UserUpdateSchema()
user_query_schema = UserQuerySchema()
role_change_schema = RoleChangeSchema()


def create_from_payload(payload):
    """Validate an account payload and create it. Shared with ``POST /auth/register``."""

    data = user_create_schema.load(payload)
    return get_user_service().create(
        UserCreateIn(
            name=data["name"],
            email=data["email"],
            password=data["password"],
            role=Role(data["role"]),
            is_active=data["is_active"],
        )
    )


@bp.post("")
@require_roles(Role.ADMIN)
@timing
def create_user():
    """Create a new account."""

    user = create_from_payload(json_body())
    return success(user_schema.dump(user), message="User created successfully", status=201)


@bp.get("/statistics")
@require_roles(Role.ADMIN, Role.EDITOR)
@timing
def user_statistics():
    stats = get_user_service().statistics()
    return success(stats, message="Statistics retrieved successfully")


@bp.get("/<int:user_id>")
@require_roles(Role.ADMIN, Role.EDITOR)
@timing
def get_user(user_id: int):
    """Return one account; ``?with_deleted=1`` also finds soft-deleted ones."""

    query = user_query_schema.load(request.args)
    user = get_user_service().get(user_id, with_deleted=query["with_deleted"])
    return success(user_schema.dump(user), message="User retrieved successfully")


@bp.put("/<int:user_id>")
@require_roles(Role.ADMIN)
@timing
def update_user(user_id: int):
    data = user_update_schema.load(json_body())
    role = data.get("role")
    user = get_user_service().update(
        user_id,
        UserUpdateIn(
            name=data.get("name"),
            email=data.get("email"),
            password=data.get("password"),
            role=Role(role) if role else None,
            is_active=data.get("is_active"),
        ),
    )
    return success(user_schema.dump(user), message="User updated successfully")


@bp.patch("/<int:user_id>/status")
@require_roles(Role.ADMIN)
@timing
def toggle_user_status(user_id: int):
    """Activate or deactivate an account; deactivation ends all its sessions."""

    user = get_user_service().toggle_status(user_id)
    state = "activated" if user.is_active else "deactivated"
    return success(user_schema.dump(user), message=f"User {state} successfully")


@bp.patch("/<int:user_id>/role")
@require_roles(Role.ADMIN)
@timing
def change_user_role(user_id: int):
    data = role_change_schema.load(json_body())
    user = get_user_service().change_role(user_id, Role(data["role"]))
    return success(user_schema.dump(user), message="User role updated successfully")


@bp.delete("/<int:user_id>")
@require_roles(Role.ADMIN)
@timing
def delete_user(user_id: int):
    """Soft-delete an account."""

    get_user_service().delete(user_id)
    return success(message="User deleted successfully")


@bp.post("/<int:user_id>/restore")
@require_roles(Role.ADMIN)
@timing
def restore_user(user_id: int):
    user = get_user_service().restore(user_id)
    return success(user_schema.dump(user), message="User restored successfully")


@bp.delete("/<int:user_id>/force")
@require_roles(Role.ADMIN)
@timing
def force_delete_user(user_id: int):
    """Permanently remove an account and its sessions."""

    get_user_service().force_delete(user_id)
    return success(message="User permanently deleted")
