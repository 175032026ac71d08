"""Category administration endpoints (admins and editors)."""

from __future__ import annotations

from flask import Blueprint, request

from cms_api.api.deps import get_category_service, json_body, require_roles, success, timing
from cms_api.models.category import CategoryType
from cms_api.models.user import Role
from cms_api.schemas import (
    CategoryCreateSchema,
    CategoryQuerySchema,
    CategoryReorderSchema,
    CategorySchema,
    CategoryUpdateSchema,
)
from cms_api.services import CategoryCreateIn, CategoryOrderIn, CategoryUpdateIn

bp = Blueprint("categories", __name__, url_prefix="/categories")

STAFF = (Role.ADMIN, Role.EDITOR)

category_schema = CategorySchema()
category_list_schema = CategorySchema(many=True)
category_create_schema = CategoryCreateSchema()
category_update_schema = CategoryUpdateSchema()
category_query_schema = CategoryQuerySchema()
category_reorder_schema = CategoryReorderSchema()


@bp.get("")
@require_roles(*STAFF)
@timing
def list_categories():
    """All live categories by position; ``?type=`` and ``?is_active=`` filter."""

    query = category_query_schema.load(request.args)
    kind = query.get("type")
    categories = get_category_service().list(
        type=CategoryType(kind) if kind else None,
        is_active=query.get("is_active"),
    )
    return success(
        category_list_schema.dump(categories), message="Categories retrieved successfully"
    )


@bp.get("/statistics")
@require_roles(*STAFF)
@timing
def category_statistics():
    stats = get_category_service().statistics()
    return success(stats, message="Category statistics retrieved successfully")


@bp.get("/<int:category_id>")
@require_roles(*STAFF)
@timing
def get_category(category_id: int):
    category = get_category_service().get(category_id)
    return success(category_schema.dump(category), message="Category retrieved successfully")


@bp.post("")
@require_roles(*STAFF)
@timing
def create_category():
    data = category_create_schema.load(json_body())
    category = get_category_service().create(
        CategoryCreateIn(
            name=data["name"],
            type=CategoryType(data["type"]),
            slug=data.get("slug"),
            description=data.get("description"),
            order=data["order"],
            is_active=data["is_active"],
        )
    )
    return success(
        category_schema.dump(category), message="Category created successfully", status=201
    )


@bp.put("/reorder")
@require_roles(*STAFF)
@timing
def reorder_categories():
    """Set positions from ``{"categories": [{"id": 1, "order": 0}, ...]}``."""

    data = category_reorder_schema.load(json_body())
    get_category_service().reorder(
        [CategoryOrderIn(id=item["id"], order=item["order"]) for item in data["categories"]]
    )
    return success(message="Categories reordered successfully")


@bp.put("/<int:category_id>")
@require_roles(*STAFF)
@timing
def update_category(category_id: int):
    data = category_update_schema.load(json_body())
    if "type" in data:
        data["type"] = CategoryType(data["type"])
    category = get_category_service().update(category_id, CategoryUpdateIn(**data))
    return success(category_schema.dump(category), message="Category updated successfully")


@bp.patch("/<int:category_id>/status")
@require_roles(*STAFF)
@timing
def toggle_category_status(category_id: int):
    category = get_category_service().toggle_status(category_id)
    state = "activated" if category.is_active else "deactivated"
    return success(category_schema.dump(category), message=f"Category {state} successfully")


@bp.delete("/<int:category_id>")
@require_roles(*STAFF)
@timing
def delete_category(category_id: int):
    """Soft-delete a category; its slug stays reserved."""

    get_category_service().delete(category_id)
    return success(message="Category deleted successfully")
