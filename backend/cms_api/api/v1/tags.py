"""Tag administration endpoints (admins and editors)."""

from __future__ import annotations

from flask import Blueprint

from cms_api.api.deps import get_tag_service, json_body, require_roles, success, timing
from cms_api.models.user import Role
from cms_api.schemas import (
    TagBulkDeleteSchema,
    TagCreateSchema,
    TagFindOrCreateSchema,
    TagSchema,
    TagUpdateSchema,
)
from cms_api.services import TagCreateIn, TagUpdateIn

bp = Blueprint("tags", __name__, url_prefix="/tags")

STAFF = (Role.ADMIN, Role.EDITOR)

tag_schema = TagSchema()
tag_list_schema = TagSchema(many=True)
tag_create_schema = TagCreateSchema()
tag_update_schema = TagUpdateSchema()
tag_bulk_delete_schema = TagBulkDeleteSchema()
tag_find_or_create_schema = TagFindOrCreateSchema()


@bp.get("")
@require_roles(*STAFF)
@timing
def list_tags():
    tags = get_tag_service().list()
    return success(tag_list_schema.dump(tags), message="Tags retrieved successfully")


@bp.get("/statistics")
@require_roles(*STAFF)
@timing
def tag_statistics():
    stats = get_tag_service().statistics()
    return success(stats, message="Tag statistics retrieved successfully")


@bp.get("/<int:tag_id>")
@require_roles(*STAFF)
@timing
def get_tag(tag_id: int):
    tag = get_tag_service().get(tag_id)
    return success(tag_schema.dump(tag), message="Tag retrieved successfully")


@bp.post("")
@require_roles(*STAFF)
@timing
def create_tag():
    data = tag_create_schema.load(json_body())
    tag = get_tag_service().create(
        TagCreateIn(name=data["name"], slug=data.get("slug"), color=data.get("color"))
    )
    return success(tag_schema.dump(tag), message="Tag created successfully", status=201)


@bp.put("/<int:tag_id>")
@require_roles(*STAFF)
@timing
def update_tag(tag_id: int):
    data = tag_update_schema.load(json_body())
    tag = get_tag_service().update(tag_id, TagUpdateIn(**data))
    return success(tag_schema.dump(tag), message="Tag updated successfully")


@bp.delete("/<int:tag_id>")
@require_roles(*STAFF)
@timing
def delete_tag(tag_id: int):
    get_tag_service().delete(tag_id)
    return success(message="Tag deleted successfully")


@bp.post("/bulk-delete")
@require_roles(*STAFF)
@timing
def bulk_delete_tags():
    """Soft-delete every tag in ``{"ids": [...]}``; all ids must exist."""

    data = tag_bulk_delete_schema.load(json_body())
    count = get_tag_service().bulk_delete(data["ids"])
    return success({"deleted_count": count}, message=f"{count} tags deleted successfully")


@bp.post("/find-or-create")
@require_roles(*STAFF)
@timing
def find_or_create_tags():
    """Resolve ``{"tags": ["name", ...]}`` to tags, creating the missing ones."""

    data = tag_find_or_create_schema.load(json_body())
    tags = get_tag_service().find_or_create(data["tags"])
    return success(tag_list_schema.dump(tags), message="Tags found or created successfully")
