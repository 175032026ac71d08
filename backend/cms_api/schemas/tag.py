"""Tag resource schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from cms_api.models.tag import HEX_COLOR
from cms_api.schemas.category import NAME_RULES, SLUG_RULES
from cms_api.schemas.user import validate_encodable

_color = validate.Regexp(HEX_COLOR, error="Color must be a valid hex color code (e.g., #3B82F6).")


class TagCreateSchema(Schema):
    name = fields.String(required=True, validate=NAME_RULES)
    slug = fields.String(validate=SLUG_RULES)
    color = fields.String(validate=_color)


class TagUpdateSchema(Schema):
    name = fields.String(validate=NAME_RULES)
    slug = fields.String(validate=SLUG_RULES)
    color = fields.String(validate=_color)


class TagBulkDeleteSchema(Schema):
    ids = fields.List(
        fields.Integer(strict=True, validate=validate.Range(min=1)),
        required=True,
        validate=validate.Length(min=1),
    )


class TagFindOrCreateSchema(Schema):
    """Names to resolve; blank entries are ignored by the service."""

    tags = fields.List(
        fields.String(validate=[validate.Length(max=255), validate_encodable]),
        required=True,
        validate=validate.Length(min=1, max=100),
    )


class TagSchema(Schema):
    """Public representation of a tag."""

    id = fields.Integer(required=True)
    name = fields.String(required=True)
    slug = fields.String(required=True)
    color = fields.String(required=True)
    created_at = fields.DateTime(required=True)
    updated_at = fields.DateTime(required=True)
