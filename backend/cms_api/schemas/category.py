"""Category resource schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from cms_api.models.category import CategoryType
from cms_api.schemas.user import validate_encodable
from cms_api.services._shared.slugs import SLUG_PATTERN

TYPE_CHOICES = [t.value for t in CategoryType]

NAME_RULES = [validate.Length(min=1, max=255), validate_encodable]
SLUG_RULES = [
    validate.Length(min=1, max=255),
    validate.Regexp(
        SLUG_PATTERN, error="Slug may only contain lowercase letters, digits and hyphens."
    ),
]


class CategoryCreateSchema(Schema):
    name = fields.String(required=True, validate=NAME_RULES)
    slug = fields.String(validate=SLUG_RULES)
    description = fields.String(allow_none=True, validate=validate_encodable)
    type = fields.String(required=True, validate=validate.OneOf(TYPE_CHOICES))
    order = fields.Integer(strict=True, load_default=0, validate=validate.Range(min=0))
    is_active = fields.Boolean(load_default=True)


class CategoryUpdateSchema(Schema):
    """Partial update; every field optional."""

    name = fields.String(validate=NAME_RULES)
    slug = fields.String(validate=SLUG_RULES)
    description = fields.String(allow_none=True, validate=validate_encodable)
    type = fields.String(validate=validate.OneOf(TYPE_CHOICES))
    order = fields.Integer(strict=True, validate=validate.Range(min=0))
    is_active = fields.Boolean()


class CategoryQuerySchema(Schema):
    """Listing filters read from the query string."""

    type = fields.String(validate=validate.OneOf(TYPE_CHOICES))
    is_active = fields.Boolean()


class CategoryOrderSchema(Schema):
    id = fields.Integer(required=True, strict=True, validate=validate.Range(min=1))
    order = fields.Integer(required=True, strict=True, validate=validate.Range(min=0))


class CategoryReorderSchema(Schema):
    categories = fields.List(
        fields.Nested(CategoryOrderSchema), required=True, validate=validate.Length(min=1)
    )


class CategorySchema(Schema):
    """Public representation of a category."""

    id = fields.Integer(required=True)
    name = fields.String(required=True)
    slug = fields.String(required=True)
    description = fields.String(allow_none=True)
    type = fields.Function(lambda c: getattr(c.type, "value", c.type))
    order = fields.Integer(required=True)
    is_active = fields.Boolean(required=True)
    created_at = fields.DateTime(required=True)
    updated_at = fields.DateTime(required=True)
