"""User resource schemas."""

from __future__ import annotations

import re

from marshmallow import (
    Schema,
    ValidationError,
    fields,
    post_load,
    validate,
    validates_schema,
)

from cms_api.models.user import Role

ROLE_CHOICES = [r.value for r in Role]


def validate_encodable(value: str) -> None:
    """Reject text that cannot be stored as UTF-8 (lone surrogates)."""
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        raise ValidationError("Contains characters that are not valid text.") from None


def validate_password_strength(value: str) -> None:
    """Require at least 8 characters with upper case, lower case and a digit."""
    problems = []
    if len(value) < 8:
        problems.append("Password must be at least 8 characters.")
    if not (re.search(r"[a-z]", value) and re.search(r"[A-Z]", value)):
        problems.append("Password must contain both upper and lower case letters.")
    if not re.search(r"\d", value):
        problems.append("Password must contain at least one number.")
    if problems:
        raise ValidationError(problems)


class PasswordConfirmationMixin:
    """Reject payloads whose ``password`` and ``password_confirmation`` differ."""

    @validates_schema
    def _check_confirmation(self, data, **kwargs):
        if "password" in data and data["password"] != data.get("password_confirmation"):
            raise ValidationError(
                "Password confirmation does not match.", field_name="password_confirmation"
            )

    @post_load
    def _drop_confirmation(self, data, **kwargs):
        data.pop("password_confirmation", None)
        return data


class UserCreateSchema(PasswordConfirmationMixin, Schema):
    """Payload for creating a console account."""

    name = fields.String(
        required=True, validate=[validate.Length(min=1, max=255), validate_encodable]
    )
    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(
        required=True,
        load_only=True,
        validate=[validate.Length(max=128), validate_encodable, validate_password_strength],
    )
    password_confirmation = fields.String(required=True, load_only=True)
    role = fields.String(required=True, validate=validate.OneOf(ROLE_CHOICES))
    is_active = fields.Boolean(load_default=True)


class UserUpdateSchema(PasswordConfirmationMixin, Schema):
    """Partial admin update; every field optional."""

    name = fields.String(validate=[validate.Length(min=1, max=255), validate_encodable])
    email = fields.Email(validate=validate.Length(max=254))
    password = fields.String(
        load_only=True,
        validate=[validate.Length(max=128), validate_encodable, validate_password_strength],
    )
    password_confirmation = fields.String(load_only=True)
    role = fields.String(validate=validate.OneOf(ROLE_CHOICES))
    is_active = fields.Boolean()


class RoleChangeSchema(Schema):
    role = fields.String(required=True, validate=validate.OneOf(ROLE_CHOICES))


class UserQuerySchema(Schema):
    """Query string for single-user reads."""

    with_deleted = fields.Boolean(load_default=False)


class UserSchema(Schema):
    """Public representation of a user entity."""

    id = fields.Integer(required=True)
    name = fields.String(required=True)
    email = fields.Email(required=True)
    role = fields.Function(lambda u: getattr(u.role, "value", u.role))
    is_active = fields.Boolean(required=True)
    created_at = fields.DateTime(required=True)
    updated_at = fields.DateTime(required=True)
    deleted_at = fields.DateTime(allow_none=True)
