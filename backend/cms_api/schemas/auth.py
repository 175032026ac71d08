"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from cms_api.schemas.user import (
    PasswordConfirmationMixin,
    UserSchema,
    validate_encodable,
    validate_password_strength,
)


class LoginSchema(Schema):
    """Input payload for authenticating a user."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))


class RefreshSchema(Schema):
    refresh_token = fields.String(required=True, validate=validate.Length(min=1, max=512))


class LogoutSchema(Schema):
    refresh_token = fields.String(load_default=None, validate=validate.Length(min=1, max=512))


class ProfileUpdateSchema(PasswordConfirmationMixin, Schema):
    """Self-service profile changes (name, email, password)."""

    name = fields.String(validate=[validate.Length(min=1, max=255), validate_encodable])
    email = fields.Email(validate=validate.Length(max=254))
    password = fields.String(
        validate=[validate.Length(max=128), validate_encodable, validate_password_strength]
    )
    password_confirmation = fields.String()


class TokenPairSchema(Schema):
    """Response payload containing a token pair."""

    access_token = fields.String(required=True)
    refresh_token = fields.String(required=True)
    token_type = fields.String(required=True)
    expires_in = fields.Integer(required=True)


class LoginResponseSchema(TokenPairSchema):
    user = fields.Nested(UserSchema, required=True)


class SessionSchema(Schema):
    """One refresh session as shown on the profile (never the hash)."""

    id = fields.String(required=True)
    ip_address = fields.String(allow_none=True)
    user_agent = fields.String(allow_none=True)
    created_at = fields.DateTime(required=True)
    expires_at = fields.DateTime(required=True)

