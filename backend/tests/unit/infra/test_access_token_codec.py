"""Unit tests for the Flask-JWT-Extended access token codec."""

from __future__ import annotations

from datetime import timedelta
from types import SimpleNamespace

import pytest
from cms_api.infra.jwt.flask_jwt_access_token_codec import FlaskJWTAccessTokenCodec
from cms_api.models.user import Role
from cms_api.services._shared.errors import TokenExpired, TokenInvalid, TokenMalformed
from flask_jwt_extended import create_access_token, create_refresh_token


@pytest.fixture()
def codec(app):
    return FlaskJWTAccessTokenCodec(expires=timedelta(minutes=60))


def _subject(**kwargs):
    return SimpleNamespace(**{"id": 5, "role": Role.EDITOR, "token_version": 2, **kwargs})


def test_issue_then_verify(codec):
    claims = codec.verify(codec.issue(_subject()))
    assert claims.subject_id == 5
    assert claims.role == "EDITOR"
    assert claims.token_version == 2
    assert claims.issued_at is not None
    assert claims.jti
    assert (claims.expires_at - claims.issued_at) == timedelta(minutes=60)
    assert codec.expires_in == 3600


def test_expired_token(app):
    codec = FlaskJWTAccessTokenCodec(expires=timedelta(seconds=-10))
    with pytest.raises(TokenExpired):
        codec.verify(codec.issue(_subject()))


def test_garbage_and_foreign_signature(codec, app):
    with pytest.raises(TokenInvalid):
        codec.verify("not-a-jwt")

    token = codec.issue(_subject())
    app.config["JWT_SECRET_KEY"] = "another-secret-key-with-enough-entropy-for-hs256"
    try:
        with pytest.raises(TokenInvalid):
            codec.verify(token)
    finally:
        app.config["JWT_SECRET_KEY"] = "testing-secret-key-with-enough-entropy-for-hs256"


def test_refresh_type_jwt_is_not_an_access_token(codec):
    token = create_refresh_token(identity="5", additional_claims={"role": "EDITOR", "tv": 0})
    with pytest.raises(TokenInvalid):
        codec.verify(token)


@pytest.mark.parametrize(
    "claims",
    [
        {"tv": 0},
        {"role": "EDITOR"},
        {"role": "EDITOR", "tv": "zero"},
        {"role": "JANITOR", "tv": 0},
    ],
)
def test_missing_or_bad_claims_are_malformed(codec, claims):
    token = create_access_token(identity="5", additional_claims=claims)
    with pytest.raises(TokenMalformed):
        codec.verify(token)


def test_non_numeric_subject_is_malformed(codec):
    token = create_access_token(identity="abc", additional_claims={"role": "EDITOR", "tv": 0})
    with pytest.raises(TokenMalformed):
        codec.verify(token)
