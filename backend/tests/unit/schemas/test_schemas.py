"""Validation rules of the request schemas."""

from __future__ import annotations

import pytest
from cms_api.schemas import (
    LoginSchema,
    LogoutSchema,
    ProfileUpdateSchema,
    RoleChangeSchema,
    UserCreateSchema,
    UserQuerySchema,
    UserUpdateSchema,
)
from marshmallow import ValidationError

VALID_USER = {
    "name": "Jane",
    "email": "jane@example.com",
    "password": "Passw0rdX",
    "password_confirmation": "Passw0rdX",
    "role": "EDITOR",
}


def test_login_requires_email_and_password():
    with pytest.raises(ValidationError) as info:
        LoginSchema().load({})
    assert set(info.value.messages) == {"email", "password"}


def test_logout_refresh_token_is_optional():
    assert LogoutSchema().load({}) == {"refresh_token": None}


def test_user_create_accepts_valid_payload_and_drops_confirmation():
    data = UserCreateSchema().load(VALID_USER)
    assert "password_confirmation" not in data
    assert data["is_active"] is True


@pytest.mark.parametrize(
    "password, fragment",
    [
        ("Sh0rt", "at least 8"),
        ("alllowercase1", "upper and lower"),
        ("NoDigitsHere", "number"),
    ],
)
def test_password_strength(password, fragment):
    payload = {**VALID_USER, "password": password, "password_confirmation": password}
    with pytest.raises(ValidationError) as info:
        UserCreateSchema().load(payload)
    assert any(fragment in msg for msg in info.value.messages["password"])


def test_password_confirmation_must_match():
    with pytest.raises(ValidationError) as info:
        UserCreateSchema().load({**VALID_USER, "password_confirmation": "Different1"})
    assert "password_confirmation" in info.value.messages


def test_unknown_role_rejected():
    with pytest.raises(ValidationError):
        UserCreateSchema().load({**VALID_USER, "role": "OWNER"})
    with pytest.raises(ValidationError):
        RoleChangeSchema().load({"role": "OWNER"})


def test_updates_are_partial():
    assert UserUpdateSchema().load({"name": "Only"}) == {"name": "Only"}
    assert ProfileUpdateSchema().load({}) == {}


def test_profile_password_change_needs_confirmation():
    with pytest.raises(ValidationError):
        ProfileUpdateSchema().load({"password": "Passw0rdX"})


def test_with_deleted_flag():
    assert UserQuerySchema().load({})["with_deleted"] is False
    assert UserQuerySchema().load({"with_deleted": "1"})["with_deleted"] is True


@pytest.mark.parametrize("field", ["name", "password"])
def test_lone_surrogates_rejected_on_write(field):
    payload = {**VALID_USER, field: "Passw0rd\ud800"}
    if field == "password":
        payload["password_confirmation"] = payload["password"]
    with pytest.raises(ValidationError) as info:
        UserCreateSchema().load(payload)
    assert field in info.value.messages

    with pytest.raises(ValidationError):
        ProfileUpdateSchema().load({"name": "Jane\ud800"})


def test_category_create_defaults_and_rules():
    from cms_api.schemas import CategoryCreateSchema

    data = CategoryCreateSchema().load({"name": "News", "type": "article"})
    assert data == {"name": "News", "type": "article", "order": 0, "is_active": True}

    with pytest.raises(ValidationError) as info:
        CategoryCreateSchema().load(
            {"name": "News", "type": "podcast", "slug": "Not A Slug", "order": -1}
        )
    assert set(info.value.messages) == {"type", "slug", "order"}


def test_category_reorder_needs_ids_and_orders():
    from cms_api.schemas import CategoryReorderSchema

    with pytest.raises(ValidationError):
        CategoryReorderSchema().load({"categories": []})
    with pytest.raises(ValidationError):
        CategoryReorderSchema().load({"categories": [{"id": 1}]})


def test_tag_color_must_be_hex():
    from cms_api.schemas import TagCreateSchema

    assert TagCreateSchema().load({"name": "x", "color": "#aBc123"})["color"] == "#aBc123"
    with pytest.raises(ValidationError) as info:
        TagCreateSchema().load({"name": "x", "color": "blue"})
    assert "color" in info.value.messages
