"""Unit tests for the role-based authorization gate."""

from __future__ import annotations

import pytest
from cms_api.models.user import Role
from cms_api.services._shared.errors import AuthenticationRequired, PermissionDenied
from cms_api.services._shared.policies import authorize
from cms_api.services.auth.dto import Identity


def _identity(role: Role) -> Identity:
    return Identity(user_id=1, role=role, token_version=0)


def test_matching_role_passes_and_returns_identity():
    ident = _identity(Role.ADMIN)
    assert authorize(ident, {Role.ADMIN}) is ident
    assert authorize(_identity(Role.EDITOR), [Role.ADMIN, Role.EDITOR]).role is Role.EDITOR


def test_editor_on_admin_only_endpoint_is_denied():
    with pytest.raises(PermissionDenied) as info:
        authorize(_identity(Role.EDITOR), {Role.ADMIN})
    assert info.value.details == {"required_roles": ["ADMIN"], "your_role": "EDITOR"}


def test_missing_identity_fails_before_role_check():
    with pytest.raises(AuthenticationRequired):
        authorize(None, {Role.ADMIN})
    # Even an empty role set reports the missing identity first
    with pytest.raises(AuthenticationRequired):
        authorize(None, set())


def test_empty_role_set_is_a_programming_error():
    with pytest.raises(ValueError):
        authorize(_identity(Role.ADMIN), set())


def test_roles_compare_by_name():
    assert authorize(_identity(Role.VIEWER), {"viewer"}).role is Role.VIEWER
