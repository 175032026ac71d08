"""Fixtures shared by the HTTP-level tests."""

from __future__ import annotations

import pytest

from tests.factories.user import AdminFactory, UserFactory, ViewerFactory
from tests.helpers.http import bearer, login


@pytest.fixture()
def admin(session):
    user = AdminFactory(email="admin@agency.com")
    session.commit()
    return user


@pytest.fixture()
def editor(session):
    user = UserFactory(email="editor@agency.com")
    session.commit()
    return user


@pytest.fixture()
def viewer(session):
    user = ViewerFactory(email="viewer@agency.com")
    session.commit()
    return user


@pytest.fixture()
def admin_headers(client, admin):
    return bearer(login(client, admin.email)["access_token"])


@pytest.fixture()
def editor_headers(client, editor):
    return bearer(login(client, editor.email)["access_token"])
