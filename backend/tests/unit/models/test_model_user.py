"""Tests for the User model."""

from __future__ import annotations

import pytest
from cms_api.models.user import Role, User
from sqlalchemy.exc import IntegrityError


def _user(email: str, **kwargs) -> User:
    u = User(name=kwargs.pop("name", "Tester"), email=email, **kwargs)
    u.password = kwargs.pop("password", "Secret123")
    return u


class TestUser:
    def test_password_hashing(self, session):
        u = _user("Test@Example.com")
        session.add(u)
        session.commit()
        assert u.password_hash != "Secret123"
        assert u.verify_password("Secret123") is True
        assert u.verify_password("wrong") is False

    def test_verify_password_with_unencodable_candidate(self):
        u = _user("s@example.com")
        assert u.verify_password("Secret\ud800") is False

    def test_password_is_write_only(self):
        u = _user("a@example.com")
        with pytest.raises(AttributeError):
            _ = u.password

    def test_empty_password_rejected(self):
        u = User(name="x", email="x@example.com")
        with pytest.raises(ValueError):
            u.password = ""

    def test_email_normalized_and_unique(self, session):
        u1 = _user("  Alice@Example.com ")
        session.add(u1)
        session.commit()
        assert u1.email == "alice@example.com"

        session.add(_user("alice@example.com", name="Alice 2"))
        with pytest.raises(IntegrityError):
            session.commit()

    def test_defaults_on_insert(self, session):
        u = _user("defaults@example.com")
        session.add(u)
        session.flush()
        assert u.role is Role.VIEWER
        assert u.is_active is True
        assert u.token_version == 0
        assert u.deleted_at is None
        assert u.is_deleted is False

    def test_role_coerced_from_string(self):
        u = _user("r@example.com", role="admin")
        assert u.role is Role.ADMIN
        assert u.has_role(Role.ADMIN, Role.EDITOR)
        assert not u.has_role(Role.VIEWER)

    def test_basic_validations(self):
        with pytest.raises(ValueError):
            User(name="x", email="")
        with pytest.raises(ValueError):
            User(name="x", email="not-an-email")
        with pytest.raises(ValueError):
            User(name="   ", email="ok@example.com")
