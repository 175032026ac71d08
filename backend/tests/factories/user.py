"""Factory Boy definition for :class:`cms_api.models.user.User`."""

from __future__ import annotations

import factory
from cms_api.models.user import Role, User

from tests.factories import BaseFactory

DEFAULT_PASSWORD = "Passw0rd!"


class UserFactory(BaseFactory):
    """
    Build persisted :class:`cms_api.models.user.User` instances.

    Notes
    -----
    - Pass ``password="..."`` to choose the plain-text password; it is hashed
      through the model's write-only setter.
    - Use ``deleted_at=...`` to create tombstoned accounts.
    """

    class Meta:
        model = User

    id = None  # let autoincrement handle it
    name = factory.Sequence(lambda n: f"User {n}")
    email = factory.Sequence(lambda n: f"user{n}@example.com")
    role = Role.EDITOR
    is_active = True
    password_hash = factory.LazyFunction(lambda: "")  # set via postgen

    @factory.post_generation
    def password(obj, create, extracted, **kwargs):
        """Set password using model setter (ensures hashing)."""
        obj.password = extracted or DEFAULT_PASSWORD


class AdminFactory(UserFactory):
    role = Role.ADMIN


class ViewerFactory(UserFactory):
    role = Role.VIEWER
