# cms_api/services/users/dto.py
from __future__ import annotations

from dataclasses import dataclass

from cms_api.models.user import Role


@dataclass(frozen=True, slots=True)
class UserCreateIn:
    """
    Input DTO for creating an account from the admin console.

    :param name: Display name.
    :param email: Login email (normalized by the model).
    :param password: Raw password; confirmation is checked by the transport schema.
    :param role: Initial role.
    :param is_active: Whether the account can log in right away.
    """

    name: str
    email: str
    password: str
    role: Role
    is_active: bool = True


@dataclass(frozen=True, slots=True)
class UserUpdateIn:
    """Partial admin update. ``None`` means "leave unchanged"."""

    name: str | None = None
    email: str | None = None
    password: str | None = None
    role: Role | None = None
    is_active: bool | None = None

    def changes(self) -> dict[str, object]:
        return {
            k: getattr(self, k)
            for k in ("name", "email", "password", "role", "is_active")
            if getattr(self, k) is not None
        }
