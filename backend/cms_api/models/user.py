"""User model: console staff accounts and their credentials."""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Any

from sqlalchemy import Boolean, Enum, Integer, String, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates
from werkzeug.security import check_password_hash, generate_password_hash

from cms_api.core.extensions import db

from .base import PKMixin, ReprMixin, SoftDeleteMixin, TimestampMixin

if TYPE_CHECKING:
    from .refresh_token import RefreshToken


def password_matches(pwhash: str, raw: str) -> bool:
    """
    Compare ``raw`` with ``pwhash``.

    A candidate that cannot be encoded as UTF-8 (a lone surrogate from a JSON
    body) never matches.
    """
    try:
        return bool(check_password_hash(pwhash, raw))
    except UnicodeEncodeError:
        return False


class Role(str, enum.Enum):
    """Coarse-grained authorization tag checked by the role gate."""

    ADMIN = "ADMIN"
    EDITOR = "EDITOR"
    VIEWER = "VIEWER"


class User(PKMixin, ReprMixin, TimestampMixin, SoftDeleteMixin, db.Model):
    """
    Console account (admin, editor or viewer).

    Fields
    ------
    name : str
        Display name.
    email : str
        Login email. Stored normalized (lowercase, trimmed).
    password_hash : str
        Hashed password (write-only setter via ``password``).
    role : Role
        Authorization tag.
    is_active : bool
        Inactive accounts cannot log in, refresh or call the API.
    token_version : int
        Generation counter starting at 0. Every global revocation increments it
        with a single ``UPDATE``; tokens carrying an older snapshot are stale.
    deleted_at : datetime | None
        Soft-delete tombstone (from mixin).
    """

    __tablename__ = "users"

    # Columns
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(254), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(254), nullable=False)
    role: Mapped[Role] = mapped_column(
        Enum(Role, native_enum=False, length=16, validate_strings=True),
        nullable=False,
        default=Role.VIEWER,
        server_default=Role.VIEWER.value,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=text("1")
    )
    token_version: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0")
    )

    refresh_tokens: Mapped[list[RefreshToken]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    # Constraints & indexes
    __table_args__ = (UniqueConstraint("email", name="uq_users_email"),)

    # -------------------- Password API --------------------
    @property
    def password(self) -> Any:  # pragma: no cover - explicit write-only contract
        """
        Disallow reading passwords.

        :raises AttributeError: Always, to ensure password is write-only.
        """
        raise AttributeError("Password is write-only.")

    @password.setter
    def password(self, raw: str) -> None:
        if not isinstance(raw, str) or not raw:
            raise ValueError("Password must be a non-empty string.")
        self.password_hash = generate_password_hash(raw)

    def verify_password(self, raw: str) -> bool:
        """
        Verify a password against the stored hash.

        :param raw: Plain text password candidate.
        :returns: ``True`` if it matches; otherwise ``False``.
        """
        if not self.password_hash:
            return False
        return password_matches(self.password_hash, raw)

    def has_role(self, *roles: Role) -> bool:
        return self.role in roles

    # -------------------- Validators --------------------
    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize and validate email.

        :raises ValueError: If email is missing or malformed.
        """
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        v = value.strip().lower()
        # Minimal sanity check; full validation happens at API layer.
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Email format looks invalid.")
        return v

    @validates("name")
    def _normalize_name(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Name is required.")
        return value.strip()

    @validates("role")
    def _coerce_role(self, key: str, value: Role | str) -> Role:
        return value if isinstance(value, Role) else Role(str(value).upper())
