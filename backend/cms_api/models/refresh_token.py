"""Server-side refresh session records (SQL backend)."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cms_api.core.extensions import db

from .base import PKMixin, ReprMixin

if TYPE_CHECKING:
    from .user import User


class RefreshToken(PKMixin, ReprMixin, db.Model):
    """
    One row per active device session.

    Only the SHA-256 hex digest of the raw token is stored. The raw value is
    handed to the client once, at login or rotation.

    Fields
    ------
    user_id : int
        Owner (``ON DELETE CASCADE``).
    token_hash : str
        SHA-256 hex digest of the raw refresh value. Unique.
    token_version : int
        Owner's ``token_version`` at issuance.
    expires_at : datetime
        Absolute expiry.
    ip_address / user_agent : str | None
        Diagnostic device metadata, copied forward on rotation.
    """

    __tablename__ = "refresh_tokens"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    token_hash: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    token_version: Mapped[int] = mapped_column(Integer, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(512), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    user: Mapped[User] = relationship(back_populates="refresh_tokens")
