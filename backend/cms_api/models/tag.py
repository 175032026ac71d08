"""Tag model: free-form labels attached to content."""

from __future__ import annotations

import re

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, validates

from cms_api.core.extensions import db

from .base import PKMixin, ReprMixin, SoftDeleteMixin, TimestampMixin

DEFAULT_TAG_COLOR = "#3B82F6"
HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


class Tag(PKMixin, ReprMixin, TimestampMixin, SoftDeleteMixin, db.Model):
    """
    Content tag.

    ``slug`` is unique across live and tombstoned rows; ``color`` is a
    ``#RRGGBB`` hex string used by the console badges.
    """

    __tablename__ = "tags"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False)
    color: Mapped[str] = mapped_column(
        String(7), nullable=False, default=DEFAULT_TAG_COLOR, server_default=DEFAULT_TAG_COLOR
    )

    __table_args__ = (UniqueConstraint("slug", name="uq_tags_slug"),)

    @validates("name")
    def _normalize_name(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Name is required.")
        return value.strip()

    @validates("color")
    def _check_color(self, key: str, value: str) -> str:
        if not HEX_COLOR.match(value or ""):
            raise ValueError("Color must be a #RRGGBB hex code.")
        return value
