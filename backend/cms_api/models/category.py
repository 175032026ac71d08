"""Category model: editorial groupings for articles and videos."""

from __future__ import annotations

import enum

from sqlalchemy import Boolean, Enum, Integer, String, Text, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column, validates

from cms_api.core.extensions import db

from .base import PKMixin, ReprMixin, SoftDeleteMixin, TimestampMixin


class CategoryType(str, enum.Enum):
    """Kind of content a category groups."""

    ARTICLE = "article"
    VIDEO = "video"


class Category(PKMixin, ReprMixin, TimestampMixin, SoftDeleteMixin, db.Model):
    """
    Content category managed from the console.

    Fields
    ------
    name : str
        Display name (trimmed).
    slug : str
        URL key. Unique across live and tombstoned rows.
    description : str | None
        Free text.
    type : CategoryType
        ``article`` or ``video``.
    order : int
        Position in listings, ascending.
    is_active : bool
        Inactive categories stay listed in the console only.
    """

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[CategoryType] = mapped_column(
        Enum(
            CategoryType,
            native_enum=False,
            length=16,
            validate_strings=True,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default=text("0"))
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=text("1")
    )

    __table_args__ = (UniqueConstraint("slug", name="uq_categories_slug"),)

    @validates("name")
    def _normalize_name(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Name is required.")
        return value.strip()

    @validates("type")
    def _coerce_type(self, key: str, value: CategoryType | str) -> CategoryType:
        return value if isinstance(value, CategoryType) else CategoryType(str(value).lower())

    @validates("order")
    def _check_order(self, key: str, value: int) -> int:
        if value < 0:
            raise ValueError("Order must be at least 0.")
        return value
