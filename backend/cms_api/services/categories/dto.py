# cms_api/services/categories/dto.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from cms_api.models.category import CategoryType
from cms_api.services._shared.dto import UNSET, provided_changes


@dataclass(frozen=True, slots=True)
class CategoryCreateIn:
    """
    Input DTO for creating a category.

    :param name: Display name.
    :param type: Content kind.
    :param slug: Explicit slug; derived from ``name`` when omitted.
    :param description: Optional free text.
    :param order: Listing position.
    :param is_active: Whether the category is enabled.
    """

    name: str
    type: CategoryType
    slug: str | None = None
    description: str | None = None
    order: int = 0
    is_active: bool = True


@dataclass(frozen=True, slots=True)
class CategoryUpdateIn:
    """Partial update. Fields left as ``UNSET`` are untouched; ``description`` may be cleared with ``None``."""

    name: Any = UNSET
    slug: Any = UNSET
    description: Any = UNSET
    type: Any = UNSET
    order: Any = UNSET
    is_active: Any = UNSET

    def changes(self) -> dict[str, Any]:
        return provided_changes(self)


@dataclass(frozen=True, slots=True)
class CategoryOrderIn:
    id: int
    order: int
