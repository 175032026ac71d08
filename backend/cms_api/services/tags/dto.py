# cms_api/services/tags/dto.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from cms_api.services._shared.dto import UNSET, provided_changes


@dataclass(frozen=True, slots=True)
class TagCreateIn:
    """
    Input DTO for creating a tag.

    :param name: Display name.
    :param slug: Explicit slug; derived from ``name`` when omitted.
    :param color: ``#RRGGBB``; the model default applies when omitted.
    """

    name: str
    slug: str | None = None
    color: str | None = None


@dataclass(frozen=True, slots=True)
class TagUpdateIn:
    name: Any = UNSET
    slug: Any = UNSET
    color: Any = UNSET

    def changes(self) -> dict[str, Any]:
        return provided_changes(self)
