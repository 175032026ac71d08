# cms_api/services/_shared/dto.py
from __future__ import annotations

from dataclasses import fields
from typing import Any, Final


class _Unset:
    """Marker for a partial-update field the caller did not send."""

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Final = _Unset()


def provided_changes(dto: Any) -> dict[str, Any]:
    """Fields of dataclass ``dto`` that are not :data:`UNSET`. ``None`` is a real value."""
    return {f.name: getattr(dto, f.name) for f in fields(dto) if getattr(dto, f.name) is not UNSET}
