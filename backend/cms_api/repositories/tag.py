"""Tag repository exposing persistence-focused helpers.

Lookups by slug see tombstoned rows too, because the slug unique constraint
spans them. Transaction management stays with the services.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import cast

from sqlalchemy import func, select

from cms_api.models.tag import Tag
from cms_api.repositories.base import BaseRepository


class TagRepository(BaseRepository[Tag]):
    """Persist :class:`Tag` rows and expose simple lookup helpers."""

    model = Tag

    def _updatable_fields(self) -> set[str]:
        return {"name", "slug", "color"}

    def list(self) -> list[Tag]:
        """Live tags by name."""
        stmt = self._live_only(select(Tag), include_deleted=False).order_by(
            Tag.name.asc(), Tag.id.asc()
        )
        return list(self.session.execute(stmt).scalars().all())

    def get_by_slug(self, slug: str, *, include_deleted: bool = False) -> Tag | None:
        stmt = self._live_only(select(Tag).where(Tag.slug == slug), include_deleted=include_deleted)
        return cast(Tag | None, self.session.execute(stmt).scalars().first())

    def slug_taken(self, slug: str, *, exclude_id: int | None = None) -> bool:
        stmt = select(Tag.id).where(Tag.slug == slug)
        if exclude_id is not None:
            stmt = stmt.where(Tag.id != exclude_id)
        return self.session.execute(stmt.limit(1)).first() is not None

    def get_many(self, ids: Iterable[int]) -> list[Tag]:
        """Live tags among ``ids``, in id order."""
        wanted = set(ids)
        if not wanted:
            return []
        stmt = select(Tag).where(Tag.id.in_(wanted), Tag.deleted_at.is_(None)).order_by(Tag.id)
        return list(self.session.execute(stmt).scalars().all())

    def statistics(self, *, recent_since: datetime) -> dict[str, int]:
        live = Tag.deleted_at.is_(None)
        total = self.session.execute(select(func.count(Tag.id)).where(live)).scalar() or 0
        recent = (
            self.session.execute(
                select(func.count(Tag.id)).where(live, Tag.created_at >= recent_since)
            ).scalar()
            or 0
        )
        return {"total": int(total), "recently_created": int(recent)}
