"""Category repository: listing, slug checks and ordering."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy import func, select, update

from cms_api.models.category import Category, CategoryType
from cms_api.repositories.base import BaseRepository


class CategoryRepository(BaseRepository[Category]):
    """Persistence-only repository for :class:`Category`."""

    model = Category

    def _updatable_fields(self) -> set[str]:
        return {"name", "slug", "description", "type", "order", "is_active"}

    def list(
        self,
        *,
        type: CategoryType | None = None,
        is_active: bool | None = None,
    ) -> list[Category]:
        """Live categories by ``order`` then ``id``, optionally filtered."""
        stmt = self._live_only(select(Category), include_deleted=False)
        if type is not None:
            stmt = stmt.where(Category.type == type)
        if is_active is not None:
            stmt = stmt.where(Category.is_active.is_(is_active))
        stmt = stmt.order_by(Category.order.asc(), Category.id.asc())
        return list(self.session.execute(stmt).scalars().all())

    def slug_taken(self, slug: str, *, exclude_id: int | None = None) -> bool:
        """``True`` when another category (tombstoned included) owns ``slug``."""
        stmt = select(Category.id).where(Category.slug == slug)
        if exclude_id is not None:
            stmt = stmt.where(Category.id != exclude_id)
        return self.session.execute(stmt.limit(1)).first() is not None

    def live_ids(self, ids: Iterable[int]) -> set[int]:
        wanted = set(ids)
        if not wanted:
            return set()
        stmt = select(Category.id).where(Category.id.in_(wanted), Category.deleted_at.is_(None))
        return set(self.session.execute(stmt).scalars().all())

    def set_orders(self, orders: Mapping[int, int]) -> None:
        """Write ``order`` for each ``{id: order}`` pair with one UPDATE per row."""
        for category_id, position in orders.items():
            self.session.execute(
                update(Category)
                .where(Category.id == category_id)
                .values(order=position)
                .execution_options(synchronize_session="fetch")
            )
        self.flush()

    def statistics(self) -> dict[str, Any]:
        """Counters over live rows, split by status and by type."""
        live = Category.deleted_at.is_(None)
        total = self.session.execute(select(func.count(Category.id)).where(live)).scalar() or 0
        active = (
            self.session.execute(
                select(func.count(Category.id)).where(live, Category.is_active.is_(True))
            ).scalar()
            or 0
        )
        rows = self.session.execute(
            select(Category.type, func.count(Category.id)).where(live).group_by(Category.type)
        ).all()
        found = {getattr(t, "value", t): int(n) for t, n in rows}
        return {
            "total": int(total),
            "active": int(active),
            "inactive": int(total) - int(active),
            "by_type": {t.value: found.get(t.value, 0) for t in CategoryType},
        }
