# cms_api/services/categories/service.py
from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from sqlalchemy.exc import IntegrityError

from cms_api.models.category import Category, CategoryType
from cms_api.services._shared.base import BaseService
from cms_api.services._shared.errors import (
    CategoryNotFound,
    DuplicateSlugError,
    FieldValidationError,
    violates,
)
from cms_api.services._shared.slugs import slugify
from cms_api.services.categories.dto import CategoryCreateIn, CategoryOrderIn, CategoryUpdateIn

logger = logging.getLogger(__name__)


def is_category_slug_conflict(exc: IntegrityError) -> bool:
    return violates(exc, "uq_categories_slug") or violates(exc, "categories.slug")


def _derived_slug(name: str) -> str:
    slug = slugify(name)
    if not slug:
        raise FieldValidationError("slug", "A slug could not be derived from the name.")
    return slug


class CategoryService(BaseService):
    """
    Console management of content categories.

    Slugs are derived from the name when the caller omits one and are unique
    across live and soft-deleted rows. A clash is reported as a validation
    error on ``slug``; no suffix is appended.
    """

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #

    def list(
        self,
        *,
        type: CategoryType | None = None,
        is_active: bool | None = None,
    ) -> list[Category]:
        with self.rw_uow() as uow:
            return uow.categories.list(type=type, is_active=is_active)

    def get(self, category_id: int) -> Category:
        """:raises CategoryNotFound: No live category with this id."""
        with self.rw_uow() as uow:
            category = uow.categories.get(category_id)
            if category is None:
                raise CategoryNotFound(category_id)
            return category

    def statistics(self) -> dict[str, Any]:
        with self.rw_uow() as uow:
            return uow.categories.statistics()

    # ------------------------------------------------------------------ #
    # Writes
    # ------------------------------------------------------------------ #

    def create(self, dto: CategoryCreateIn) -> Category:
        """
        Create a category.

        :raises DuplicateSlugError: The slug belongs to another category.
        :raises FieldValidationError: No slug given and none derivable from the name.
        """
        slug = dto.slug or _derived_slug(dto.name)
        try:
            with self.rw_uow() as uow:
                if uow.categories.slug_taken(slug):
                    raise DuplicateSlugError(slug)
                category = Category(
                    name=dto.name,
                    slug=slug,
                    description=dto.description,
                    type=dto.type,
                    order=dto.order,
                    is_active=dto.is_active,
                )
                uow.categories.add(category)
        except IntegrityError as exc:
            if is_category_slug_conflict(exc):
                raise DuplicateSlugError(slug) from exc
            raise
        logger.info(
            "category created",
            extra={"event": "categories.created", "category_id": category.id},
        )
        return category

    def update(self, category_id: int, dto: CategoryUpdateIn) -> Category:
        """
        Partially update a category.

        A rename without an explicit slug regenerates the slug from the new name.

        :raises CategoryNotFound: No live category with this id.
        :raises DuplicateSlugError: The resulting slug belongs to another category.
        """
        changes = dto.changes()
        try:
            with self.rw_uow() as uow:
                category = uow.categories.get(category_id)
                if category is None:
                    raise CategoryNotFound(category_id)
                name = changes.get("name")
                if name is not None and name.strip() != category.name and not changes.get("slug"):
                    changes["slug"] = _derived_slug(name)
                slug = changes.get("slug")
                if slug and uow.categories.slug_taken(slug, exclude_id=category_id):
                    raise DuplicateSlugError(slug)
                uow.categories.assign_updates(category, changes)
        except IntegrityError as exc:
            if is_category_slug_conflict(exc):
                raise DuplicateSlugError(str(changes.get("slug", ""))) from exc
            raise
        logger.info(
            "category updated",
            extra={"event": "categories.updated", "category_id": category_id},
        )
        return category

    def toggle_status(self, category_id: int) -> Category:
        with self.rw_uow() as uow:
            category = uow.categories.get(category_id)
            if category is None:
                raise CategoryNotFound(category_id)
            category.is_active = not category.is_active
            uow.categories.flush()
            active = category.is_active
        logger.info(
            "category %s",
            "activated" if active else "deactivated",
            extra={"event": "categories.status_changed", "category_id": category_id},
        )
        return category

    def reorder(self, items: Sequence[CategoryOrderIn]) -> None:
        """
        Set the listing position of several categories in one transaction.

        :raises FieldValidationError: An id does not match a live category.
            Nothing is written in that case.
        """
        orders = {item.id: item.order for item in items}
        with self.rw_uow() as uow:
            if uow.categories.live_ids(orders) != set(orders):
                raise FieldValidationError("categories", "One or more category IDs do not exist.")
            uow.categories.set_orders(orders)
        logger.info(
            "categories reordered",
            extra={"event": "categories.reordered", "count": len(orders)},
        )

    def delete(self, category_id: int) -> None:
        """Soft-delete a category. Its slug stays reserved."""
        with self.rw_uow() as uow:
            category = uow.categories.get(category_id)
            if category is None:
                raise CategoryNotFound(category_id)
            uow.categories.delete(category)
        logger.info(
            "category deleted",
            extra={"event": "categories.deleted", "category_id": category_id},
        )
