# cms_api/services/tags/service.py
from __future__ import annotations

import logging
import random
from collections.abc import Iterable, Sequence
from datetime import timedelta
from typing import Any

from sqlalchemy.exc import IntegrityError

from cms_api.models.tag import Tag
from cms_api.services._shared.base import BaseService, ServiceContext
from cms_api.services._shared.errors import (
    DuplicateSlugError,
    FieldValidationError,
    TagNotFound,
    violates,
)
from cms_api.services._shared.slugs import slugify
from cms_api.services.tags.dto import TagCreateIn, TagUpdateIn

logger = logging.getLogger(__name__)

# Badge colors handed to tags created implicitly by name
TAG_PALETTE = (
    "#3B82F6",
    "#10B981",
    "#F59E0B",
    "#EF4444",
    "#8B5CF6",
    "#EC4899",
    "#06B6D4",
    "#F97316",
)
RECENT_WINDOW = timedelta(days=7)


def is_tag_slug_conflict(exc: IntegrityError) -> bool:
    return violates(exc, "uq_tags_slug") or violates(exc, "tags.slug")


def _derived_slug(name: str, *, field: str = "slug") -> str:
    slug = slugify(name)
    if not slug:
        raise FieldValidationError(field, "A slug could not be derived from the name.")
    return slug


class TagService(BaseService):
    """
    Console management of content tags.

    Same slug rules as categories. :meth:`find_or_create` lets editors attach
    tags by name without creating them first.
    """

    def __init__(
        self, *, ctx: ServiceContext | None = None, rng: random.Random | None = None
    ) -> None:
        """:param rng: Source for palette picks; seed it to make colors reproducible."""
        super().__init__(ctx=ctx)
        self.rng = rng or random.Random()

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #

    def list(self) -> list[Tag]:
        with self.rw_uow() as uow:
            return uow.tags.list()

    def get(self, tag_id: int) -> Tag:
        """:raises TagNotFound: No live tag with this id."""
        with self.rw_uow() as uow:
            tag = uow.tags.get(tag_id)
            if tag is None:
                raise TagNotFound(tag_id)
            return tag

    def statistics(self) -> dict[str, Any]:
        """``most_used`` stays empty until content can carry tags."""
        with self.rw_uow() as uow:
            stats: dict[str, Any] = uow.tags.statistics(recent_since=self.now_utc() - RECENT_WINDOW)
        stats["most_used"] = []
        return stats

    # ------------------------------------------------------------------ #
    # Writes
    # ------------------------------------------------------------------ #

    def create(self, dto: TagCreateIn) -> Tag:
        """
        Create a tag.

        :raises DuplicateSlugError: The slug belongs to another tag.
        """
        slug = dto.slug or _derived_slug(dto.name)
        try:
            with self.rw_uow() as uow:
                if uow.tags.slug_taken(slug):
                    raise DuplicateSlugError(slug)
                tag = Tag(name=dto.name, slug=slug)
                if dto.color:
                    tag.color = dto.color
                uow.tags.add(tag)
        except IntegrityError as exc:
            if is_tag_slug_conflict(exc):
                raise DuplicateSlugError(slug) from exc
            raise
        logger.info("tag created", extra={"event": "tags.created", "tag_id": tag.id})
        return tag

    def update(self, tag_id: int, dto: TagUpdateIn) -> Tag:
        """
        Partially update a tag; a rename without a slug regenerates it.

        :raises TagNotFound: No live tag with this id.
        :raises DuplicateSlugError: The resulting slug belongs to another tag.
        """
        changes = dto.changes()
        try:
            with self.rw_uow() as uow:
                tag = uow.tags.get(tag_id)
                if tag is None:
                    raise TagNotFound(tag_id)
                name = changes.get("name")
                if name is not None and name.strip() != tag.name and not changes.get("slug"):
                    changes["slug"] = _derived_slug(name)
                slug = changes.get("slug")
                if slug and uow.tags.slug_taken(slug, exclude_id=tag_id):
                    raise DuplicateSlugError(slug)
                uow.tags.assign_updates(tag, changes)
        except IntegrityError as exc:
            if is_tag_slug_conflict(exc):
                raise DuplicateSlugError(str(changes.get("slug", ""))) from exc
            raise
        logger.info("tag updated", extra={"event": "tags.updated", "tag_id": tag_id})
        return tag

    def delete(self, tag_id: int) -> None:
        with self.rw_uow() as uow:
            tag = uow.tags.get(tag_id)
            if tag is None:
                raise TagNotFound(tag_id)
            uow.tags.delete(tag)
        logger.info("tag deleted", extra={"event": "tags.deleted", "tag_id": tag_id})

    def bulk_delete(self, tag_ids: Iterable[int]) -> int:
        """
        Soft-delete several tags at once.

        :returns: Number of tags deleted.
        :raises FieldValidationError: An id does not match a live tag. Nothing
            is deleted in that case.
        """
        wanted = set(tag_ids)
        with self.rw_uow() as uow:
            tags = uow.tags.get_many(wanted)
            if {t.id for t in tags} != wanted:
                raise FieldValidationError("ids", "One or more tag IDs do not exist.")
            for tag in tags:
                uow.tags.delete(tag)
        logger.info("tags deleted", extra={"event": "tags.bulk_deleted", "count": len(tags)})
        return len(tags)

    def find_or_create(self, names: Sequence[str]) -> list[Tag]:
        """
        Resolve tag names to tags, creating missing ones.

        Names are matched by slug. Blank names are skipped, duplicates collapse
        to one tag, and a soft-deleted tag with the same slug is revived. New
        tags get a color from :data:`TAG_PALETTE`.

        :returns: Tags in first-mention order.
        :raises FieldValidationError: A name has no slug-able characters.
        """
        try:
            with self.rw_uow() as uow:
                found: dict[str, Tag] = {}
                for raw in names:
                    name = raw.strip()
                    if not name:
                        continue
                    slug = _derived_slug(name, field="tags")
                    if slug in found:
                        continue
                    tag = uow.tags.get_by_slug(slug, include_deleted=True)
                    if tag is None:
                        tag = uow.tags.add(
                            Tag(name=name, slug=slug, color=self.rng.choice(TAG_PALETTE))
                        )
                    elif tag.is_deleted:
                        tag.deleted_at = None
                        uow.tags.flush()
                    found[slug] = tag
                tags = list(found.values())
        except IntegrityError as exc:
            if is_tag_slug_conflict(exc):
                # A concurrent request created one of the names first
                raise FieldValidationError("tags", "Tags changed concurrently; retry.") from exc
            raise
        return tags
