# tests/unit/services/test_category_service.py
from __future__ import annotations

from datetime import UTC, datetime

import pytest
from cms_api.models.category import CategoryType
from cms_api.services._shared.errors import (
    CategoryNotFound,
    DuplicateSlugError,
    FieldValidationError,
)
from cms_api.services.categories.dto import CategoryCreateIn, CategoryOrderIn, CategoryUpdateIn
from cms_api.services.categories.service import CategoryService
from tests.factories.taxonomy import CategoryFactory


@pytest.fixture()
def service(app) -> CategoryService:
    return CategoryService()


def test_create_derives_slug_from_name(service):
    c = service.create(CategoryCreateIn(name="  Breaking News ", type=CategoryType.ARTICLE))

    assert c.id is not None
    assert c.name == "Breaking News"
    assert c.slug == "breaking-news"
    assert c.order == 0
    assert c.is_active is True


def test_create_keeps_explicit_slug(service):
    c = service.create(CategoryCreateIn(name="Clips", type=CategoryType.VIDEO, slug="short-clips"))
    assert c.slug == "short-clips"
    assert c.type is CategoryType.VIDEO


def test_create_rejects_taken_slug_even_when_deleted(service, session):
    CategoryFactory(slug="news", deleted_at=datetime.now(UTC))
    session.commit()

    with pytest.raises(DuplicateSlugError) as info:
        service.create(CategoryCreateIn(name="News", type=CategoryType.ARTICLE))
    assert info.value.details == {"errors": {"slug": ["This slug is already in use."]}}


def test_create_needs_a_sluggable_name(service):
    with pytest.raises(FieldValidationError):
        service.create(CategoryCreateIn(name="???", type=CategoryType.ARTICLE))


def test_rename_regenerates_slug_unless_given(service, session):
    c = CategoryFactory(name="Old", slug="old")
    session.commit()

    renamed = service.update(c.id, CategoryUpdateIn(name="Fresh Take"))
    assert renamed.slug == "fresh-take"

    explicit = service.update(c.id, CategoryUpdateIn(name="Another", slug="kept"))
    assert explicit.slug == "kept"


def test_update_clears_description_and_checks_slug(service, session):
    c = CategoryFactory(description="text")
    other = CategoryFactory(slug="taken")
    session.commit()

    assert service.update(c.id, CategoryUpdateIn(description=None)).description is None
    with pytest.raises(DuplicateSlugError):
        service.update(c.id, CategoryUpdateIn(slug=other.slug))


def test_reorder_is_all_or_nothing(service, session):
    a = CategoryFactory(order=0)
    b = CategoryFactory(order=1)
    session.commit()

    with pytest.raises(FieldValidationError) as info:
        service.reorder([CategoryOrderIn(id=a.id, order=9), CategoryOrderIn(id=999999, order=0)])
    assert "categories" in info.value.details["errors"]
    assert service.get(a.id).order == 0

    service.reorder([CategoryOrderIn(id=a.id, order=1), CategoryOrderIn(id=b.id, order=0)])
    assert [c.id for c in service.list()] == [b.id, a.id]


def test_toggle_and_delete(service, session):
    c = CategoryFactory()
    session.commit()

    assert service.toggle_status(c.id).is_active is False
    assert service.toggle_status(c.id).is_active is True

    service.delete(c.id)
    with pytest.raises(CategoryNotFound):
        service.get(c.id)
    with pytest.raises(CategoryNotFound):
        service.delete(c.id)


def test_statistics(service, session):
    CategoryFactory(type=CategoryType.VIDEO)
    session.commit()

    stats = service.statistics()
    assert stats["total"] == 1
    assert stats["by_type"] == {"article": 0, "video": 1}
