# tests/unit/services/test_tag_service.py
from __future__ import annotations

import random
from datetime import UTC, datetime

import pytest
from cms_api.models.tag import DEFAULT_TAG_COLOR
from cms_api.services._shared.errors import DuplicateSlugError, FieldValidationError, TagNotFound
from cms_api.services.tags.dto import TagCreateIn, TagUpdateIn
from cms_api.services.tags.service import TAG_PALETTE, TagService
from tests.factories.taxonomy import TagFactory


@pytest.fixture()
def service(app) -> TagService:
    return TagService(rng=random.Random(7))


def test_create_defaults(service):
    tag = service.create(TagCreateIn(name="Machine Learning"))

    assert tag.slug == "machine-learning"
    assert tag.color == DEFAULT_TAG_COLOR


def test_create_with_color_and_duplicate_slug(service):
    service.create(TagCreateIn(name="Python", color="#10B981"))

    with pytest.raises(DuplicateSlugError):
        service.create(TagCreateIn(name="python"))


def test_update_renames_and_recolors(service, session):
    tag = TagFactory(name="Old", slug="old")
    session.commit()

    out = service.update(tag.id, TagUpdateIn(name="New Name", color="#EF4444"))
    assert out.slug == "new-name"
    assert out.color == "#EF4444"

    with pytest.raises(TagNotFound):
        service.update(999999, TagUpdateIn(name="x"))


def test_bulk_delete_requires_every_id(service, session):
    a, b = TagFactory(), TagFactory()
    session.commit()

    with pytest.raises(FieldValidationError):
        service.bulk_delete([a.id, 999999])
    assert service.get(a.id) is not None

    assert service.bulk_delete([a.id, b.id]) == 2
    assert service.list() == []


def test_find_or_create_reuses_existing_and_revives_deleted(service, session):
    existing = TagFactory(name="Python", slug="python")
    gone = TagFactory(name="Flask", slug="flask", deleted_at=datetime.now(UTC))
    session.commit()

    tags = service.find_or_create(["python", "  ", "Flask", "New Thing", "new thing"])

    assert [t.slug for t in tags] == ["python", "flask", "new-thing"]
    assert tags[0].id == existing.id
    assert tags[1].id == gone.id and tags[1].deleted_at is None
    assert tags[2].color in TAG_PALETTE


def test_find_or_create_rejects_unsluggable_names(service):
    with pytest.raises(FieldValidationError) as info:
        service.find_or_create(["!!!"])
    assert "tags" in info.value.details["errors"]


def test_statistics(service, session):
    TagFactory()
    session.commit()

    stats = service.statistics()
    assert stats["total"] == 1
    assert stats["recently_created"] == 1
    assert stats["most_used"] == []
