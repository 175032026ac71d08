"""Unit tests for the category and tag repositories."""

from datetime import UTC, datetime, timedelta

import pytest
from cms_api.models.category import CategoryType
from cms_api.repositories.category import CategoryRepository
from cms_api.repositories.tag import TagRepository
from tests.factories.taxonomy import CategoryFactory, TagFactory


class TestCategoryRepository:
    @pytest.fixture()
    def repo(self):
        return CategoryRepository()

    def test_list_orders_by_position_and_filters(self, repo, session):
        late = CategoryFactory(order=5)
        early = CategoryFactory(order=1, type=CategoryType.VIDEO)
        off = CategoryFactory(order=3, is_active=False)
        CategoryFactory(order=0, deleted_at=datetime.now(UTC))

        assert repo.list() == [early, off, late]
        assert repo.list(type=CategoryType.VIDEO) == [early]
        assert repo.list(is_active=False) == [off]

    def test_slug_taken_spans_tombstones(self, repo, session):
        c = CategoryFactory(slug="news")
        repo.delete(c)

        assert repo.slug_taken("news") is True
        assert repo.slug_taken("news", exclude_id=c.id) is False

    def test_set_orders_and_live_ids(self, repo, session):
        a = CategoryFactory(order=0)
        b = CategoryFactory(order=1)
        gone = CategoryFactory(deleted_at=datetime.now(UTC))

        assert repo.live_ids([a.id, b.id, gone.id, 999999]) == {a.id, b.id}
        repo.set_orders({a.id: 1, b.id: 0})
        assert repo.list() == [b, a]

    def test_statistics(self, repo, session):
        CategoryFactory()
        CategoryFactory(type=CategoryType.VIDEO, is_active=False)
        CategoryFactory(deleted_at=datetime.now(UTC))

        assert repo.statistics() == {
            "total": 2,
            "active": 1,
            "inactive": 1,
            "by_type": {"article": 1, "video": 1},
        }


class TestTagRepository:
    @pytest.fixture()
    def repo(self):
        return TagRepository()

    def test_list_by_name_skips_deleted(self, repo, session):
        b = TagFactory(name="beta")
        a = TagFactory(name="alpha")
        TagFactory(name="aardvark", deleted_at=datetime.now(UTC))

        assert repo.list() == [a, b]

    def test_get_by_slug(self, repo, session):
        t = TagFactory(slug="python", deleted_at=datetime.now(UTC))

        assert repo.get_by_slug("python") is None
        assert repo.get_by_slug("python", include_deleted=True) is t

    def test_statistics_counts_recent_tags(self, repo, session):
        now = datetime.now(UTC)
        TagFactory(created_at=now - timedelta(days=30))
        TagFactory(created_at=now - timedelta(days=1))

        assert repo.statistics(recent_since=now - timedelta(days=7)) == {
            "total": 2,
            "recently_created": 1,
        }
