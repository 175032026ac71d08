"""Factory Boy definitions for categories and tags."""

from __future__ import annotations

import factory
from cms_api.models.category import Category, CategoryType
from cms_api.models.tag import Tag

from tests.factories import BaseFactory


class CategoryFactory(BaseFactory):
    class Meta:
        model = Category

    id = None
    name = factory.Sequence(lambda n: f"Category {n}")
    slug = factory.Sequence(lambda n: f"category-{n}")
    type = CategoryType.ARTICLE
    order = factory.Sequence(lambda n: n)
    is_active = True


class TagFactory(BaseFactory):
    class Meta:
        model = Tag

    id = None
    name = factory.Sequence(lambda n: f"Tag {n}")
    slug = factory.Sequence(lambda n: f"tag-{n}")
    color = "#3B82F6"
