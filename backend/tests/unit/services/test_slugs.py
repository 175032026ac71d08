"""Slug derivation for taxonomy names."""

from __future__ import annotations

import re

import pytest
from cms_api.services._shared.slugs import SLUG_PATTERN, slugify


@pytest.mark.parametrize(
    "name, slug",
    [
        ("Breaking News", "breaking-news"),
        ("  Tips & Tricks!  ", "tips-tricks"),
        ("Café Stories", "cafe-stories"),
        ("2024 -- Recap", "2024-recap"),
        ("日本", ""),
    ],
)
def test_slugify(name, slug):
    assert slugify(name) == slug


def test_slugs_match_the_accepted_pattern():
    assert re.match(SLUG_PATTERN, slugify("Hello, World"))
