"""Unit tests for raw refresh token helpers."""

from __future__ import annotations

import pytest
from cms_api.services.auth.tokens import (
    generate_refresh_token,
    hash_refresh_token,
    parse_snapshot,
)


def test_generated_value_embeds_owner_and_version():
    raw = generate_refresh_token(42, 7)
    assert raw.startswith("42.7.")
    assert parse_snapshot(raw) == (42, 7)
    # 48 random bytes -> 64 url-safe characters
    assert len(raw.split(".", 2)[2]) == 64


def test_values_are_unique():
    assert generate_refresh_token(1, 0) != generate_refresh_token(1, 0)


def test_hash_is_sha256_hex():
    digest = hash_refresh_token("1.0.abc")
    assert len(digest) == 64
    assert digest == hash_refresh_token("1.0.abc")
    assert digest != hash_refresh_token("1.0.abd")


@pytest.mark.parametrize("raw", ["", "abc", "1.2", "x.0.abc", "1.y.abc", "1.2."])
def test_parse_snapshot_rejects_foreign_shapes(raw):
    assert parse_snapshot(raw) is None


@pytest.mark.parametrize(
    "raw",
    [
        "99999999999999999999999.0.abc",
        "1.99999999999999999999999.abc",
        f"{2**63}.0.abc",
        f"1.{2**63}.abc",
        "١.0.abc",
        "².0.abc",
    ],
)
def test_parse_snapshot_rejects_numbers_outside_bigint(raw):
    assert parse_snapshot(raw) is None


def test_parse_snapshot_accepts_bigint_max():
    assert parse_snapshot(f"{2**63 - 1}.0.abc") == (2**63 - 1, 0)


def test_hash_accepts_lone_surrogate():
    digest = hash_refresh_token("\ud800")
    assert len(digest) == 64
    assert digest != hash_refresh_token("\ud801")
