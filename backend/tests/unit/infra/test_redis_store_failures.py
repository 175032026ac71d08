"""Redis driver failures surface as StoreFailure."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from cms_api.infra.redis.redis_refresh_token_store import RedisRefreshTokenStore
from cms_api.services._shared.errors import StoreFailure
from redis.exceptions import ConnectionError as RedisConnectionError


class _DownRedis:
    """Client double whose every command fails like an unreachable server."""

    def __getattr__(self, name):
        def _fail(*args, **kwargs):
            raise RedisConnectionError("connection refused")

        return _fail


@pytest.fixture()
def store():
    return RedisRefreshTokenStore(_DownRedis())  # type: ignore[arg-type]


def test_get_raises_store_failure(store):
    with pytest.raises(StoreFailure) as info:
        store.get("a" * 64)
    assert isinstance(info.value.__cause__, RedisConnectionError)


def test_create_raises_store_failure(store):
    with pytest.raises(StoreFailure):
        store.create(
            user_id=1,
            token_hash="a" * 64,
            token_version=0,
            expires_at=datetime.now(UTC) + timedelta(days=1),
        )


def test_delete_paths_raise_store_failure(store):
    with pytest.raises(StoreFailure):
        store.delete("a" * 64)
    with pytest.raises(StoreFailure):
        store.delete_all_for_user(1)
    with pytest.raises(StoreFailure):
        store.list_for_user(1)
