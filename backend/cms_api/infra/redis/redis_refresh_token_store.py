# comments in English; reST docstrings
from __future__ import annotations

import functools
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any, TypeVar
from uuid import uuid4

import redis  # type: ignore[import-untyped]
from redis.exceptions import RedisError, WatchError  # type: ignore[import-untyped]

from cms_api.services._shared.errors import StoreFailure
from cms_api.services._shared.ports import RefreshTokenRecord, RefreshTokenStore

F = TypeVar("F", bound=Callable[..., Any])


def _guard(fn: F) -> F:
    """Surface Redis client failures as :class:`StoreFailure`."""

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return fn(*args, **kwargs)
        except RedisError as exc:
            raise StoreFailure() from exc

    return wrapper  # type: ignore[return-value]


def _s(value: bytes | str | None, default: str = "") -> str:
    if value is None:
        return default
    return value.decode() if isinstance(value, bytes | bytearray) else str(value)


@dataclass(slots=True)
class RedisRefreshTokenStore(RefreshTokenStore):
    """
    Redis-backed refresh session store.

    Layout: one hash per session at ``rt:<token_hash>`` plus a per-user index
    set ``rt:u:<user_id>`` of hashes. Keys expire ``retention`` after the
    session itself, so a recently expired session is still reported as
    expired rather than unknown.

    :param r: A Redis client (already connected).
    :param retention: Grace period an expired record is kept before Redis reaps it.
    """

    r: redis.Redis
    retention: timedelta = field(default=timedelta(hours=24))

    # -------------------- helpers --------------------

    @staticmethod
    def _k(token_hash: str) -> str:
        return f"rt:{token_hash}"

    @staticmethod
    def _ku(user_id: int) -> str:
        return f"rt:u:{user_id}"

    @staticmethod
    def _to_ts(dt: datetime) -> int:
        # Naive datetimes are labelled as UTC (no conversion)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
        return int(dt.timestamp())

    @staticmethod
    def _from_ts(raw: bytes | str | None) -> datetime:
        return datetime.fromtimestamp(int(_s(raw, "0")), tz=UTC)

    def _record(self, token_hash: str, h: dict[bytes, bytes]) -> RefreshTokenRecord:
        return RefreshTokenRecord(
            id=_s(h.get(b"id")),
            user_id=int(_s(h.get(b"user_id"), "0")),
            token_hash=token_hash,
            token_version=int(_s(h.get(b"tv"), "0")),
            expires_at=self._from_ts(h.get(b"expires_at")),
            created_at=self._from_ts(h.get(b"created_at")),
            ip_address=_s(h.get(b"ip_address")) or None,
            user_agent=_s(h.get(b"user_agent")) or None,
        )

    # -------------------- API ------------------------

    @_guard
    def create(
        self,
        *,
        user_id: int,
        token_hash: str,
        token_version: int,
        expires_at: datetime,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> RefreshTokenRecord:
        """
        Insert the session hash and index it under its owner in one transaction.
        """
        now = datetime.now(UTC)
        record_id = uuid4().hex
        key = self._k(token_hash)
        ttl = max(1, self._to_ts(expires_at) - self._to_ts(now)) + int(
            self.retention.total_seconds()
        )

        mapping = {
            "id": record_id,
            "user_id": str(user_id),
            "tv": str(token_version),
            "expires_at": str(self._to_ts(expires_at)),
            "created_at": str(self._to_ts(now)),
        }
        if ip_address:
            mapping["ip_address"] = ip_address
        if user_agent:
            mapping["user_agent"] = user_agent

        pipe = self.r.pipeline(transaction=True)
        pipe.hset(key, mapping=mapping)
        pipe.expire(key, ttl)
        pipe.sadd(self._ku(user_id), token_hash)
        pipe.execute()

        return RefreshTokenRecord(
            id=record_id,
            user_id=int(user_id),
            token_hash=token_hash,
            token_version=int(token_version),
            expires_at=self._from_ts(mapping["expires_at"]),
            created_at=self._from_ts(mapping["created_at"]),
            ip_address=ip_address,
            user_agent=user_agent,
        )

    @_guard
    def get(self, token_hash: str) -> RefreshTokenRecord | None:
        h = self.r.hgetall(self._k(token_hash))
        if not h:
            return None
        return self._record(token_hash, h)

    @_guard
    def delete(self, token_hash: str, *, user_id: int | None = None) -> bool:
        """
        Check-and-delete under ``WATCH``.

        The owner check and the ``DEL`` run against a watched key, so a
        concurrent delete aborts this transaction and the retry observes the
        key as gone. Exactly one concurrent caller gets ``True``.
        """
        key = self._k(token_hash)
        while True:
            try:
                with self.r.pipeline() as p:
                    p.watch(key)
                    owner = p.hget(key, "user_id")
                    if owner is None:
                        p.unwatch()
                        return False
                    if user_id is not None and _s(owner) != str(user_id):
                        p.unwatch()
                        return False
                    p.multi()
                    p.delete(key)
                    p.srem(self._ku(int(_s(owner))), token_hash)
                    deleted, _ = p.execute()
                return bool(deleted)
            except WatchError:
                # Concurrent modification detected; retry loop
                continue

    @_guard
    def delete_all_for_user(self, user_id: int) -> int:
        key_u = self._ku(user_id)
        hashes = [_s(m) for m in self.r.smembers(key_u)]
        if not hashes:
            return 0
        pipe = self.r.pipeline(transaction=True)
        for h in hashes:
            pipe.delete(self._k(h))
        pipe.delete(key_u)
        results = pipe.execute()
        return sum(int(n) for n in results[:-1])

    @_guard
    def list_for_user(self, user_id: int) -> list[RefreshTokenRecord]:
        key_u = self._ku(user_id)
        records: list[RefreshTokenRecord] = []
        stale: list[str] = []
        for h in sorted(_s(m) for m in self.r.smembers(key_u)):
            data = self.r.hgetall(self._k(h))
            if data:
                records.append(self._record(h, data))
            else:
                # Underlying hash reaped by TTL -> drop it from the index
                stale.append(h)
        if stale:
            self.r.srem(key_u, *stale)
        return sorted(records, key=lambda rec: rec.created_at)
