from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import uuid4


@dataclass(frozen=True, slots=True)
class RefreshTokenRecord:
    """
    Read-model for one server-side refresh session.

    :ivar id: Store-specific record identifier (stringified).
    :ivar user_id: Owner user id.
    :ivar token_hash: SHA-256 hex digest of the raw refresh value.
    :ivar token_version: Owner's ``token_version`` snapshot at issuance.
    :ivar expires_at: Absolute expiration (UTC, aware).
    :ivar created_at: Issuance time (UTC, aware).
    :ivar ip_address: Client address recorded at issuance.
    :ivar user_agent: Client user agent recorded at issuance.
    """

    id: str
    user_id: int
    token_hash: str
    token_version: int
    expires_at: datetime
    created_at: datetime
    ip_address: str | None = None
    user_agent: str | None = None

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def is_valid(self, live_token_version: int, now: datetime) -> bool:
        """Valid iff not expired and the snapshot matches the owner's live version."""
        return not self.is_expired(now) and self.token_version == live_token_version


class RefreshTokenStore(Protocol):
    """
    Stateful store for refresh sessions.

    Single-record writes MUST be atomic. In particular :meth:`delete` is a
    check-and-delete: of two concurrent calls for the same hash, exactly one
    observes ``True``.
    """

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
        """Persist a new session record and return it."""

    def get(self, token_hash: str) -> RefreshTokenRecord | None:
        """Fetch a record by token hash (expired records included)."""

    def delete(self, token_hash: str, *, user_id: int | None = None) -> bool:
        """
        Conditionally delete one record.

        :param token_hash: Hash of the record to remove.
        :param user_id: When given, only delete if the record belongs to this user.
        :returns: ``True`` if this call removed the record.
        """

    def delete_all_for_user(self, user_id: int) -> int:
        """
        Delete every session of the given user.

        :returns: Number of records removed.
        """

    def list_for_user(self, user_id: int) -> list[RefreshTokenRecord]:
        """List the user's records, oldest first."""


class InMemoryRefreshTokenStore(RefreshTokenStore):
    """
    In-memory refresh session store.

    .. note::
       Uses a threading lock so check-and-delete is atomic across threads in
       unit tests.
    """

    def __init__(self) -> None:
        self._by_hash: dict[str, RefreshTokenRecord] = {}
        self._lock = threading.Lock()

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
        record = RefreshTokenRecord(
            id=uuid4().hex,
            user_id=int(user_id),
            token_hash=token_hash,
            token_version=int(token_version),
            expires_at=expires_at,
            created_at=datetime.now(UTC),
            ip_address=ip_address,
            user_agent=user_agent,
        )
        with self._lock:
            if token_hash in self._by_hash:
                raise ValueError("Duplicate refresh token hash.")
            self._by_hash[token_hash] = record
        return record

    def get(self, token_hash: str) -> RefreshTokenRecord | None:
        with self._lock:
            return self._by_hash.get(token_hash)

    def delete(self, token_hash: str, *, user_id: int | None = None) -> bool:
        with self._lock:
            record = self._by_hash.get(token_hash)
            if record is None:
                return False
            if user_id is not None and record.user_id != int(user_id):
                return False
            del self._by_hash[token_hash]
            return True

    def delete_all_for_user(self, user_id: int) -> int:
        with self._lock:
            doomed = [h for h, r in self._by_hash.items() if r.user_id == int(user_id)]
            for h in doomed:
                del self._by_hash[h]
            return len(doomed)

    def list_for_user(self, user_id: int) -> list[RefreshTokenRecord]:
        with self._lock:
            records = [r for r in self._by_hash.values() if r.user_id == int(user_id)]
        return sorted(records, key=lambda r: r.created_at)

