"""Shared persistence helpers for the SQLAlchemy repositories.

Repositories stay thin: they read and stage rows on the session handed to
them and never commit or roll back. The Unit of Work owns the transaction.

Two rules apply to every subclass:

* Models with a ``deleted_at`` column are soft-deleted. Lookups skip
  tombstoned rows unless ``include_deleted=True`` is passed.
* Updates go through :meth:`BaseRepository.assign_updates`, which only
  accepts the keys listed by ``_updatable_fields``.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import Select, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from cms_api.core.extensions import db

E = TypeVar("E")


class BaseRepository(Generic[E]):
    """Repository for one mapped class, set on the subclass as ``model``."""

    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        """
        :param session: Session of the enclosing Unit of Work. Falls back to
            the Flask-scoped ``db.session`` when omitted.
        """
        self._session: Session | None = session

    @property
    def session(self) -> Session:
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    # ------------------------------ Soft delete ------------------------------

    def _tombstone_attr(self) -> InstrumentedAttribute[Any] | None:
        return getattr(self.model, "deleted_at", None)

    def _live_only(self, stmt: Select[Any], *, include_deleted: bool) -> Select[Any]:
        """Filter out tombstoned rows unless ``include_deleted`` is set."""
        tombstone = self._tombstone_attr()
        if include_deleted or tombstone is None:
            return stmt
        return stmt.where(tombstone.is_(None))

    # ------------------------------ Update whitelist -------------------------

    def _updatable_fields(self) -> set[str]:
        """Keys accepted by :meth:`assign_updates`. Empty means nothing is."""
        return set()

    def _sanitize_update_fields(self, fields: Mapping[str, Any], *, strict: bool) -> dict[str, Any]:
        """
        Keep only whitelisted keys.

        :raises ValueError: With ``strict``, when a key is not whitelisted.
        """
        allowed = self._updatable_fields()
        unknown = sorted(k for k in fields if k not in allowed)
        if unknown and strict:
            raise ValueError(f"Unknown or non-updatable fields: {unknown}")
        return {k: v for k, v in fields.items() if k in allowed}

    # ------------------------------ CRUD -------------------------------------

    def add(self, instance: E) -> E:
        """Stage ``instance`` and flush so its primary key is assigned."""
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: Any, *, include_deleted: bool = False) -> E | None:
        """Return the row with primary key ``entity_id``, or ``None``."""
        stmt = select(self.model).where(getattr(self.model, "id") == entity_id)
        stmt = self._live_only(stmt, include_deleted=include_deleted)
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def delete(self, instance: E) -> None:
        """Tombstone ``instance`` when the model supports it, else delete the row."""
        if self._tombstone_attr() is not None:
            setattr(instance, "deleted_at", datetime.now(timezone.utc))
        else:
            self.session.delete(instance)
        self.flush()

    def purge(self, instance: E) -> None:
        """Delete the row even for soft-deletable models."""
        self.session.delete(instance)
        self.flush()

    def flush(self) -> None:
        self.session.flush()

    def assign_updates(
        self,
        instance: E,
        fields: Mapping[str, Any],
        *,
        strict: bool = True,
        flush: bool = True,
    ) -> E:
        """
        Apply whitelisted ``fields`` to ``instance`` through ``setattr``.

        Going through ``setattr`` runs the model's ``@validates`` hooks and
        write-only properties such as ``password``.

        :raises ValueError: ``strict`` and a key outside the whitelist.
        """
        for key, value in self._sanitize_update_fields(fields, strict=strict).items():
            setattr(instance, key, value)
        if flush:
            self.flush()
        return instance
