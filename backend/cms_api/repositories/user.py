"""User repository: the credential store behind authentication."""

from __future__ import annotations

from typing import cast

from sqlalchemy import func, select, update

from cms_api.models.user import Role, User
from cms_api.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    Offers lookup-by-email, lookup-by-id (live or including tombstoned rows)
    and the atomic ``token_version`` increment. It NEVER handles JWT or
    session creation.
    """

    model = User

    def _updatable_fields(self):
        """Fields assignable through :meth:`assign_updates` (password hashes via setter)."""
        return {"name", "email", "password", "role", "is_active"}

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_email(self, email: str, *, include_deleted: bool = False) -> User | None:
        """Fetch a user by email (normalised lowercase/trimmed).

        :param email: Email address to normalise and search.
        :param include_deleted: Also match tombstoned accounts.
        :returns: User instance or ``None`` when not found.
        """
        stmt = select(User).where(User.email == email.lower().strip())
        stmt = self._live_only(stmt, include_deleted=include_deleted)
        result = self.session.execute(stmt).scalars().first()
        return cast(User | None, result)

    def email_taken(self, email: str, *, exclude_id: int | None = None) -> bool:
        """Return ``True`` when another account (tombstoned included) owns ``email``.

        The unique constraint spans tombstoned rows, so they count as taken.
        """
        stmt = select(User.id).where(User.email == email.lower().strip())
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        return self.session.execute(stmt.limit(1)).first() is not None

    # ---------------------------- Token version ----------------------------

    def get_token_version(self, user_id: int) -> int | None:
        """Return the live ``token_version`` or ``None`` for unknown users."""
        stmt = select(User.token_version).where(User.id == user_id)
        value = self.session.execute(stmt).scalar_one_or_none()
        return None if value is None else int(value)

    def bump_token_version(self, user_id: int) -> int | None:
        """
        Atomically increment ``token_version``.

        Issues a single ``UPDATE users SET token_version = token_version + 1``
        so concurrent increments never collapse into one.

        :returns: New ``token_version``, or ``None`` when the user does not exist.
        """
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(token_version=User.token_version + 1)
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        if result.rowcount == 0:
            return None
        # Keep an already-loaded instance in step with the row
        cached = self.session.get(User, user_id, populate_existing=True)
        return None if cached is None else int(cached.token_version)

    # ---------------------------- Soft delete ----------------------------

    def restore(self, user: User) -> User:
        user.deleted_at = None
        self.flush()
        return user

    # ---------------------------- Aggregates ----------------------------

    def statistics(self) -> dict[str, int]:
        """Return account counters for the admin dashboard.

        ``total``, ``active`` and ``inactive`` count live rows only, as do the
        per-role counters; ``deleted`` counts tombstoned rows.
        """
        live = User.deleted_at.is_(None)
        counts = {
            "total": select(func.count(User.id)).where(live),
            "active": select(func.count(User.id)).where(live, User.is_active.is_(True)),
            "inactive": select(func.count(User.id)).where(live, User.is_active.is_(False)),
            "deleted": select(func.count(User.id)).where(User.deleted_at.is_not(None)),
        }
        stats = {key: int(self.session.execute(stmt).scalar() or 0) for key, stmt in counts.items()}
        by_role = self.session.execute(
            select(User.role, func.count(User.id)).where(live).group_by(User.role)
        ).all()
        found = {getattr(role, "value", role): int(n) for role, n in by_role}
        for role in Role:
            stats[role.value.lower()] = found.get(role.value, 0)
        return stats
