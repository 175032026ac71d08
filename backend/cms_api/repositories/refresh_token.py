"""Refresh token repository backing the SQL refresh session store."""

from __future__ import annotations

from typing import cast

from sqlalchemy import delete, select

from cms_api.models.refresh_token import RefreshToken
from cms_api.repositories.base import BaseRepository


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """Persistence-only repository for :class:`RefreshToken` rows."""

    model = RefreshToken

    def get_by_hash(self, token_hash: str) -> RefreshToken | None:
        stmt = select(RefreshToken).where(RefreshToken.token_hash == token_hash)
        return cast(RefreshToken | None, self.session.execute(stmt).scalars().first())

    def delete_by_hash(self, token_hash: str, *, user_id: int | None = None) -> int:
        """
        Issue a conditional ``DELETE`` and report how many rows it removed.

        Two concurrent calls for the same hash cannot both see ``1``: the
        database serializes the row delete.

        :param token_hash: Hash of the row to delete.
        :param user_id: Restrict the delete to this owner.
        :returns: Affected row count (0 or 1).
        """
        stmt = delete(RefreshToken).where(RefreshToken.token_hash == token_hash)
        if user_id is not None:
            stmt = stmt.where(RefreshToken.user_id == user_id)
        result = self.session.execute(stmt.execution_options(synchronize_session=False))
        return int(result.rowcount or 0)

    def delete_for_user(self, user_id: int) -> int:
        stmt = delete(RefreshToken).where(RefreshToken.user_id == user_id)
        result = self.session.execute(stmt.execution_options(synchronize_session=False))
        return int(result.rowcount or 0)

    def list_for_user(self, user_id: int) -> list[RefreshToken]:
        stmt = (
            select(RefreshToken)
            .where(RefreshToken.user_id == user_id)
            .order_by(RefreshToken.created_at.asc(), RefreshToken.id.asc())
        )
        return list(self.session.execute(stmt).scalars().all())
