# cms_api/infra/sql/sql_refresh_token_store.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from cms_api.models.base import as_utc
from cms_api.models.refresh_token import RefreshToken
from cms_api.services._shared.ports import RefreshTokenRecord, RefreshTokenStore
from cms_api.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork


def _to_record(row: RefreshToken) -> RefreshTokenRecord:
    return RefreshTokenRecord(
        id=str(row.id),
        user_id=row.user_id,
        token_hash=row.token_hash,
        token_version=row.token_version,
        expires_at=as_utc(row.expires_at),
        created_at=as_utc(row.created_at),
        ip_address=row.ip_address,
        user_agent=row.user_agent,
    )


@dataclass(slots=True)
class SQLRefreshTokenStore(RefreshTokenStore):
    """
    Relational refresh session store (``refresh_tokens`` table).

    Every call runs in its own Unit of Work, so callers must not invoke it
    from inside another ``with uow:`` block. Atomic check-and-delete relies on
    the affected-row count of a conditional ``DELETE``. Driver failures
    surface as :class:`~cms_api.services._shared.errors.StoreFailure` through
    the Unit of Work.
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
        with SQLAlchemyUnitOfWork() as uow:
            row = uow.refresh_tokens.add(
                RefreshToken(
                    user_id=user_id,
                    token_hash=token_hash,
                    token_version=token_version,
                    expires_at=expires_at,
                    ip_address=ip_address,
                    user_agent=user_agent,
                    created_at=datetime.now(UTC),
                )
            )
            record = _to_record(row)
        return record

    def get(self, token_hash: str) -> RefreshTokenRecord | None:
        with SQLAlchemyUnitOfWork() as uow:
            row = uow.refresh_tokens.get_by_hash(token_hash)
            record = None if row is None else _to_record(row)
        return record

    def delete(self, token_hash: str, *, user_id: int | None = None) -> bool:
        with SQLAlchemyUnitOfWork() as uow:
            affected = uow.refresh_tokens.delete_by_hash(token_hash, user_id=user_id)
        return affected == 1

    def delete_all_for_user(self, user_id: int) -> int:
        with SQLAlchemyUnitOfWork() as uow:
            return uow.refresh_tokens.delete_for_user(user_id)

    def list_for_user(self, user_id: int) -> list[RefreshTokenRecord]:
        with SQLAlchemyUnitOfWork() as uow:
            return [_to_record(row) for row in uow.refresh_tokens.list_for_user(user_id)]
