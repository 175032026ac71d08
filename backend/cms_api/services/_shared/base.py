# cms_api/services/_shared/base.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from cms_api.services._shared.errors import SelfActionForbidden
from cms_api.uow.sqlalchemy_uow import SQLAlchemyUnitOfWork


@dataclass(slots=True)
class ServiceContext:
    """
    Carry cross-cutting request-scoped data (acting user, request ids).

    :param actor_id: Authenticated user identifier.
    :param request_id: Correlation id for logging/tracing.
    """

    actor_id: int | None = None
    request_id: str | None = None


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide the Unit of Work helper.
    * Offer shared guards (self-action protection) and a UTC clock.
    * Keep services thin, orchestration-only, no web leakage.

    Notes
    -----
    - Services must never touch the global session; always use a Unit of Work.
    - Units of work are never nested; port calls that open their own
      transaction (the SQL refresh store) happen outside ``with`` blocks.
    """

    def __init__(self, *, ctx: ServiceContext | None = None) -> None:
        """
        Initialize the base service.

        :param ctx: Optional request-scoped context (actor, tracing).
        :type ctx: ServiceContext | None
        """
        self.ctx = ctx or ServiceContext()

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work.

        :returns: UoW committing on success and rolling back on error.
        :rtype: SQLAlchemyUnitOfWork
        """
        return SQLAlchemyUnitOfWork()

    # --------------------------- Guards --------------------------------

    def ensure_not_self(self, target_id: int, *, msg: str | None = None) -> None:
        """
        Refuse account-level actions an admin attempts on their own account.

        :param target_id: User the action targets.
        :param msg: Optional custom error message.
        :raises SelfActionForbidden: If the acting user is the target.
        """
        if self.ctx.actor_id is not None and int(self.ctx.actor_id) == int(target_id):
            raise SelfActionForbidden(msg)

    @staticmethod
    def now_utc() -> datetime:
        return datetime.now(UTC)
