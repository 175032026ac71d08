# cms_api/services/users/service.py
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from cms_api.models.user import Role, User
from cms_api.services._shared.base import BaseService, ServiceContext
from cms_api.services._shared.errors import DuplicateEmailError, UserNotFound
from cms_api.services.auth.service import AuthService, is_email_conflict
from cms_api.services.users.dto import UserCreateIn, UserUpdateIn

logger = logging.getLogger(__name__)


class UserService(BaseService):
    """
    Admin-side account management.

    Every state change that must cut off an account (deactivation, soft
    delete) goes through :meth:`AuthService.logout_all`, so outstanding access
    and refresh tokens stop working on the next request. An admin can never
    deactivate, re-role, delete or purge their own account.
    """

    def __init__(self, *, sessions: AuthService, ctx: ServiceContext | None = None) -> None:
        """
        :param sessions: Session manager used to revoke tokens.
        :param ctx: Request-scoped context; ``actor_id`` drives the self-action guard.
        """
        super().__init__(ctx=ctx)
        self.sessions = sessions

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #

    def get(self, user_id: int, *, with_deleted: bool = False) -> User:
        """
        Fetch one account.

        :param with_deleted: Also return a soft-deleted account.
        :raises UserNotFound: No matching row.
        """
        with self.rw_uow() as uow:
            user = uow.users.get(user_id, include_deleted=with_deleted)
            if user is None:
                raise UserNotFound(user_id)
            return user

    def statistics(self) -> dict[str, int]:
        with self.rw_uow() as uow:
            return uow.users.statistics()

    # ------------------------------------------------------------------ #
    # Writes
    # ------------------------------------------------------------------ #

    def create(self, dto: UserCreateIn) -> User:
        """
        Create a new account.

        :raises DuplicateEmailError: The email belongs to another account,
            soft-deleted ones included.
        """
        try:
            with self.rw_uow() as uow:
                if uow.users.email_taken(dto.email):
                    raise DuplicateEmailError(dto.email)
                user = User(
                    name=dto.name,
                    email=dto.email,
                    role=dto.role,
                    is_active=dto.is_active,
                )
                user.password = dto.password
                uow.users.add(user)
        except IntegrityError as exc:
            if is_email_conflict(exc):
                raise DuplicateEmailError(dto.email) from exc
            raise
        logger.info(
            "user created",
            extra={"event": "users.created", "user_id": user.id},
        )
        return user

    def update(self, user_id: int, dto: UserUpdateIn) -> User:
        """
        Partially update an account.

        Changing one's own role or active flag is refused. Deactivating an
        account revokes all of its sessions.

        :raises UserNotFound: No live account with this id.
        :raises SelfActionForbidden: Role/status change on the acting account.
        :raises DuplicateEmailError: The new email is already taken.
        """
        changes = dto.changes()
        if "role" in changes:
            self.ensure_not_self(user_id, msg="You cannot change your own role")
        if "is_active" in changes:
            self.ensure_not_self(user_id, msg="You cannot deactivate your own account")

        try:
            with self.rw_uow() as uow:
                user = uow.users.get(user_id)
                if user is None:
                    raise UserNotFound(user_id)
                was_active = user.is_active
                email = changes.get("email")
                if email is not None and uow.users.email_taken(str(email), exclude_id=user_id):
                    raise DuplicateEmailError(str(email))
                uow.users.assign_updates(user, changes)
                deactivated = was_active and not user.is_active
        except IntegrityError as exc:
            if is_email_conflict(exc):
                raise DuplicateEmailError(str(changes.get("email", ""))) from exc
            raise

        if deactivated:
            self.sessions.logout_all(user_id)
        logger.info("user updated", extra={"event": "users.updated", "user_id": user_id})
        return user

    def toggle_status(self, user_id: int) -> User:
        """Flip ``is_active``; deactivation revokes every session."""
        self.ensure_not_self(user_id, msg="You cannot deactivate your own account")
        with self.rw_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise UserNotFound(user_id)
            user.is_active = not user.is_active
            uow.users.flush()
            active = user.is_active

        if not active:
            self.sessions.logout_all(user_id)
        logger.info(
            "user %s",
            "activated" if active else "deactivated",
            extra={"event": "users.status_changed", "user_id": user_id},
        )
        return user

    def change_role(self, user_id: int, role: Role | str) -> User:
        """
        Assign a new role.

        The new role applies on the caller's next request, because request
        authentication always reads the live role.
        """
        self.ensure_not_self(user_id, msg="You cannot change your own role")
        with self.rw_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise UserNotFound(user_id)
            uow.users.assign_updates(user, {"role": role})
        logger.info("user role changed", extra={"event": "users.role_changed", "user_id": user_id})
        return user

    def delete(self, user_id: int) -> None:
        """Soft-delete an account and revoke its sessions."""
        self.ensure_not_self(user_id, msg="You cannot delete your own account")
        with self.rw_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise UserNotFound(user_id)
            uow.users.delete(user)

        self.sessions.logout_all(user_id)
        logger.info("user soft-deleted", extra={"event": "users.deleted", "user_id": user_id})

    def restore(self, user_id: int) -> User:
        """Clear the tombstone of a soft-deleted account. Live accounts are returned as is."""
        with self.rw_uow() as uow:
            user = uow.users.get(user_id, include_deleted=True)
            if user is None:
                raise UserNotFound(user_id)
            if user.is_deleted:
                uow.users.restore(user)
        logger.info("user restored", extra={"event": "users.restored", "user_id": user_id})
        return user

    def force_delete(self, user_id: int) -> None:
        """Permanently remove an account (live or soft-deleted) and its refresh sessions."""
        self.ensure_not_self(user_id, msg="You cannot delete your own account")
        with self.rw_uow() as uow:
            user = uow.users.get(user_id, include_deleted=True)
            if user is None:
                raise UserNotFound(user_id)
            uow.users.purge(user)

        # The SQL cascade covers relational stores; Redis needs an explicit sweep
        self.sessions.refresh_store.delete_all_for_user(user_id)
        logger.info("user purged", extra={"event": "users.purged", "user_id": user_id})
