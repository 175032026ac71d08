# cms_api/services/auth/service.py
from __future__ import annotations

import logging
from functools import lru_cache
from typing import NoReturn

from sqlalchemy.exc import IntegrityError
from werkzeug.security import generate_password_hash

from cms_api.models.user import User, password_matches
from cms_api.services._shared.base import BaseService, ServiceContext
from cms_api.services._shared.errors import (
    AccountInactive,
    DuplicateEmailError,
    InvalidCredentials,
    InvalidRefreshToken,
    RefreshTokenRevokedOrExpired,
    TokenInvalid,
    UserNotFound,
    violates,
)
from cms_api.services._shared.ports import (
    AccessTokenCodec,
    RefreshTokenRecord,
    RefreshTokenStore,
)
from cms_api.services.auth.dto import (
    AuthTokenConfig,
    DeviceInfo,
    Identity,
    LoginIn,
    LoginOut,
    LogoutIn,
    ProfileOut,
    ProfileUpdateIn,
    RefreshIn,
    SubjectSnapshot,
    TokenPairOut,
)
from cms_api.services.auth.tokens import (
    generate_refresh_token,
    hash_refresh_token,
    parse_snapshot,
)

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _dummy_password_hash() -> str:
    return generate_password_hash("not-a-real-password")


def is_email_conflict(exc: IntegrityError) -> bool:
    """Match the users email unique constraint by name (PG) or column (SQLite)."""
    return violates(exc, "uq_users_email") or violates(exc, "users.email")


class AuthService(BaseService):
    """
    Authentication and session lifecycle service.

    Issues stateless access tokens through an :class:`AccessTokenCodec` and
    keeps one server-side refresh record per device in a
    :class:`RefreshTokenStore`. Revocation is driven by the per-user
    ``token_version`` generation counter: records and tokens carrying an older
    snapshot are stale.

    Known limitation: :meth:`logout` removes only the refresh record. The
    presented access token stays valid until its natural expiry; callers that
    need immediate revocation use :meth:`logout_all`.
    """

    def __init__(
        self,
        *,
        codec: AccessTokenCodec,
        refresh_store: RefreshTokenStore,
        token_cfg: AuthTokenConfig | None = None,
        ctx: ServiceContext | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param codec: Adapter for issuing/verifying access tokens.
        :param refresh_store: Stateful store for refresh sessions.
        :param token_cfg: Refresh expiry configuration.
        :param ctx: Optional request-scoped context.
        """
        super().__init__(ctx=ctx)
        self.codec = codec
        self.refresh_store = refresh_store
        self.cfg = token_cfg or AuthTokenConfig()

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> LoginOut:
        """
        Verify credentials and issue a fresh token pair.

        Unknown email and wrong password are indistinguishable: same error,
        and a password hash check runs in both cases.

        :param dto: Login input.
        :returns: The user and an access/refresh token pair.
        :raises InvalidCredentials: If the email/password pair does not match a live user.
        :raises AccountInactive: If the password matches but the account is disabled.
        """
        with self.rw_uow() as uow:
            user = uow.users.get_by_email(dto.email)
            if user is None:
                password_matches(_dummy_password_hash(), dto.password)
                logger.info("login rejected", extra={"event": "auth.login.rejected"})
                raise InvalidCredentials()
            if not user.verify_password(dto.password):
                logger.info(
                    "login rejected",
                    extra={"event": "auth.login.rejected", "user_id": user.id},
                )
                raise InvalidCredentials()
            if not user.is_active:
                logger.info(
                    "login on inactive account",
                    extra={"event": "auth.login.inactive", "user_id": user.id},
                )
                raise AccountInactive()
            subject = SubjectSnapshot.of(user)

        tokens = self._issue_pair(subject, device=dto.device)
        logger.info("login succeeded", extra={"event": "auth.login.succeeded", "user_id": subject.id})
        return LoginOut(user=user, tokens=tokens)

    # ------------------------------------------------------------------ #
    # Refresh with single-use rotation
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> TokenPairOut:
        """
        Redeem a refresh token for a new pair and retire it.

        Rotation creates the replacement record *before* deleting the consumed
        one. A crash in between leaves two valid records, never zero. The
        delete is conditional: of two concurrent redemptions of the same value
        only one removes the record; the other deletes its own replacement
        and fails with :class:`InvalidRefreshToken`.

        :raises InvalidRefreshToken: Unknown, already rotated, lost a race, or
            the owner is soft-deleted.
        :raises UserNotFound: The owner row no longer exists (only reachable
            with a store that does not cascade).
        :raises RefreshTokenRevokedOrExpired: Expired, or stale ``token_version``.
        :raises AccountInactive: Owner disabled.
        """
        token_hash = hash_refresh_token(dto.refresh_token)
        record = self.refresh_store.get(token_hash)
        if record is None:
            self._reject_unknown(dto.refresh_token)

        with self.rw_uow() as uow:
            user = uow.users.get(record.user_id, include_deleted=True)
            if user is not None:
                subject = SubjectSnapshot.of(user)
                active = user.is_active
                tombstoned = user.is_deleted

        if user is None or tombstoned:
            self.refresh_store.delete(token_hash)
            logger.info(
                "refresh rejected: owner gone",
                extra={"event": "auth.refresh.rejected", "user_id": record.user_id},
            )
            if user is None:
                raise UserNotFound(record.user_id)
            raise InvalidRefreshToken()
        live_version = subject.token_version

        if not record.is_valid(live_version, self.now_utc()):
            logger.info(
                "refresh rejected: revoked or expired",
                extra={"event": "auth.refresh.rejected", "user_id": record.user_id},
            )
            raise RefreshTokenRevokedOrExpired()
        if not active:
            raise AccountInactive()

        new_raw, replacement = self._create_session(
            user_id=record.user_id,
            token_version=live_version,
            device=DeviceInfo(ip_address=record.ip_address, user_agent=record.user_agent),
        )
        if not self.refresh_store.delete(token_hash):
            # Another redemption consumed the parent first
            self.refresh_store.delete(replacement.token_hash)
            logger.info(
                "refresh lost rotation race",
                extra={"event": "auth.refresh.race_lost", "user_id": record.user_id},
            )
            raise InvalidRefreshToken()

        logger.info(
            "refresh rotated", extra={"event": "auth.refresh.rotated", "user_id": record.user_id}
        )
        return TokenPairOut(
            access_token=self.codec.issue(subject),
            refresh_token=new_raw,
            expires_in=self.codec.expires_in,
        )

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, dto: LogoutIn) -> None:
        """
        End one session. Idempotent: unknown or foreign tokens are ignored.

        The access token used for this call is *not* revoked.
        """
        if dto.refresh_token:
            self.refresh_store.delete(hash_refresh_token(dto.refresh_token), user_id=dto.user_id)
        logger.info("logout", extra={"event": "auth.logout", "user_id": dto.user_id})

    def logout_all(self, user_id: int) -> int:
        """
        Revoke every session of ``user_id``.

        Bumps ``token_version`` with one atomic ``UPDATE`` (committed first, so
        every outstanding token is stale even if the cleanup below fails), then
        deletes all refresh records.

        :returns: The new ``token_version``.
        :raises UserNotFound: If the user does not exist.
        """
        with self.rw_uow() as uow:
            new_version = uow.users.bump_token_version(user_id)
            if new_version is None:
                raise UserNotFound(user_id)

        removed = self.refresh_store.delete_all_for_user(user_id)
        logger.info(
            "logout all sessions: %s refresh records removed",
            removed,
            extra={"event": "auth.logout_all", "user_id": user_id},
        )
        return new_version

    # ------------------------------------------------------------------ #
    # Request authentication
    # ------------------------------------------------------------------ #

    def authenticate(self, access_token: str) -> Identity:
        """
        Resolve a bearer token into a live identity.

        Verifies the token through the codec, then re-reads the user so that a
        ``logout_all`` takes effect immediately and role changes apply on the
        next request.

        :raises TokenExpired: see :meth:`AccessTokenCodec.verify`.
        :raises TokenInvalid: Codec failure, unknown/tombstoned user or stale ``tv``.
        :raises TokenMalformed: see :meth:`AccessTokenCodec.verify`.
        :raises AccountInactive: The user was deactivated.
        """
        claims = self.codec.verify(access_token)
        with self.rw_uow() as uow:
            user = uow.users.get(claims.subject_id)
            if user is None or user.token_version != claims.token_version:
                raise TokenInvalid()
            if not user.is_active:
                raise AccountInactive()
            return Identity(user_id=user.id, role=user.role, token_version=user.token_version)

    # ------------------------------------------------------------------ #
    # Profile
    # ------------------------------------------------------------------ #

    def get_profile(self, user_id: int) -> ProfileOut:
        """Return the user and their non-expired refresh sessions."""
        with self.rw_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise UserNotFound(user_id)
        now = self.now_utc()
        sessions = [r for r in self.refresh_store.list_for_user(user_id) if not r.is_expired(now)]
        return ProfileOut(user=user, sessions=sessions)

    def update_profile(self, user_id: int, dto: ProfileUpdateIn) -> User:
        """
        Partially update the caller's own name, email and password.

        :raises DuplicateEmailError: The new email belongs to another account.
        """
        fields = {
            k: v
            for k, v in (("name", dto.name), ("email", dto.email), ("password", dto.password))
            if v is not None
        }
        try:
            with self.rw_uow() as uow:
                user = uow.users.get(user_id)
                if user is None:
                    raise UserNotFound(user_id)
                email = fields.get("email")
                if email is not None and uow.users.email_taken(email, exclude_id=user.id):
                    raise DuplicateEmailError(email)
                uow.users.assign_updates(user, fields)
        except IntegrityError as exc:
            if is_email_conflict(exc):
                raise DuplicateEmailError(fields.get("email", "")) from exc
            raise
        logger.info(
            "profile updated",
            extra={"event": "auth.profile.updated", "user_id": user_id},
        )
        return user

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _issue_pair(self, subject: SubjectSnapshot, *, device: DeviceInfo) -> TokenPairOut:
        raw, _ = self._create_session(
            user_id=subject.id, token_version=subject.token_version, device=device
        )
        return TokenPairOut(
            access_token=self.codec.issue(subject),
            refresh_token=raw,
            expires_in=self.codec.expires_in,
        )

    def _create_session(
        self, *, user_id: int, token_version: int, device: DeviceInfo
    ) -> tuple[str, RefreshTokenRecord]:
        """Mint a raw refresh value and persist only its hash."""
        raw = generate_refresh_token(user_id, token_version)
        record = self.refresh_store.create(
            user_id=user_id,
            token_hash=hash_refresh_token(raw),
            token_version=token_version,
            expires_at=self.now_utc() + self.cfg.refresh_expires,
            ip_address=device.ip_address,
            user_agent=device.user_agent,
        )
        return raw, record

    def _reject_unknown(self, raw: str) -> NoReturn:
        """
        Classify a lookup miss and raise.

        Records are deleted by a global revocation, so a value whose embedded
        version predates the owner's live one is reported as revoked rather
        than unknown.
        """
        snapshot = parse_snapshot(raw)
        if snapshot is not None:
            user_id, version = snapshot
            with self.rw_uow() as uow:
                live = uow.users.get_token_version(user_id)
            if live is not None and version < live:
                logger.info(
                    "refresh rejected: revoked",
                    extra={"event": "auth.refresh.rejected", "user_id": user_id},
                )
                raise RefreshTokenRevokedOrExpired()
        logger.info("refresh rejected: unknown token", extra={"event": "auth.refresh.unknown"})
        raise InvalidRefreshToken()
