# cms_api/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cms_api.models.user import Role, User
    from cms_api.services._shared.ports import RefreshTokenRecord

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class DeviceInfo:
    """
    Diagnostic metadata recorded on a refresh session.

    :param ip_address: Client address as seen by the app (after ProxyFix).
    :param user_agent: Raw ``User-Agent`` header.
    """

    ip_address: str | None = None
    user_agent: str | None = None


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: User email (normalized by the store lookup).
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    :param device: Optional device metadata for the new session.
    :type device: DeviceInfo
    """

    email: str
    password: str
    device: DeviceInfo = field(default_factory=DeviceInfo)


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Raw refresh value as previously issued.
    :type refresh_token: str
    """

    refresh_token: str


@dataclass(frozen=True, slots=True)
class LogoutIn:
    """
    Input DTO for single-session logout.

    :param user_id: Authenticated user.
    :type user_id: int
    :param refresh_token: Raw refresh value of the session to end, if known.
    :type refresh_token: str | None
    """

    user_id: int
    refresh_token: str | None = None


@dataclass(frozen=True, slots=True)
class ProfileUpdateIn:
    """
    Partial self-service profile update. ``None`` means "leave unchanged".

    Password confirmation is checked by the transport schema.
    """

    name: str | None = None
    email: str | None = None
    password: str | None = None


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with access and refresh tokens.

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Raw refresh value (returned once, never stored).
    :type refresh_token: str
    :param expires_in: Access token lifetime in seconds.
    :type expires_in: int
    :param token_type: Always ``"Bearer"``.
    :type token_type: str
    """

    access_token: str
    refresh_token: str
    expires_in: int
    token_type: str = "Bearer"


@dataclass(frozen=True, slots=True)
class LoginOut:
    user: User
    tokens: TokenPairOut


@dataclass(frozen=True, slots=True)
class ProfileOut:
    """
    Profile read-model.

    :param user: The live user row.
    :param sessions: Non-expired refresh sessions, oldest first.
    """

    user: User
    sessions: list[RefreshTokenRecord]


@dataclass(frozen=True, slots=True)
class Identity:
    """
    Identity resolved from a verified access token and the live user row.

    :param user_id: Authenticated user id.
    :param role: Live role (not the one minted into the token).
    :param token_version: Live token version.
    """

    user_id: int
    role: Role
    token_version: int


@dataclass(frozen=True, slots=True)
class SubjectSnapshot:
    """
    User values minted into a token pair.

    Read while the row is loaded inside the unit of work, so the access token
    and the refresh record carry the same ``token_version`` even if the row
    changes after commit.
    """

    id: int
    role: Role
    token_version: int

    @classmethod
    def of(cls, user: User) -> SubjectSnapshot:
        return cls(id=user.id, role=user.role, token_version=user.token_version)


# ------------------------ Config DTO --------------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthTokenConfig:
    """
    Refresh session configuration.

    Access token lifetime is owned by the codec.

    :param refresh_expires: Refresh token lifetime.
    :type refresh_expires: timedelta
    """

    refresh_expires: timedelta = timedelta(days=30)
