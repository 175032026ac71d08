from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


class TokenSubject(Protocol):
    """Minimal view of a user the codec needs to mint a token."""

    id: int
    token_version: int

    @property
    def role(self) -> object: ...


@dataclass(frozen=True, slots=True)
class AccessClaims:
    """
    Verified content of an access token.

    :ivar subject_id: User id from ``sub``.
    :ivar role: Role name from ``role`` (as minted; not re-checked).
    :ivar token_version: ``tv`` snapshot at issuance.
    :ivar expires_at: ``exp`` (UTC).
    :ivar issued_at: ``iat`` (UTC), when present.
    :ivar jti: Token identifier.
    """

    subject_id: int
    role: str
    token_version: int
    expires_at: datetime
    issued_at: datetime | None = None
    jti: str | None = None


class AccessTokenCodec(Protocol):
    """
    Port for stateless, signed access tokens.

    The codec never consults the credential store. Callers wanting live
    revocation compare :attr:`AccessClaims.token_version` against the user row.
    """

    @property
    def expires_in(self) -> int:
        """Access token lifetime in seconds."""

    def issue(self, user: TokenSubject) -> str:
        """Encode ``{sub, role, tv, iat, exp}`` for ``user`` and sign it."""

    def verify(self, token: str) -> AccessClaims:
        """
        Check signature, type and expiry, then parse the required claims.

        :raises TokenExpired: ``exp`` is in the past.
        :raises TokenInvalid: Bad signature, not a JWT, or not an access token.
        :raises TokenMalformed: ``sub``, ``role`` or ``tv`` missing or unparsable.
        """
