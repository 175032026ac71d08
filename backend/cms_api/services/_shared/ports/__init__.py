"""
cms_api.services._shared.ports
==============================

Collection of *ports* (hexagonal interfaces) that define the contracts for
session storage and access token handling.

Modules
-------
- :mod:`access_token_codec`:
    Defines :class:`~.AccessTokenCodec` and :class:`~.AccessClaims`, the
    abstraction for signing and verifying stateless access tokens.

- :mod:`refresh_token_store`:
    Defines :class:`~.RefreshTokenStore` and :class:`~.RefreshTokenRecord`,
    the abstraction for server-side refresh session persistence.

Design Notes
------------
Concrete adapters (SQL, Redis, Flask-JWT-Extended) live under
``cms_api.infra``; the service layer depends only on these interfaces.
"""

from __future__ import annotations

from .access_token_codec import AccessClaims, AccessTokenCodec, TokenSubject
from .refresh_token_store import (
    InMemoryRefreshTokenStore,
    RefreshTokenRecord,
    RefreshTokenStore,
)

__all__ = [
    "AccessClaims",
    "AccessTokenCodec",
    "TokenSubject",
    "RefreshTokenStore",
    "RefreshTokenRecord",
    "InMemoryRefreshTokenStore",
]
