"""Service layer public API.

This package exposes the essential building blocks for the service layer so that
callers can import from :mod:`cms_api.services` without knowing internal structure.

Re-exports
----------
- Base primitives (from ``cms_api.services._shared.base``)
    * :class:`BaseService`
    * :class:`ServiceContext`

- Session manager (from ``cms_api.services.auth``)
    * :class:`AuthService`
    * DTOs: :class:`LoginIn`, :class:`RefreshIn`, :class:`LogoutIn`,
      :class:`ProfileUpdateIn`, :class:`DeviceInfo`, :class:`TokenPairOut`,
      :class:`LoginOut`, :class:`ProfileOut`, :class:`Identity`,
      :class:`AuthTokenConfig`

- User administration (from ``cms_api.services.users``)
    * :class:`UserService`
    * DTOs: :class:`UserCreateIn`, :class:`UserUpdateIn`

- Taxonomy (from ``cms_api.services.categories`` and ``cms_api.services.tags``)
    * :class:`CategoryService`, :class:`TagService`
    * DTOs: :class:`CategoryCreateIn`, :class:`CategoryUpdateIn`,
      :class:`CategoryOrderIn`, :class:`TagCreateIn`, :class:`TagUpdateIn`
"""

from __future__ import annotations

# Base primitives (service base + request-scoped context)
from ._shared.base import BaseService, ServiceContext

# Session manager + DTOs
from .auth.dto import (
    AuthTokenConfig,
    DeviceInfo,
    Identity,
    LoginIn,
    LoginOut,
    LogoutIn,
    ProfileOut,
    ProfileUpdateIn,
    RefreshIn,
    TokenPairOut,
)
from .auth.service import AuthService

# Taxonomy + DTOs
from .categories.dto import CategoryCreateIn, CategoryOrderIn, CategoryUpdateIn
from .categories.service import CategoryService
from .tags.dto import TagCreateIn, TagUpdateIn
from .tags.service import TagService

# User administration + DTOs
from .users.dto import UserCreateIn, UserUpdateIn
from .users.service import UserService

__all__ = [
    # Base
    "BaseService",
    "ServiceContext",
    # Auth
    "AuthService",
    "AuthTokenConfig",
    "DeviceInfo",
    "Identity",
    "LoginIn",
    "LoginOut",
    "LogoutIn",
    "ProfileOut",
    "ProfileUpdateIn",
    "RefreshIn",
    "TokenPairOut",
    # Users
    "UserService",
    "UserCreateIn",
    "UserUpdateIn",
    # Taxonomy
    "CategoryService",
    "CategoryCreateIn",
    "CategoryOrderIn",
    "CategoryUpdateIn",
    "TagService",
    "TagCreateIn",
    "TagUpdateIn",
]
