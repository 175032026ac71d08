"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import (
    LoginResponseSchema,
    LoginSchema,
    LogoutSchema,
    ProfileUpdateSchema,
    RefreshSchema,
    SessionSchema,
    TokenPairSchema,
)
from .category import (
    CategoryCreateSchema,
    CategoryQuerySchema,
    CategoryReorderSchema,
    CategorySchema,
    CategoryUpdateSchema,
)
from .tag import (
    TagBulkDeleteSchema,
    TagCreateSchema,
    TagFindOrCreateSchema,
    TagSchema,
    TagUpdateSchema,
)
from .user import (
    RoleChangeSchema,
    UserCreateSchema,
    UserQuerySchema,
    UserSchema,
    UserUpdateSchema,
)

__all__ = [
    "LoginSchema",
    "LoginResponseSchema",
    "LogoutSchema",
    "ProfileUpdateSchema",
    "RefreshSchema",
    "SessionSchema",
    "TokenPairSchema",
    "RoleChangeSchema",
    "UserCreateSchema",
    "UserQuerySchema",
    "UserSchema",
    "UserUpdateSchema",
    "CategoryCreateSchema",
    "CategoryQuerySchema",
    "CategoryReorderSchema",
    "CategorySchema",
    "CategoryUpdateSchema",
    "TagBulkDeleteSchema",
    "TagCreateSchema",
    "TagFindOrCreateSchema",
    "TagSchema",
    "TagUpdateSchema",
]
