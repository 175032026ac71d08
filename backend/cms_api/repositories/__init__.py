"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from cms_api.repositories.base import BaseRepository
from cms_api.repositories.category import CategoryRepository
from cms_api.repositories.refresh_token import RefreshTokenRepository
from cms_api.repositories.tag import TagRepository
from cms_api.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "CategoryRepository",
    "RefreshTokenRepository",
    "TagRepository",
    "UserRepository",
]
