"""Transaction boundary contract shared by services and the refresh store."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cms_api.repositories import (
        CategoryRepository,
        RefreshTokenRepository,
        TagRepository,
        UserRepository,
    )


class UnitOfWork(ABC):
    """
    One transaction over the console tables.

    Every repository attribute shares the transaction. Leaving the block
    normally commits; leaving it with an exception rolls back.
    """

    users: UserRepository
    refresh_tokens: RefreshTokenRepository
    categories: CategoryRepository
    tags: TagRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...

    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...
