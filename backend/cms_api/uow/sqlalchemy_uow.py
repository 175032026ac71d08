"""
SQLAlchemy implementation of UnitOfWork for Flask.
"""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from cms_api.core.extensions import db
from cms_api.repositories import (
    CategoryRepository,
    RefreshTokenRepository,
    TagRepository,
    UserRepository,
)
from cms_api.services._shared.errors import StoreFailure
from cms_api.uow.base import UnitOfWork


class SQLAlchemyRepositoryContainer:
    """Provide repository instances that share a SQLAlchemy session."""

    def __init__(self, *, session: Session) -> None:
        self.session = session
        self.users = UserRepository(session=self.session)
        self.refresh_tokens = RefreshTokenRepository(session=self.session)
        self.categories = CategoryRepository(session=self.session)
        self.tags = TagRepository(session=self.session)


class SQLAlchemyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    SQLAlchemy-backed UoW using the Flask-scoped session.

    The same session is shared across all repositories for a consistent
    transaction. Commits on a clean exit and rolls back otherwise. Driver
    failures other than integrity violations surface as
    :class:`~cms_api.services._shared.errors.StoreFailure`; integrity errors
    propagate untouched so services can map them to domain conflicts.

    Units of work must not be nested: an inner exit would commit the outer
    scope early.
    """

    def __init__(self) -> None:
        super().__init__(session=db.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        # No-op: the session is lazily started on the first statement.
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            try:
                self.commit()
            except IntegrityError:
                self.rollback()
                raise
            except SQLAlchemyError as err:
                self.rollback()
                raise StoreFailure() from err
            return
        self.rollback()
        if isinstance(exc, SQLAlchemyError) and not isinstance(exc, IntegrityError):
            raise StoreFailure() from exc

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
