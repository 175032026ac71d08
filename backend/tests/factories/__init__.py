"""Factory Boy base wired to the per-test transactional session."""

from __future__ import annotations

import factory


class SQLAlchemySession:
    """Holder for the session installed by the ``session`` fixture."""

    _session = None

    @classmethod
    def set(cls, session):
        cls._session = session

    @classmethod
    def get(cls):
        if cls._session is None:
            raise RuntimeError("No factory session installed; request the 'session' fixture.")
        return cls._session


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    """Flush-only persistence: the test transaction owns commit and rollback."""

    class Meta:
        abstract = True
        sqlalchemy_session_factory = SQLAlchemySession.get
        sqlalchemy_session_persistence = "flush"
