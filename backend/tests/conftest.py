"""Shared fixtures: a testing app, an in-memory SQLite schema and a
per-test transaction that is always rolled back.
"""

from __future__ import annotations

import os

import pytest
from cms_api.core.config import TestingConfig
from cms_api.core.extensions import db as _db
from cms_api.factory import create_app
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker


@pytest.fixture(scope="session")
def app():
    """Application built from :class:`TestingConfig` (SQL refresh store, no rate limits)."""
    os.environ.pop("DATABASE_URL", None)
    app = create_app(TestingConfig, instance_relative_config=False)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture(scope="session")
def db(app):
    """Create the schema once and keep an app context open for the run."""
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """
    Session joined to an outer transaction that is rolled back after the test.

    The session runs inside a SAVEPOINT, so a unit of work ``commit()`` only
    releases that SAVEPOINT. A fresh one is opened whenever the previous ends,
    letting several commits happen within one test.
    """
    outer = connection.begin()
    scoped = scoped_session(sessionmaker(bind=connection, future=True, autoflush=False))
    savepoint = connection.begin_nested()

    @event.listens_for(scoped(), "after_transaction_end")
    def _reopen_savepoint(sess, trans):  # pragma: no cover
        nonlocal savepoint
        if trans.nested and not trans._parent.nested:
            savepoint = connection.begin_nested()

    app_session = db.session
    db.session.remove()
    db.session = scoped

    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = app_session
        outer.rollback()


@pytest.fixture(scope="session")
def faker():
    """Seeded :class:`faker.Faker` so generated data is reproducible."""
    from faker import Faker

    Faker.seed(1337)
    return Faker()


@pytest.fixture()
def client(app, session):
    """Test client whose requests see the per-test session."""
    return app.test_client()


@pytest.fixture(autouse=True)
def _factories_session(session):
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield
