"""Idempotent database seed helpers for the default console accounts."""

from __future__ import annotations

import logging
from typing import cast

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import select
from sqlalchemy.orm import Session

from cms_api.models.user import Role, User

LOGGER = logging.getLogger(__name__)

USER_FIXTURES: list[dict[str, str | Role]] = [
    {"name": "Admin User", "email": "admin@agency.com", "role": Role.ADMIN},
    {"name": "Editor User", "email": "editor@agency.com", "role": Role.EDITOR},
]


def _session(database: SQLAlchemy) -> Session:
    """Return the current SQLAlchemy session."""
    return cast(Session, database.session)


def _touch(summary: dict[str, dict[str, int]], table: str, created: bool) -> None:
    """Update summary counters for the given table."""
    entry = summary.setdefault(table, {"created": 0, "existing": 0})
    if created:
        entry["created"] += 1
    else:
        entry["existing"] += 1


def seed_users(
    database: SQLAlchemy, *, password: str, verbose: bool = False
) -> dict[str, dict[str, int]]:
    """Create the default admin and editor accounts when missing.

    Existing accounts (soft-deleted ones included) are left untouched, so the
    command never resets a password that was changed after seeding.
    """
    if verbose:
        LOGGER.info("Seeding default users...")
    session = _session(database)
    summary: dict[str, dict[str, int]] = {}

    for fixture in USER_FIXTURES:
        email = str(fixture["email"]).strip().lower()
        user = session.execute(select(User).filter_by(email=email)).scalar_one_or_none()
        created = user is None
        if user is None:
            user = User(name=str(fixture["name"]), email=email, role=fixture["role"])
            user.password = password
            session.add(user)
            session.flush()
            LOGGER.info("created seed account %s", email, extra={"user_id": user.id})
        _touch(summary, "users", created)

    session.commit()
    return summary


def run_all(
    database: SQLAlchemy, *, password: str, verbose: bool = False
) -> dict[str, dict[str, int]]:
    """Run all seeders."""
    if verbose:
        LOGGER.info("Running full seed pipeline...")
    return seed_users(database, password=password, verbose=verbose)


__all__ = ["USER_FIXTURES", "seed_users", "run_all"]
