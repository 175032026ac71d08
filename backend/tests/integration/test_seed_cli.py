"""Tests for the ``flask seed`` command group."""

from __future__ import annotations

from cms_api.cli.seed import seed_cli
from cms_api.models.user import Role, User
from sqlalchemy import select


def test_seed_run_is_idempotent(app, session) -> None:
    runner = app.test_cli_runner()

    first = runner.invoke(seed_cli, ["run"])
    assert first.exit_code == 0, first.output
    assert "created= 2" in first.output

    second = runner.invoke(seed_cli, ["run"])
    assert second.exit_code == 0, second.output
    assert "existing= 2" in second.output

    users = {u.email: u for u in session.execute(select(User)).scalars()}
    assert users["admin@agency.com"].role is Role.ADMIN
    assert users["editor@agency.com"].role is Role.EDITOR
    assert users["admin@agency.com"].verify_password(app.config["SEED_DEFAULT_PASSWORD"])
