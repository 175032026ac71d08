"""Flask CLI commands for seeding the default console accounts."""

from __future__ import annotations

import logging

import click
from flask import current_app
from flask.cli import with_appcontext
from sqlalchemy.exc import SQLAlchemyError

from cms_api.core.extensions import db
from cms_api.seeds import seed_data

LOGGER = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    """Raise logging verbosity for seed modules when requested."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.getLogger(seed_data.__name__).setLevel(level)
    LOGGER.setLevel(level)


def _echo_summary(summary: dict[str, dict[str, int]], password: str) -> None:
    """Print per-table counters and the default credentials."""
    click.echo("Seed summary:")
    if not summary:
        click.echo("  (no changes)")
        return
    width = max(len(name) for name in summary)
    for table, counters in sorted(summary.items()):
        created = counters.get("created", 0)
        existing = counters.get("existing", 0)
        click.echo(f"  {table.ljust(width)}  created={created:>2}  existing={existing:>2}")
    if summary.get("users", {}).get("created"):
        click.echo("Default accounts (new ones only use this password):")
        for fixture in seed_data.USER_FIXTURES:
            click.echo(f"  {fixture['email']}  /  {password}")


def _ensure_non_production() -> None:
    """Abort destructive commands when running in production."""
    config = current_app.config
    app_env = str(config.get("APP_ENV", "production")).lower()
    if app_env == "production" and not (config.get("DEBUG") or config.get("TESTING")):
        raise click.UsageError(
            "The 'flask seed fresh' command is restricted to non-production environments."
        )


def _seed(verbose: bool) -> None:
    password = str(current_app.config.get("SEED_DEFAULT_PASSWORD", "Password123"))
    try:
        summary = seed_data.run_all(db, password=password, verbose=verbose)
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise click.ClickException(f"Seeding failed: {exc}") from exc
    _echo_summary(summary, password)


@click.group("seed")
@click.option("--verbose", is_flag=True, help="Enable verbose logging for seeding.")
@click.pass_context
def seed_cli(ctx: click.Context, verbose: bool) -> None:
    """Collection of database seeding commands."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    _configure_logging(verbose)


@seed_cli.command("run")
@click.pass_context
@with_appcontext
def run_command(ctx: click.Context) -> None:
    """Create the default admin and editor accounts if they are missing."""
    _seed(bool(ctx.obj.get("verbose", False)))


@seed_cli.command("fresh")
@click.option("--yes", is_flag=True, help="Skip the destructive confirmation prompt.")
@click.pass_context
@with_appcontext
def fresh_command(ctx: click.Context, yes: bool) -> None:
    """Drop all tables, recreate the schema, and seed the default accounts."""
    _ensure_non_production()
    if not yes:
        click.confirm(
            "This will DROP all application tables and recreate them. Continue?",
            abort=True,
        )
    LOGGER.info("Dropping database schema...")
    db.session.remove()
    db.drop_all()
    LOGGER.info("Recreating database schema...")
    db.create_all()
    _seed(bool(ctx.obj.get("verbose", False)))
