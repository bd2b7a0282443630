"""Showroom CLI - Main Entry Point.

Commands:
    serve        - Run the HTTP server
    init-db      - Create the database schema
    create-role  - Add a role (operator action)
    create-user  - Add a user
    routes       - List the HTTP routes
"""

from __future__ import annotations

import asyncio
import sys
from typing import Awaitable, Callable, Optional, TypeVar

import click

from . import __version__
from .app import build_hasher, create_app
from .config import ConfigError, ConfigLoader, Settings
from .db import Database
from .faults import Fault, ServiceResult
from .models import EntityStore
from .server import configure_logging, run
from .services import DEFAULT_ROLE_NAMES, RoleService, UserService

T = TypeVar("T")


def success(message: str) -> None:
    """Print success message in green."""
    click.echo(click.style(message, fg="green"))


def error(message: str) -> None:
    """Print error message in red."""
    click.echo(click.style(message, fg="red"), err=True)


def _settings(ctx: click.Context) -> Settings:
    return ctx.obj["settings"]


def _with_store(settings: Settings, action: Callable[[EntityStore], Awaitable[T]]) -> T:
    """Run ``action`` against a connected store with the schema in place."""

    async def runner() -> T:
        database = Database(settings.database_url)
        await database.connect()
        try:
            store = EntityStore(database)
            await store.create_schema()
            return await action(store)
        finally:
            await database.disconnect()

    return asyncio.run(runner())


def _report(result: ServiceResult, message: str) -> None:
    if not result.ok:
        error(f"  ✗ {result.error_message} ({result.error_code})")
        sys.exit(1)
    success(f"  ✓ {message}")


@click.group()
@click.version_option(version=__version__, prog_name="showroom")
@click.option("--env-file", type=click.Path(dir_okay=False), default=None,
              help="Read settings from this .env file")
@click.option("--database-url", type=str, default=None, help="Override the database URL")
@click.pass_context
def cli(ctx, env_file: Optional[str], database_url: Optional[str]):
    """Back-office catalog API."""
    overrides = {"database_url": database_url} if database_url else None
    try:
        settings = ConfigLoader.load(env_file=env_file, overrides=overrides)
    except ConfigError as e:
        error(f"  ✗ Invalid configuration: {e}")
        sys.exit(2)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@cli.command()
@click.option("--host", type=str, default=None, help="Bind host")
@click.option("--port", type=int, default=None, help="Bind port")
@click.option("--reload", is_flag=True, help="Restart on code changes")
@click.pass_context
def serve(ctx, host: Optional[str], port: Optional[int], reload: bool):
    """Run the HTTP server."""
    settings = _settings(ctx)
    if host:
        settings.host = host
    if port:
        settings.port = port
    run(settings, reload=reload)


@cli.command("init-db")
@click.pass_context
def init_db(ctx):
    """Create the database schema (idempotent)."""
    settings = _settings(ctx)
    configure_logging(settings.log_level)
    try:
        tables = _with_store(settings, lambda store: store.create_schema())
    except Fault as e:
        error(f"  ✗ {e}")
        sys.exit(1)
    success(f"  ✓ Schema ready: {', '.join(tables)}")


@cli.command("create-role")
@click.argument("role_id", type=int)
@click.argument("role_name")
@click.option("--endpoint", "endpoints", multiple=True, help="Endpoint the role may call (repeatable)")
@click.pass_context
def create_role(ctx, role_id: int, role_name: str, endpoints: tuple):
    """
    Add a role.

    Examples:
      showroom create-role 1 admin --endpoint /user --endpoint /product
      showroom create-role 2 staff
    """
    settings = _settings(ctx)
    configure_logging(settings.log_level)
    result = _with_store(
        settings, lambda store: RoleService(store).create_role(role_id, role_name, endpoints)
    )
    _report(result, f"Created role '{role_name}'")


@cli.command("create-user")
@click.argument("user_id")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
@click.option("--role", "roles", multiple=True, help="Role name (repeatable, default: staff)")
@click.pass_context
def create_user(ctx, user_id: str, password: str, roles: tuple):
    """Add a user holding the given roles."""
    settings = _settings(ctx)
    configure_logging(settings.log_level)
    result = _with_store(
        settings,
        lambda store: UserService(store, build_hasher(settings)).create(
            user_id=user_id,
            password=password,
            role_names=list(roles) or list(DEFAULT_ROLE_NAMES),
        ),
    )
    _report(result, f"Created user '{user_id}'")


@cli.command()
@click.pass_context
def routes(ctx):
    """List the HTTP routes."""
    app = create_app(_settings(ctx))
    for path, methods in sorted(app.router.routes.items()):
        for method, handler in sorted(methods.items()):
            click.echo(f"  {method:<7} {path:<16} {type(handler.__self__).__name__}.{handler.__name__}")


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
