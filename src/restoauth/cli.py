"""Command-line interface for restoauth.

This module provides the CLI commands for running and inspecting the
authorization service.
"""

import asyncio
import json
from typing import NoReturn

import click

from restoauth.core.config import get_settings
from restoauth.core.logging import configure_logging, get_logger


@click.group()
@click.version_option(version="0.1.0", prog_name="restoauth")
def cli() -> None:
    """restoauth - Role-based authorization for restaurant management.

    Resolves staff roles and the restaurant locations they can reach.
    """


@cli.command()
@click.option(
    "--host",
    type=str,
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@click.option(
    "--workers",
    type=int,
    default=None,
    help="Number of worker processes (overrides config)",
)
@click.option(
    "--reload",
    is_flag=True,
    default=False,
    help="Enable auto-reload for development",
)
def serve(host: str | None, port: int | None, workers: int | None, reload: bool) -> None:
    """Start the restoauth server."""
    import uvicorn

    settings = get_settings()

    bind_host = host or settings.host
    bind_port = port or settings.port
    bind_workers = workers or settings.workers

    if bind_workers > 1 and settings.database_url.startswith("sqlite"):
        click.echo(
            "Error: SQLite does not support multiple worker processes. "
            "Use --workers 1 or switch to PostgreSQL.",
            err=True,
        )
        raise SystemExit(1)

    configure_logging(settings)

    logger = get_logger(__name__)
    logger.info(
        "Starting restoauth server",
        host=bind_host,
        port=bind_port,
        workers=bind_workers,
        reload=reload,
        environment=settings.environment,
    )

    uvicorn.run(
        "restoauth.infrastructure.api.app:app",
        host=bind_host,
        port=bind_port,
        workers=1 if reload else bind_workers,
        reload=reload,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


@cli.command()
@click.option(
    "--force",
    is_flag=True,
    default=False,
    help="Skip confirmation and allow running in production",
)
def init_db(force: bool) -> None:
    """Initialize the database.

    Creates all tables and seeds the default role catalog.
    """
    from restoauth.infrastructure.persistence.database import (
        get_db_manager,
        init_database,
    )

    settings = get_settings()
    configure_logging(settings)

    if settings.is_production and not force:
        click.echo(
            "ERROR: Running in production mode. Pass --force to initialize anyway.",
            err=True,
        )
        raise SystemExit(1)

    if not force:
        click.confirm(
            "This will create all database tables. Continue?",
            abort=True,
            default=False,
        )

    async def initialize():
        try:
            await init_database()
            click.echo("Database initialized successfully.")
        finally:
            db = get_db_manager()
            await db.disconnect()

    asyncio.run(initialize())


@cli.command("show-user")
@click.argument("user_id")
def show_user(user_id: str) -> None:
    """Print a user's effective roles and accessible locations as JSON."""
    from dataclasses import asdict

    from restoauth.domain.exceptions import AuthorizationError
    from restoauth.domain.services import AuthorizationService
    from restoauth.infrastructure.persistence.database import get_db_manager

    settings = get_settings()
    configure_logging(settings)

    async def describe() -> dict:
        db = get_db_manager()
        try:
            async with db.session() as session:
                summary = await AuthorizationService(session).describe_user(user_id)
                return summary.to_dict()
        finally:
            await db.disconnect()

    try:
        data = asyncio.run(describe())
    except AuthorizationError as e:
        click.echo(f"ERROR: {e.message}", err=True)
        raise SystemExit(1)

    def default(value):
        return asdict(value)

    click.echo(json.dumps(data, indent=2, default=default))


@cli.command()
def info() -> None:
    """Display restoauth configuration."""
    settings = get_settings()

    click.echo(f"""
restoauth v{settings.app_version}
{'=' * 40}

Configuration:
  Environment:  {settings.environment}
  Debug:        {settings.debug}
  API Prefix:   {settings.api_prefix}

Server:
  Host:         {settings.host}
  Port:         {settings.port}
  Workers:      {settings.workers}

Database:
  URL:          {settings.database_url}
  Pool Size:    {settings.db_pool_size}
  Echo:         {settings.db_echo}

Authorization:
  Token Issuer: {settings.token_issuer}
  Algorithm:    {settings.token_algorithm}
  Timeout:      {settings.resolution_timeout_seconds}s
  Seed Roles:   {settings.seed_default_roles}

Logging:
  Level:        {settings.log_level}
  Format:       {settings.log_format}
""")


def main() -> NoReturn:
    """Main entry point for the CLI.

    This function is called when the `restoauth` command is run
    or when using `python -m restoauth`.
    """
    cli()
