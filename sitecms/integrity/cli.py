"""CLI commands for media integrity maintenance."""

import asyncio
import json
from collections.abc import Awaitable, Callable
from typing import Any

import click

from sitecms.core.config import settings
from sitecms.core.logging import configure_logging


def _run(work: Callable[[Any], Awaitable[dict[str, Any]]]) -> dict[str, Any]:
    """Run ``work`` against freshly created services and close them after."""
    from sitecms.core.events import create_services

    async def main() -> dict[str, Any]:
        services = await create_services(settings)
        try:
            return await work(services)
        finally:
            await services.close()

    return asyncio.run(main())


def _echo(payload: dict[str, Any]) -> None:
    click.echo(json.dumps(payload, indent=2))


@click.group()
def cli():
    """Media integrity maintenance commands."""
    configure_logging(
        testing=settings.TESTING,
        level=settings.LOG_LEVEL,
        json_logs=settings.JSON_LOGS,
    )


@cli.command()
@click.option(
    "--apply",
    is_flag=True,
    help="Repair broken references instead of only listing them",
)
def scan(apply):
    """Scan stored media references for broken targets."""

    async def work(services):
        report = await services.scanner.scan(dry_run=not apply)
        return report.to_response()

    report = _run(work)
    _echo(report)
    if report["failedSections"]:
        raise SystemExit(1)


@cli.command()
def reorganize():
    """Move objects from legacy storage folders into canonical ones."""

    async def work(services):
        report = await services.reorganizer.reorganize()
        return report.to_response()

    _echo(_run(work))


@cli.command()
@click.argument("page")
def freshness(page):
    """Show the freshness token of PAGE."""
    from sitecms.core.exceptions import ValidationError
    from sitecms.sync.freshness import compute_freshness

    async def work(services):
        token = await compute_freshness(services.store, page)
        return token.to_response()

    try:
        _echo(_run(work))
    except ValidationError as e:
        raise click.BadParameter(str(e), param_hint="PAGE") from e


if __name__ == "__main__":
    cli()
