"""CLI error handling helpers."""

import asyncio
from typing import Awaitable, TypeVar

import click

from ledgerline.domain.errors import DomainError

T = TypeVar("T")


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def run_service(ctx: click.Context, awaitable: Awaitable[T]) -> T:
    """Run one service coroutine to completion, exiting on domain errors."""
    try:
        return asyncio.run(awaitable)
    except DomainError as e:
        handle_domain_error(ctx, e)
