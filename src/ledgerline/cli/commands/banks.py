"""Supported bank layouts command."""

import click

from ledgerline.domain.bank_formats import supported_banks


@click.command("banks")
def list_banks():
    """List the bank CSV layouts that are detected automatically."""
    for key, name in supported_banks():
        click.echo(f"  {key:<16} {name}")


def register_commands(cli):
    """Register banks command with main CLI."""
    cli.add_command(list_banks)
