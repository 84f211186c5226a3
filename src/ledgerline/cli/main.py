"""Main CLI entry point."""

import logging
import os

import click
from ledgerline.database.factories import create_sqlite_database

# Command modules expose register_commands(cli)
from ledgerline.cli.commands import (
    banks,
    import_cmd,
    imports,
    rules,
    statement,
)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(verbose: int) -> None:
    """Set the root log level from -v flags, else LEDGERLINE_LOG_LEVEL, else WARNING."""
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.getLevelName(os.environ.get("LEDGERLINE_LOG_LEVEL", "WARNING").upper())
        if not isinstance(level, int):
            level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides LEDGERLINE_DB_PATH environment variable)",
    envvar="LEDGERLINE_DB_PATH",
)
@click.option(
    "--user",
    "user_id",
    default="local",
    show_default=True,
    envvar="LEDGERLINE_USER",
    help="User that owns imports and rules",
)
@click.option("-v", "--verbose", count=True, help="Log more (-v info, -vv debug)")
@click.pass_context
def cli(ctx, db_path: str | None, user_id: str, verbose: int):
    """Ledgerline - bank CSV and statement import pipeline.

    Upload a bank CSV export or statement, review the parsed transactions,
    then confirm to save them with categories from your rules and the
    built-in vendor table.
    """
    ctx.ensure_object(dict)
    configure_logging(verbose)
    ctx.obj["user_id"] = user_id

    # Bare group invocation shows help and needs no database
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Attach command groups
import_cmd.register_commands(cli)
statement.register_commands(cli)
banks.register_commands(cli)
rules.register_commands(cli)
imports.register_commands(cli)


def main():
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
