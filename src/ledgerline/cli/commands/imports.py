"""Import record commands."""

import click

from ledgerline.cli.error_handling import run_service
from ledgerline.cli.output import echo_import_record, echo_transaction
from ledgerline.domain.entities import ImportStatus
from ledgerline.domain.import_record import ImportRecordService

STATUS_ALL = "all"


@click.group()
def imports_group():
    """Review and delete past imports."""
    pass


@imports_group.command("list")
@click.option("--company-id", help="Only imports for this company")
@click.option(
    "--status",
    type=click.Choice([s.value for s in ImportStatus] + [STATUS_ALL]),
    default=ImportStatus.COMPLETED.value,
    show_default=True,
)
@click.option("--limit", type=int, default=50, show_default=True)
@click.option("--offset", type=int, default=0, show_default=True)
@click.pass_context
def list_imports(ctx, company_id: str | None, status: str, limit: int, offset: int):
    """List imports, newest first."""
    service = ImportRecordService(ctx.obj["db"])
    records = run_service(
        ctx,
        service.list_imports(
            ctx.obj["user_id"],
            company_id=company_id,
            status=None if status == STATUS_ALL else ImportStatus(status),
            limit=limit,
            offset=offset,
        ),
    )
    if not records:
        click.echo("No imports found.")
        return
    for record in records:
        echo_import_record(record)


@imports_group.command("show")
@click.argument("import_id", type=int)
@click.option("--limit", type=int, default=100, show_default=True)
@click.option("--offset", type=int, default=0, show_default=True)
@click.pass_context
def show_import(ctx, import_id: int, limit: int, offset: int):
    """Show an import and the transactions it created."""
    service = ImportRecordService(ctx.obj["db"])
    user_id = ctx.obj["user_id"]
    record = run_service(ctx, service.get_import(user_id, import_id))
    echo_import_record(record)
    transactions = run_service(
        ctx, service.list_transactions(user_id, import_id, limit=limit, offset=offset)
    )
    if not transactions:
        click.echo("No linked transactions.")
        return
    for txn in transactions:
        echo_transaction(txn)


@imports_group.command("delete")
@click.argument("import_id", type=int)
@click.option(
    "--delete-transactions",
    is_flag=True,
    default=False,
    help="Delete the transactions instead of only unlinking them",
)
@click.option(
    "--remove-record",
    is_flag=True,
    default=False,
    help="Remove the import record instead of marking it deleted",
)
@click.option("--yes", "-y", is_flag=True, default=False, help="Delete without asking")
@click.pass_context
def delete_import(ctx, import_id: int, delete_transactions: bool, remove_record: bool, yes: bool):
    """Delete an import."""
    if delete_transactions and not yes:
        click.confirm(
            f"Delete every transaction created by import {import_id}?", abort=True, default=False
        )
    service = ImportRecordService(ctx.obj["db"])
    result = run_service(
        ctx,
        service.delete_import(
            ctx.obj["user_id"],
            import_id,
            delete_transactions=delete_transactions,
            remove_record=remove_record,
        ),
    )
    action = "Deleted" if result.deleted_transactions else "Unlinked"
    click.echo(f"{action} {result.transactions_affected} transactions from import {import_id}")
    click.echo("Import record removed" if result.record_removed else "Import marked deleted")
    if result.transactions_failed:
        click.echo(f"Failed: {result.transactions_failed}", err=True)
        for error in result.errors:
            click.echo(
                f"  chunk {error.chunk_index} ({error.chunk_size} items): {error.error}", err=True
            )
        ctx.exit(1)


def register_commands(cli):
    """Register imports commands with main CLI."""
    cli.add_command(imports_group, name="imports")
