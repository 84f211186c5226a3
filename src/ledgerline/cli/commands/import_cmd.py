"""CSV import command."""

from pathlib import Path

import click

from ledgerline.cli.error_handling import run_service
from ledgerline.cli.output import echo_confirm_result, echo_preview
from ledgerline.domain.bank_formats import AUTO, LAYOUTS_BY_KEY, CUSTOM, MAPPABLE_FIELDS
from ledgerline.domain.csv_import import ImportService
from ledgerline.domain.entities import PreviewResult


def parse_mapping(values: tuple[str, ...]) -> dict[str, str] | None:
    """Turn repeated ``field=column`` options into a mapping."""
    if not values:
        return None
    mapping = {}
    for value in values:
        field_name, sep, column = value.partition("=")
        field_name = field_name.strip()
        if not sep or not field_name or not column.strip():
            raise click.BadParameter(f"'{value}' is not in field=column form", param_hint="--map")
        if field_name not in MAPPABLE_FIELDS:
            raise click.BadParameter(
                f"Unknown field '{field_name}' (choose from {', '.join(MAPPABLE_FIELDS)})",
                param_hint="--map",
            )
        mapping[field_name] = column.strip()
    return mapping


def finish_upload(
    ctx,
    service: ImportService,
    preview: PreviewResult,
    skip_duplicates: bool,
    classify: bool,
    yes: bool,
) -> None:
    """Show a preview, then confirm or cancel the pending import."""
    user_id = ctx.obj["user_id"]
    echo_preview(preview)

    if not preview.success or preview.requires_mapping or preview.parsed_count == 0:
        run_service(ctx, service.cancel(user_id, preview.upload_id))
        click.echo("Nothing to import.", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(f"Import {preview.parsed_count} transactions?", default=True):
        run_service(ctx, service.cancel(user_id, preview.upload_id))
        click.echo("Import cancelled.")
        return

    result = run_service(
        ctx,
        service.confirm(
            user_id,
            preview.upload_id,
            skip_duplicates=skip_duplicates,
            classify=classify,
        ),
    )
    echo_confirm_result(result)


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--bank",
    type=click.Choice([AUTO, CUSTOM, *LAYOUTS_BY_KEY]),
    default=AUTO,
    show_default=True,
    help="Bank layout of the CSV file",
)
@click.option(
    "--map",
    "mappings",
    multiple=True,
    help="Column mapping as field=column, e.g. --map date='Trans Date' (repeatable)",
)
@click.option("--date-format", help="strptime format of the date column for --map")
@click.option("--company-id", help="Company the transactions belong to")
@click.option("--company-name", help="Company name stored with the transactions")
@click.option(
    "--allow-duplicates", is_flag=True, default=False, help="Import rows that look like duplicates"
)
@click.option("--no-classify", is_flag=True, default=False, help="Skip automatic categorization")
@click.option("--yes", "-y", is_flag=True, default=False, help="Import without asking")
@click.pass_context
def import_csv(
    ctx,
    csv_file: str,
    bank: str,
    mappings: tuple[str, ...],
    date_format: str | None,
    company_id: str | None,
    company_name: str | None,
    allow_duplicates: bool,
    no_classify: bool,
    yes: bool,
):
    """Import transactions from a bank CSV export.

    Examples:
        ledgerline import chase.csv
        ledgerline import export.csv --map date=When --map description=What --map amount=Value
    """
    db = ctx.obj["db"]
    service = ImportService(db)
    mapping = parse_mapping(mappings)

    path = Path(csv_file)
    text = path.read_text(encoding="utf-8-sig")

    preview = run_service(
        ctx,
        service.upload_csv(
            ctx.obj["user_id"],
            path.name,
            text,
            bank_format=bank,
            mapping=mapping,
            date_format=date_format,
            company_id=company_id,
            company_name=company_name,
            file_size=path.stat().st_size,
        ),
    )
    finish_upload(ctx, service, preview, not allow_duplicates, not no_classify, yes)


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_csv)
