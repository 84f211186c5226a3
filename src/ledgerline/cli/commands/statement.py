"""Bank statement import command."""

from pathlib import Path

import click

from ledgerline.cli.commands.import_cmd import finish_upload
from ledgerline.cli.error_handling import handle_domain_error, run_service
from ledgerline.domain.csv_import import ImportService
from ledgerline.domain.errors import ValidationError
from ledgerline.utils.pdf_text import extract_pdf_text


@click.command("statement")
@click.argument("statement_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--year", type=int, help="Year for MM/DD dates when the statement period is missing")
@click.option("--company-id", help="Company the transactions belong to")
@click.option("--company-name", help="Company name stored with the transactions")
@click.option(
    "--allow-duplicates", is_flag=True, default=False, help="Import rows that look like duplicates"
)
@click.option("--no-classify", is_flag=True, default=False, help="Skip automatic categorization")
@click.option("--yes", "-y", is_flag=True, default=False, help="Import without asking")
@click.pass_context
def import_statement(
    ctx,
    statement_file: str,
    year: int | None,
    company_id: str | None,
    company_name: str | None,
    allow_duplicates: bool,
    no_classify: bool,
    yes: bool,
):
    """Import transactions from a bank statement (.pdf or plain text).

    Examples:
        ledgerline statement march.pdf
        ledgerline statement march.txt --year 2024
    """
    db = ctx.obj["db"]
    service = ImportService(db)

    path = Path(statement_file)
    if path.suffix.lower() == ".pdf":
        try:
            text = extract_pdf_text(path)
        except Exception as e:
            handle_domain_error(ctx, ValidationError(f"Could not read PDF {path.name}: {e}"))
    else:
        text = path.read_text(encoding="utf-8")

    preview = run_service(
        ctx,
        service.upload_statement(
            ctx.obj["user_id"],
            path.name,
            text,
            year=year,
            company_id=company_id,
            company_name=company_name,
            file_size=path.stat().st_size,
        ),
    )
    finish_upload(ctx, service, preview, not allow_duplicates, not no_classify, yes)


def register_commands(cli):
    """Register statement command with main CLI."""
    cli.add_command(import_statement)
