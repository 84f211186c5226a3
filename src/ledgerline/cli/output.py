"""Rendering of service results for the terminal."""

from decimal import Decimal
from typing import Optional

import click

from ledgerline.domain.entities import (
    AccountInfo,
    ConfirmResult,
    ImportRecord,
    PreviewResult,
    StatementSummary,
    Transaction,
    TransactionCandidate,
)


def format_amount(amount: Optional[Decimal]) -> str:
    if amount is None:
        return "?"
    return f"{amount:,.2f}"


def echo_candidate(candidate: TransactionCandidate) -> None:
    if candidate.needs_mapping:
        click.echo(f"  row {candidate.row_index}: {candidate.raw}")
        return
    flag = " [review]" if candidate.needs_review else ""
    category = f"  ({candidate.category})" if candidate.category else ""
    click.echo(
        f"  {candidate.date}  {format_amount(candidate.amount):>12}  "
        f"{candidate.description[:50]}{category}{flag}"
    )


def echo_account_info(info: AccountInfo) -> None:
    click.echo("Account:")
    if info.account_number:
        click.echo(f"  Number: {info.account_number}")
    if info.period_start or info.period_end:
        click.echo(f"  Period: {info.period_start} to {info.period_end}")
    if info.opening_balance is not None:
        click.echo(f"  Opening balance: {format_amount(info.opening_balance)}")
    if info.closing_balance is not None:
        click.echo(f"  Closing balance: {format_amount(info.closing_balance)}")


def echo_summary(summary: StatementSummary) -> None:
    click.echo("Summary:")
    for section, count in summary.section_counts.items():
        total = format_amount(summary.section_totals.get(section))
        reported = summary.reported_totals.get(section)
        line = f"  {section:<12} {count:>4} transactions  {total:>12}"
        if reported is not None:
            line += f"  (statement total {format_amount(reported)})"
        click.echo(line)
    click.echo(f"  Income:   {format_amount(summary.total_income)}")
    click.echo(f"  Expenses: {format_amount(summary.total_expenses)}")
    click.echo(f"  Net:      {format_amount(summary.net)}")
    if summary.needs_review_count:
        click.echo(f"  Needs review: {summary.needs_review_count}")
    if summary.dropped_lines:
        click.echo(f"  Dropped lines: {summary.dropped_lines}")
    if summary.reconciles is True:
        click.echo("  Balances reconcile")
    elif summary.reconciles is False:
        click.echo("  Warning: opening balance plus net does not equal closing balance", err=True)


def echo_preview(preview: PreviewResult) -> None:
    """Print an upload preview."""
    click.echo(f"Upload {preview.upload_id} ({preview.file_name})")
    if preview.detected_bank_name:
        click.echo(f"Detected format: {preview.detected_bank_name}")
    if preview.error:
        click.echo(f"Error: {preview.error}", err=True)
    click.echo(f"Rows: {preview.total_rows}, parsed: {preview.parsed_count}")

    if preview.account_info is not None:
        echo_account_info(preview.account_info)
    if preview.summary is not None:
        echo_summary(preview.summary)

    if preview.requires_mapping:
        click.echo("Could not recognize the columns: " + ", ".join(preview.headers))
        click.echo("Re-run with --map field=column (date, description, amount or debit/credit).")

    if preview.sample_transactions:
        click.echo("Sample:")
        for candidate in preview.sample_transactions:
            echo_candidate(candidate)

    if preview.error_count:
        click.echo(f"Skipped {preview.error_count} unreadable row(s):")
        for error in preview.errors:
            click.echo(f"  {error}", err=True)


def echo_confirm_result(result: ConfirmResult) -> None:
    """Print the outcome of a confirmed import."""
    click.echo(f"\nImport {result.import_id} complete:")
    click.echo(f"  Imported: {result.imported} transactions")
    click.echo(f"  Classified: {result.classified}, unclassified: {result.unclassified}")
    click.echo(f"  Skipped: {result.duplicate_count} duplicates")
    start, end = result.date_range
    if start is not None:
        click.echo(f"  Dates: {start} to {end}")
    for duplicate in result.duplicates:
        click.echo(
            f"    duplicate: {duplicate.date} {format_amount(duplicate.amount)} {duplicate.description}"
        )
    if result.error_count:
        click.echo(f"  Errors: {result.error_count}")
        for error in result.errors:
            click.echo(f"    Row {error.row_index}: {error.description}: {error.error}", err=True)


def echo_import_record(record: ImportRecord) -> None:
    dates = ""
    if record.date_range_start is not None:
        dates = f"  {record.date_range_start} to {record.date_range_end}"
    click.echo(
        f"  [{record.id}] {record.file_name}  {record.bank_name or record.bank or '-'}  "
        f"{record.transaction_count} imported, {record.duplicate_count} duplicates, "
        f"{record.error_count} errors  ({record.status.value}){dates}"
    )


def echo_transaction(txn: Transaction) -> None:
    category = txn.category or "-"
    if txn.subcategory:
        category = f"{category} > {txn.subcategory}"
    click.echo(
        f"  [{txn.id}] {txn.date}  {format_amount(txn.amount):>12}  "
        f"{(txn.description or '')[:50]}  {category}"
    )
