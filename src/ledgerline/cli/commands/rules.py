"""Classification rule commands."""

from decimal import Decimal

import click

from ledgerline.cli.error_handling import run_service
from ledgerline.cli.output import format_amount
from ledgerline.domain.entities import AmountDirection, MatchType
from ledgerline.domain.rules import RuleService
from ledgerline.utils.amount_parser import parse_amount


def _amount_option(value: str | None, name: str) -> Decimal | None:
    if value is None:
        return None
    try:
        return parse_amount(value)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint=name)


@click.group()
def rules_group():
    """Manage classification rules."""
    pass


@rules_group.command("add")
@click.argument("pattern")
@click.argument("category")
@click.option(
    "--match-type",
    type=click.Choice([m.value for m in MatchType]),
    default=MatchType.CONTAINS.value,
    show_default=True,
    help="How PATTERN is compared with descriptions",
)
@click.option("--subcategory", help="Subcategory assigned on match")
@click.option("--vendor", help="Vendor name assigned on match")
@click.option("--priority", type=int, default=0, show_default=True, help="Higher runs first")
@click.option(
    "--direction",
    type=click.Choice([d.value for d in AmountDirection]),
    default=AmountDirection.ANY.value,
    show_default=True,
    help="Only match money in (positive) or out (negative)",
)
@click.option("--min-amount", help="Smallest absolute amount to match")
@click.option("--max-amount", help="Largest absolute amount to match")
@click.pass_context
def add_rule(
    ctx,
    pattern: str,
    category: str,
    match_type: str,
    subcategory: str | None,
    vendor: str | None,
    priority: int,
    direction: str,
    min_amount: str | None,
    max_amount: str | None,
):
    """Add a rule assigning CATEGORY to transactions matching PATTERN.

    PATTERN is a comma-separated keyword list, or one regular expression
    with --match-type regex.

    Examples:
        ledgerline rules add "SHELL,CHEVRON" CAR_TRUCK_EXPENSES --subcategory Fuel
        ledgerline rules add "^ACH DEP" GROSS_RECEIPTS --match-type regex --direction positive
    """
    service = RuleService(ctx.obj["db"])
    rule_id = run_service(
        ctx,
        service.create_rule(
            ctx.obj["user_id"],
            pattern,
            category,
            match_type=match_type,
            subcategory=subcategory,
            vendor=vendor,
            priority=priority,
            amount_direction=direction,
            amount_min=_amount_option(min_amount, "--min-amount"),
            amount_max=_amount_option(max_amount, "--max-amount"),
        ),
    )
    click.echo(f"Created rule {rule_id}")


@rules_group.command("list")
@click.option("--all", "show_all", is_flag=True, default=False, help="Include disabled rules")
@click.pass_context
def list_rules(ctx, show_all: bool):
    """List rules in the order they are tried."""
    service = RuleService(ctx.obj["db"])
    rules = run_service(ctx, service.list_rules(ctx.obj["user_id"], active_only=not show_all))
    if not rules:
        click.echo("No rules found.")
        return
    for rule in rules:
        target = rule.category
        if rule.subcategory:
            target = f"{target} > {rule.subcategory}"
        extras = []
        if rule.amount_direction != AmountDirection.ANY:
            extras.append(rule.amount_direction.value)
        if rule.amount_min is not None:
            extras.append(f">= {format_amount(rule.amount_min)}")
        if rule.amount_max is not None:
            extras.append(f"<= {format_amount(rule.amount_max)}")
        if not rule.is_active:
            extras.append("disabled")
        suffix = f"  [{', '.join(extras)}]" if extras else ""
        click.echo(
            f"  [{rule.id}] p{rule.priority} {rule.match_type.value} '{rule.pattern}' -> {target}{suffix}"
        )


@rules_group.command("enable")
@click.argument("rule_id", type=int)
@click.pass_context
def enable_rule(ctx, rule_id: int):
    """Enable a rule."""
    service = RuleService(ctx.obj["db"])
    run_service(ctx, service.set_active(ctx.obj["user_id"], rule_id, True))
    click.echo(f"Enabled rule {rule_id}")


@rules_group.command("disable")
@click.argument("rule_id", type=int)
@click.pass_context
def disable_rule(ctx, rule_id: int):
    """Disable a rule without deleting it."""
    service = RuleService(ctx.obj["db"])
    run_service(ctx, service.set_active(ctx.obj["user_id"], rule_id, False))
    click.echo(f"Disabled rule {rule_id}")


@rules_group.command("delete")
@click.argument("rule_id", type=int)
@click.pass_context
def delete_rule(ctx, rule_id: int):
    """Delete a rule."""
    service = RuleService(ctx.obj["db"])
    run_service(ctx, service.delete_rule(ctx.obj["user_id"], rule_id))
    click.echo(f"Deleted rule {rule_id}")


@rules_group.command("apply")
@click.pass_context
def apply_rules(ctx):
    """Categorize uncategorized transactions with the current rules."""
    service = RuleService(ctx.obj["db"])
    result = run_service(ctx, service.apply_rules(ctx.obj["user_id"]))
    click.echo(f"Checked {result.checked} uncategorized transactions with {result.rules_count} rules")
    click.echo(f"  By rules: {result.stats.classified_by_user_rules}")
    click.echo(f"  By vendor table: {result.stats.classified_by_default_vendors}")
    click.echo(f"  Still uncategorized: {result.unclassified}")
    click.echo(f"  Updated: {result.updated}")
    if result.failed:
        click.echo(f"  Failed: {result.failed}", err=True)
        for error in result.errors:
            click.echo(
                f"    chunk {error.chunk_index} ({error.chunk_size} items): {error.error}", err=True
            )


def register_commands(cli):
    """Register rules commands with main CLI."""
    cli.add_command(rules_group, name="rules")
