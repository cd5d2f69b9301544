"""Ledger entry commands."""

import click

from obraledger.cli.date_filters import (
    collect_period_flags,
    parse_date_or_exit,
    period_options,
    resolve_cli_date_range,
)
from obraledger.cli.error_handling import handle_domain_error
from obraledger.cli.formatting import format_money
from obraledger.domain.entities import Movement, ReferenceType
from obraledger.domain.errors import DomainError
from obraledger.domain.ledger import LedgerService
from obraledger.utils.account_resolver import resolve_account
from obraledger.utils.amount_parser import parse_number

REFERENCE_TYPES = [t.value for t in ReferenceType]


def _parse_lines(ctx, chart, values: tuple[str, ...], side: str) -> list[Movement]:
    """Turn ``ACCOUNT=AMOUNT`` options into movements of one side."""
    movements = []
    for value in values:
        account, sep, amount_str = value.rpartition("=")
        if not sep or not account.strip():
            click.echo(f"Error: Invalid --{side} '{value}'. Expected ACCOUNT=AMOUNT", err=True)
            ctx.exit(1)
        try:
            code = resolve_account(chart, account)
            amount = parse_number(amount_str)
        except ValueError as e:
            click.echo(f"Error: Invalid --{side} '{value}': {e}", err=True)
            ctx.exit(1)
        try:
            if side == "debit":
                movements.append(Movement.debit_line(code, amount))
            else:
                movements.append(Movement.credit_line(code, amount))
        except DomainError as e:
            handle_domain_error(ctx, e)
    return movements


def _echo_entry(entry, chart) -> None:
    click.echo(f"Entry ID: {entry.id}")
    click.echo(f"  Date: {entry.date}")
    click.echo(f"  Description: {entry.description}")
    if entry.reference_type is not None:
        reference = entry.reference_type.value
        if entry.reference_id is not None:
            reference = f"{reference} #{entry.reference_id}"
        click.echo(f"  Reference: {reference}")
    click.echo(f"  Recorded: {entry.created_at}")
    click.echo("-" * 78)
    click.echo(f"{'Account':<10} {'Name':<32} {'Debit':>16} {'Credit':>16}")
    for m in entry.movements:
        debit = format_money(m.debit) if m.debit else ""
        credit = format_money(m.credit) if m.credit else ""
        name = chart.display_name(m.account_code)[:32]
        click.echo(f"{m.account_code:<10} {name:<32} {debit:>16} {credit:>16}")
    click.echo("-" * 78)
    click.echo(
        f"{'TOTAL':<43} {format_money(entry.total_debit):>16} {format_money(entry.total_credit):>16}"
    )


@click.group()
def entry_group():
    """Record and inspect ledger entries."""
    pass


@entry_group.command("add")
@click.option("--date", "entry_date", default="today", show_default=True, help="Entry date (YYYY-MM-DD or relative like 'today')")
@click.option("--description", required=True, help="Entry description")
@click.option("--debit", "debits", multiple=True, help="Debit line as ACCOUNT=AMOUNT (code or account name)")
@click.option("--credit", "credits", multiple=True, help="Credit line as ACCOUNT=AMOUNT (code or account name)")
@click.option("--reference-type", type=click.Choice(REFERENCE_TYPES), help="Kind of source document")
@click.option("--reference-id", type=int, help="ID of the source document")
@click.pass_context
def add_entry(
    ctx,
    entry_date: str,
    description: str,
    debits: tuple[str, ...],
    credits: tuple[str, ...],
    reference_type: str | None,
    reference_id: int | None,
) -> None:
    """Record a balanced entry.

    Examples:
        obraledger entry add --description "Aporte de capital" --debit 120000=5000000 --credit 310000=5000000
        obraledger entry add --date 2024-03-01 --description "Venta" --debit Caja=119000 --credit 410000=100000 --credit 240000=19000
    """
    chart = ctx.obj["chart"]
    service = LedgerService(ctx.obj["db"], chart)

    when = parse_date_or_exit(ctx, entry_date, "date")
    movements = _parse_lines(ctx, chart, debits, "debit") + _parse_lines(ctx, chart, credits, "credit")

    try:
        entry = service.record_entry(
            date=when,
            description=description,
            movements=movements,
            reference_type=reference_type,
            reference_id=reference_id,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(
        f"Recorded entry {entry.id} on {entry.date}: {format_money(entry.total_debit)}"
    )


@entry_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today', 'this month')")
@period_options
@click.option("--reference-type", type=click.Choice(REFERENCE_TYPES), help="Only entries for this kind of document")
@click.pass_context
def list_entries(ctx, start_date: str | None, end_date: str | None, reference_type: str | None, **periods) -> None:
    """List ledger entries, newest first."""
    service = LedgerService(ctx.obj["db"], ctx.obj["chart"])
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=collect_period_flags(periods),
    )

    try:
        entries = service.list_entries(start_date=start, end_date=end, reference_type=reference_type)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not entries:
        click.echo("No entries found.")
        return

    click.echo(f"\nFound {len(entries)} entr{'y' if len(entries) == 1 else 'ies'}:")
    click.echo("-" * 78)
    click.echo(f"{'ID':<6} {'Date':<12} {'Amount':>16}  {'Reference':<16} {'Description':<24}")
    click.echo("-" * 78)
    for e in entries:
        reference = e.reference_type.value if e.reference_type else ""
        click.echo(
            f"{e.id:<6} {str(e.date):<12} {format_money(e.total_debit):>16}  "
            f"{reference:<16} {e.description[:24]:<24}"
        )


@entry_group.command("show")
@click.argument("entry_id", type=int)
@click.pass_context
def show_entry(ctx, entry_id: int) -> None:
    """Show an entry with its movements."""
    service = LedgerService(ctx.obj["db"], ctx.obj["chart"])
    try:
        entry = service.require_entry(entry_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    _echo_entry(entry, ctx.obj["chart"])


@entry_group.command("reverse")
@click.argument("entry_id", type=int)
@click.option("--date", "reversal_date", default="today", show_default=True, help="Date of the reversing entry")
@click.option("--description", help="Description (defaults to 'Reversal of entry N: ...')")
@click.pass_context
def reverse_entry(ctx, entry_id: int, reversal_date: str, description: str | None) -> None:
    """Cancel an entry by recording its mirror image.

    Examples:
        obraledger entry reverse 12 --date 2024-03-31
    """
    service = LedgerService(ctx.obj["db"], ctx.obj["chart"])
    when = parse_date_or_exit(ctx, reversal_date, "date")

    try:
        reversal = service.reverse_entry(entry_id, when, description)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Entry {entry_id} reversed by entry {reversal.id}")


def register_commands(cli: click.Group) -> None:
    """Register entry commands with main CLI."""
    cli.add_command(entry_group, name="entry")
