"""Journal movement listing command."""

import click

from obraledger.cli.date_filters import collect_period_flags, period_options, resolve_cli_date_range
from obraledger.cli.error_handling import handle_domain_error
from obraledger.cli.formatting import format_money
from obraledger.domain.entities import ReferenceType
from obraledger.domain.errors import DomainError
from obraledger.domain.ledger import LedgerService
from obraledger.utils.account_resolver import resolve_account


@click.command("movements")
@click.option("--account", help="Account code or name")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today', 'this month')")
@period_options
@click.option("--reference-type", type=click.Choice([t.value for t in ReferenceType]), help="Only movements of entries for this kind of document")
@click.option("--page", type=int, default=1, show_default=True, help="Page number")
@click.option("--limit", type=int, default=10, show_default=True, help="Movements per page (1-100)")
@click.pass_context
def list_movements(
    ctx,
    account: str | None,
    start_date: str | None,
    end_date: str | None,
    reference_type: str | None,
    page: int,
    limit: int,
    **periods,
) -> None:
    """List journal movements, newest entry first.

    Examples:
        obraledger movements --account 110000 --this-month
        obraledger movements --account Bancos --page 2 --limit 50
    """
    chart = ctx.obj["chart"]
    service = LedgerService(ctx.obj["db"], chart)

    account_code = None
    if account:
        try:
            account_code = resolve_account(chart, account)
        except ValueError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=collect_period_flags(periods),
    )

    try:
        result = service.list_movements(
            account_code=account_code,
            start_date=start,
            end_date=end,
            reference_type=reference_type,
            page=page,
            limit=limit,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not result.records:
        click.echo("No movements found.")
        return

    click.echo(f"{'Entry':<6} {'Date':<12} {'Account':<8} {'Description':<24} {'Debit':>12} {'Credit':>12}")
    click.echo("-" * 78)
    for r in result.records:
        debit = format_money(r.debit) if r.debit else ""
        credit = format_money(r.credit) if r.credit else ""
        click.echo(
            f"{r.entry_id:<6} {str(r.date):<12} {r.account_code:<8} "
            f"{r.description[:24]:<24} {debit:>12} {credit:>12}"
        )
    click.echo("-" * 78)
    click.echo(f"Page {result.page} of {result.total_pages} ({result.total} movements)")


def register_commands(cli: click.Group) -> None:
    """Register movements command with main CLI."""
    cli.add_command(list_movements)
