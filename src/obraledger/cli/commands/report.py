"""Financial report commands."""

from datetime import date

import click

from obraledger.cli.date_filters import (
    collect_period_flags,
    parse_date_or_exit,
    period_options,
    resolve_cli_date_range,
)
from obraledger.cli.error_handling import handle_domain_error
from obraledger.cli.formatting import echo_row, echo_rule, format_money
from obraledger.domain.errors import DomainError
from obraledger.domain.ledger import LedgerService
from obraledger.domain.statements import StatementService


def _as_of(ctx, value: str | None) -> date:
    return parse_date_or_exit(ctx, value, "date") or date.today()


def _echo_section(title: str, lines, total_label: str, total) -> None:
    click.echo(title)
    for line in lines:
        echo_row(f"{line.account_code} {line.account_name}", line.amount, indent=2)
    echo_row(total_label, total)
    click.echo()


@click.group()
def report_group():
    """Financial statements and ledger statistics."""
    pass


@report_group.command("trial-balance")
@click.option("--date", "as_of", help="Balance date (default: today)")
@click.pass_context
def trial_balance(ctx, as_of: str | None) -> None:
    """Show debit and credit totals per account."""
    service = StatementService(ctx.obj["db"], ctx.obj["chart"])
    try:
        report = service.trial_balance(_as_of(ctx, as_of))
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Trial balance as of {report.as_of}")
    echo_rule("=")
    if not report.lines:
        click.echo("No movements found.")
        return

    click.echo(f"{'Account':<8} {'Name':<26} {'Debit':>14} {'Credit':>14} {'Balance':>12}")
    echo_rule()
    for line in report.lines:
        click.echo(
            f"{line.account_code:<8} {line.account_name[:26]:<26} {format_money(line.total_debit):>14} "
            f"{format_money(line.total_credit):>14} {format_money(line.normal_balance):>12}"
        )
    echo_rule()
    click.echo(
        f"{'TOTAL':<35} {format_money(report.total_debit):>14} {format_money(report.total_credit):>14}"
    )
    click.echo("Balanced" if report.is_balanced else "NOT BALANCED")


@report_group.command("income-statement")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'this year')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@period_options
@click.pass_context
def income_statement(ctx, start_date: str | None, end_date: str | None, **periods) -> None:
    """Show revenue, costs and expenses for a period (default: this month)."""
    service = StatementService(ctx.obj["db"], ctx.obj["chart"])
    today = date.today()
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=collect_period_flags(periods),
        default_range=(today.replace(day=1), today),
    )

    try:
        report = service.income_statement(start or date.min, end or today)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Income statement {report.date_from} to {report.date_to}")
    echo_rule("=")
    _echo_section("Revenue", report.revenue, "Total revenue", report.total_revenue)
    _echo_section("Cost of sales", report.costs, "Total cost of sales", report.total_costs)
    echo_row("Gross profit", report.gross_profit)
    click.echo()
    _echo_section(
        "Operating expenses", report.expenses, "Total operating expenses", report.total_operating_expenses
    )
    echo_rule()
    echo_row("Total expenses", report.total_expenses)
    echo_row("Net income", report.net_income)


@report_group.command("balance-sheet")
@click.option("--date", "as_of", help="Balance date (default: today)")
@click.option("--positive-only", is_flag=True, help="Only list accounts with a positive balance")
@click.pass_context
def balance_sheet(ctx, as_of: str | None, positive_only: bool) -> None:
    """Show assets, liabilities and equity as of a date."""
    service = StatementService(ctx.obj["db"], ctx.obj["chart"])
    try:
        report = service.balance_sheet(_as_of(ctx, as_of), positive_only=positive_only)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Balance sheet as of {report.as_of}")
    echo_rule("=")
    _echo_section("Assets", report.assets, "Total assets", report.total_assets)
    _echo_section("Liabilities", report.liabilities, "Total liabilities", report.total_liabilities)
    click.echo("Equity")
    for line in report.equity:
        echo_row(f"{line.account_code} {line.account_name}", line.amount, indent=2)
    echo_row("Current earnings", report.current_earnings, indent=2)
    echo_row("Total equity", report.total_equity)
    echo_rule()
    echo_row("Liabilities + equity", report.total_liabilities + report.total_equity)
    click.echo("Balanced" if report.is_balanced else "NOT BALANCED")


@report_group.command("stats")
@click.option("--date", "as_of", help="Reference date; the month containing it is summarized (default: today)")
@click.pass_context
def stats(ctx, as_of: str | None) -> None:
    """Show entry counts and the month's revenue and expenses."""
    service = LedgerService(ctx.obj["db"], ctx.obj["chart"])
    try:
        result = service.get_stats(_as_of(ctx, as_of))
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Ledger statistics for {result.as_of:%Y-%m}")
    echo_rule("=")
    click.echo(f"{'Total entries':<57} {result.total_entries:>20}")
    click.echo(f"{'Entries this month':<57} {result.month_entries:>20}")
    echo_row("Revenue this month", result.month_revenue)
    echo_row("Expenses this month", result.month_expenses)
    echo_row("Net income this month", result.month_net_income)


def register_commands(cli: click.Group) -> None:
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
