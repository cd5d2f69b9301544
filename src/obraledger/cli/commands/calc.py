"""Quotation, payroll and loan calculator commands."""

import click

from obraledger.cli.error_handling import handle_domain_error
from obraledger.cli.formatting import echo_row, echo_rule
from obraledger.domain.calculators import (
    DEFAULT_MARGIN,
    BracketedIncomeTax,
    LineItem,
    calculate_loan,
    calculate_payroll_net,
    group_subtotals,
    quote,
)
from obraledger.domain.errors import DomainError
from obraledger.utils.amount_parser import parse_amount, parse_number


def _parse_item(ctx, value: str) -> LineItem:
    """Parse ``QTY:PRICE[:DESCRIPTION[:GROUP]]`` into a line item."""
    parts = value.split(":", 3)
    if len(parts) < 2:
        click.echo(f"Error: Invalid --item '{value}'. Expected QTY:PRICE[:DESCRIPTION[:GROUP]]", err=True)
        ctx.exit(1)
    try:
        quantity = parse_number(parts[0])
        unit_price = parse_amount(parts[1])
    except ValueError as e:
        click.echo(f"Error: Invalid --item '{value}': {e}", err=True)
        ctx.exit(1)
    description = parts[2] if len(parts) > 2 else ""
    group = parts[3] if len(parts) > 3 and parts[3] else None
    return LineItem(quantity=quantity, unit_price=unit_price, description=description, group=group)


def _amount_or_exit(ctx, value: str, label: str, parse=parse_amount):
    try:
        return parse(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


@click.group()
def calc_group():
    """Quotation, payroll and loan calculators."""
    pass


@calc_group.command("quotation")
@click.option("--item", "items", multiple=True, required=True, help="Line item as QTY:PRICE[:DESCRIPTION[:GROUP]]")
@click.option("--labor", default="0", show_default=True, help="Labor cost")
@click.option("--margin", default=str(DEFAULT_MARGIN), show_default=True, help="Margin percentage")
@click.pass_context
def quotation(ctx, items: tuple[str, ...], labor: str, margin: str) -> None:
    """Price a quotation: materials + labor, margin, then 19% IVA.

    Examples:
        obraledger calc quotation --item 2:100000 --margin 3
        obraledger calc quotation --item "10:8.500:Cemento:Obra gruesa" --item "4:32.000:Fierro:Obra gruesa" --labor 250000
    """
    line_items = [_parse_item(ctx, value) for value in items]
    labor_cost = _amount_or_exit(ctx, labor, "labor cost")
    margin_pct = _amount_or_exit(ctx, margin, "margin", parse_number)

    try:
        result = quote(line_items, labor_cost, margin_pct)
    except DomainError as e:
        handle_domain_error(ctx, e)

    subtotals = group_subtotals(line_items)
    if len(subtotals) > 1 or None not in subtotals:
        click.echo("Materials by group")
        for group, amount in subtotals.items():
            echo_row(group or "(ungrouped)", amount, indent=2)
        echo_rule()
    echo_row("Materials", result.materials_total)
    echo_row("Labor", result.labor_cost)
    echo_row("Subtotal", result.subtotal)
    echo_row(f"Margin ({result.margin_percentage}%)", result.margin_amount)
    echo_row("Net total", result.net_total)
    echo_row("IVA (19%)", result.tax)
    echo_rule()
    echo_row("Total", result.total)


def _parse_bracket(ctx, value: str) -> tuple:
    lower, sep, rate = value.partition(":")
    if not sep:
        click.echo(f"Error: Invalid --tax-bracket '{value}'. Expected LOWER:RATE", err=True)
        ctx.exit(1)
    return (
        _amount_or_exit(ctx, lower, "tax bracket"),
        _amount_or_exit(ctx, rate, "tax bracket rate", parse_number),
    )


@calc_group.command("payroll")
@click.option("--base-salary", required=True, help="Monthly base salary")
@click.option("--overtime-hours", default="0", show_default=True, help="Overtime hours worked")
@click.option("--bonuses", default="0", show_default=True, help="Bonuses")
@click.option("--allowances", default="0", show_default=True, help="Allowances")
@click.option("--other-deductions", default="0", show_default=True, help="Other deductions")
@click.option("--tax-bracket", "tax_brackets", multiple=True, help="Progressive tax bracket as LOWER:RATE (e.g. 1500000:0.04); replaces the flat 8% above 1.500.000")
@click.pass_context
def payroll(
    ctx,
    base_salary: str,
    overtime_hours: str,
    bonuses: str,
    allowances: str,
    other_deductions: str,
    tax_brackets: tuple[str, ...],
) -> None:
    """Compute gross salary, deductions and net pay.

    Examples:
        obraledger calc payroll --base-salary 500000
        obraledger calc payroll --base-salary 1800000 --overtime-hours 10 --bonuses 50000
    """
    try:
        policy = None
        if tax_brackets:
            policy = BracketedIncomeTax(_parse_bracket(ctx, value) for value in tax_brackets)
        result = calculate_payroll_net(
            base_salary=_amount_or_exit(ctx, base_salary, "base salary"),
            overtime_hours=_amount_or_exit(ctx, overtime_hours, "overtime hours", parse_number),
            bonuses=_amount_or_exit(ctx, bonuses, "bonuses"),
            allowances=_amount_or_exit(ctx, allowances, "allowances"),
            other_deductions=_amount_or_exit(ctx, other_deductions, "other deductions"),
            tax_policy=policy,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    echo_row("Base salary", result.base_salary)
    echo_row(f"Overtime ({result.overtime_hours} h)", result.overtime_amount)
    echo_row("Bonuses", result.bonuses)
    echo_row("Allowances", result.allowances)
    echo_row("Gross salary", result.gross_salary)
    echo_rule()
    echo_row("Pension (10%)", result.pension_deduction, indent=2)
    echo_row("Health (7%)", result.health_deduction, indent=2)
    echo_row("Income tax", result.income_tax, indent=2)
    echo_row("Other deductions", result.other_deductions, indent=2)
    echo_row("Total deductions", result.total_deductions)
    echo_rule()
    echo_row("Net salary", result.net_salary)


@calc_group.command("loan")
@click.option("--principal", required=True, help="Amount borrowed")
@click.option("--rate", required=True, help="Interest rate per period, in percent")
@click.option("--periods", required=True, type=int, help="Number of periods")
@click.pass_context
def loan(ctx, principal: str, rate: str, periods: int) -> None:
    """Interest and fixed installment for a loan.

    Examples:
        obraledger calc loan --principal 10000000 --rate 1.5 --periods 24
    """
    try:
        result = calculate_loan(
            _amount_or_exit(ctx, principal, "principal"),
            _amount_or_exit(ctx, rate, "rate", parse_number),
            periods,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    echo_row("Principal", result.principal)
    echo_row(f"Simple interest ({result.rate_percentage}% x {result.periods})", result.simple_interest)
    echo_row("Compound interest", result.compound_interest)
    echo_rule()
    echo_row("Installment", result.periodic_payment)
    echo_row("Total paid", result.total_payment)
    echo_row("Total interest", result.total_interest)


def register_commands(cli: click.Group) -> None:
    """Register calculator commands with main CLI."""
    cli.add_command(calc_group, name="calc")
