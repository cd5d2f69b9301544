"""Output formatting helpers for CLI commands."""

from decimal import Decimal

import click

RULE_WIDTH = 78


def format_money(amount: Decimal) -> str:
    """Format an amount as pesos with dot thousands, e.g. ``$1.234.567``.

    Cents are shown only when present.
    """
    sign = "-" if amount < 0 else ""
    amount = abs(amount)
    if amount == amount.to_integral_value():
        digits = f"{amount:,.0f}"
        return f"{sign}${digits.replace(',', '.')}"
    digits = f"{amount:,.2f}"
    return f"{sign}$" + digits.replace(",", "_").replace(".", ",").replace("_", ".")


def echo_rule(char: str = "-") -> None:
    click.echo(char * RULE_WIDTH)


def echo_row(label: str, amount: Decimal, indent: int = 0) -> None:
    """Print a label and a right-aligned amount."""
    width = RULE_WIDTH - 20 - indent
    click.echo(f"{' ' * indent}{label[:width]:<{width}} {format_money(amount):>19}")
