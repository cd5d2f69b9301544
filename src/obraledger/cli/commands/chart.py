"""Chart of accounts commands."""

import click

from obraledger.domain.chart import AccountType
from obraledger.domain.errors import UnknownAccountError


@click.group()
def chart_group():
    """Inspect the chart of accounts."""
    pass


@chart_group.command("list")
@click.option(
    "--type",
    "account_type",
    type=click.Choice([t.value for t in AccountType], case_sensitive=False),
    help="Only show one class",
)
@click.pass_context
def list_accounts(ctx, account_type: str | None) -> None:
    """List account codes, names and classes."""
    chart = ctx.obj["chart"]

    rows = []
    for code, name in chart.items():
        try:
            kind = chart.classify(code).value
        except UnknownAccountError:
            kind = "unclassified"
        if account_type and kind != account_type.lower():
            continue
        rows.append((code, name, kind))

    if not rows:
        click.echo("No accounts found.")
        return

    click.echo(f"{'Code':<10} {'Name':<40} {'Class':<12}")
    click.echo("-" * 64)
    for code, name, kind in rows:
        click.echo(f"{code:<10} {name:<40} {kind:<12}")


def register_commands(cli: click.Group) -> None:
    """Register chart commands with main CLI."""
    cli.add_command(chart_group, name="chart")
