"""CLI helpers for date range resolution."""

from datetime import date

import click

from obraledger.utils.date_parser import get_date_range, parse_date

PERIOD_FLAGS = (
    ("this-month", "Current month to date"),
    ("this-quarter", "Current quarter to date"),
    ("this-year", "Current year to date"),
    ("last-month", "Previous month"),
    ("last-quarter", "Previous quarter"),
    ("last-year", "Previous year"),
)


def period_options(command):
    """Attach the --this-month/--last-year/... flags to a command."""
    for name, help_text in reversed(PERIOD_FLAGS):
        command = click.option(f"--{name}", is_flag=True, help=help_text)(command)
    return command


def collect_period_flags(kwargs: dict) -> dict[str, bool]:
    """Pick the period flags out of command kwargs, keyed by period name."""
    return {name: bool(kwargs.get(name.replace("-", "_"))) for name, _ in PERIOD_FLAGS}


def parse_date_or_exit(ctx: click.Context, value: str | None, label: str) -> date | None:
    """Parse an optional date option, or exit with a CLI error."""
    if not value:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    default_range: tuple[date, date] | None = None,
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from period flags or explicit dates."""
    period_count = sum(1 for is_set in period_flags.values() if is_set)

    if period_count > 1:
        names = ", ".join(f"--{name}" for name, _ in PERIOD_FLAGS)
        click.echo(f"Error: Only one period option ({names}) can be specified at a time.", err=True)
        ctx.exit(1)

    if period_count > 0 and (start_date or end_date):
        click.echo(
            "Error: Period options cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if period_count == 1:
        period = next(name for name, is_set in period_flags.items() if is_set)
        return get_date_range(period)

    start = parse_date_or_exit(ctx, start_date, "start date")
    end = parse_date_or_exit(ctx, end_date, "end date")
    if start is None and end is None and default_range is not None:
        start, end = default_range
    return start, end
