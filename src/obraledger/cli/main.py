"""Main CLI entry point."""

import logging

import click

from obraledger.config import LOG_LEVELS, load_settings
from obraledger.database.factories import create_sqlite_database
from obraledger.domain.chart import DEFAULT_CHART, load_chart
from obraledger.domain.errors import DomainError
from obraledger.logging_config import setup_logging

from obraledger.cli.commands import calc, chart, entry, movements, report
from obraledger.cli.error_handling import handle_domain_error

logger = logging.getLogger(__name__)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(dir_okay=False),
    help="Path to database file (overrides OBRALEDGER_DB_PATH environment variable)",
    envvar="OBRALEDGER_DB_PATH",
)
@click.option(
    "--chart",
    "chart_path",
    type=click.Path(exists=True, dir_okay=False),
    help="JSON chart of accounts replacing the built-in one (env: OBRALEDGER_CHART)",
    envvar="OBRALEDGER_CHART",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Console log level (env: OBRALEDGER_LOG_LEVEL, default WARNING)",
    envvar="OBRALEDGER_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, chart_path: str | None, log_level: str | None):
    """Obraledger - Accounting core for construction companies.

    Record balanced double-entry movements, derive trial balance, income
    statement and balance sheet, and run quotation, payroll and loan
    calculations.
    """
    ctx.ensure_object(dict)

    try:
        settings = load_settings()
    except DomainError as e:
        handle_domain_error(ctx, e)
    setup_logging(log_level or settings.log_level, settings.log_file)

    try:
        ctx.obj["chart"] = load_chart(chart_path) if chart_path else DEFAULT_CHART
    except DomainError as e:
        handle_domain_error(ctx, e)

    # Initialize database connection only when a command needs it
    # (not for help or the pure calculators)
    if ctx.invoked_subcommand not in (None, "calc", "chart"):
        try:
            db = create_sqlite_database(database_path=db_path)
        except DomainError as e:
            handle_domain_error(ctx, e)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)
        logger.debug("Using database %s", db.database_url)


# Register all commands
chart.register_commands(cli)
entry.register_commands(cli)
movements.register_commands(cli)
report.register_commands(cli)
calc.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
