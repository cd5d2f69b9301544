"""CLI error handling helpers."""

import logging

import click

from obraledger.domain.errors import DomainError, StorageError

logger = logging.getLogger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    if isinstance(error, StorageError):
        logger.error("Storage failure: %s", error)
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
