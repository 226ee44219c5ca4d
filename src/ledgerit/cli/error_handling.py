"""CLI error handling helpers."""

import logging

import click

from ledgerit.domain.errors import DomainError, NotFoundError

logger = logging.getLogger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error on stderr and exit with failure.

    Lookups that found nothing are not bugs; every other error is also logged
    with its traceback for ``--verbose`` runs.
    """
    if not isinstance(error, NotFoundError):
        logger.debug("Command %s failed", ctx.command_path, exc_info=error)
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
