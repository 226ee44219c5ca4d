"""Main CLI entry point."""

import logging

import click
from ledgerit.database.factories import create_sqlite_database

# Import and register all commands at module level
from ledgerit.cli.commands import (
    coa,
    product,
    import_cmd,
    override,
    reports,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides LEDGERIT_DB_PATH environment variable)",
    envvar="LEDGERIT_DB_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Log recomputation details to stderr")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Ledgerit - Double-entry ledger consolidation.

    Import sales, purchase, expense, payment and point-of-sale feeds, then
    produce the journal, trial balance, profit & loss and balance sheet for
    any reporting period.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db


# Register all commands
coa.register_commands(cli)
product.register_commands(cli)
import_cmd.register_commands(cli)
override.register_commands(cli)
reports.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
