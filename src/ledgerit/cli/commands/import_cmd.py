"""Feed import command."""

import click
from ledgerit.domain.entities import TransactionKind
from ledgerit.domain.feed_import import FeedImportService


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True))
@click.option(
    "--kind",
    required=True,
    type=click.Choice([kind.value for kind in TransactionKind]),
    help="Kind of feed the file holds",
)
@click.option("--source", default="remote", show_default=True, help="Channel the feed was observed through")
@click.pass_context
def import_feed(ctx, csv_file: str, kind: str, source: str):
    """Import transactions from a CSV export of a feed.

    Rows whose id was imported before replace the earlier observation, so
    re-importing an overlapping export does not double count.
    """
    db = ctx.obj["db"]
    service = FeedImportService(db)

    try:
        result = service.import_csv(csv_file, TransactionKind(kind), source=source)
        click.echo(f"\nImport complete:")
        click.echo(f"  Imported: {result['imported']} transactions")
        click.echo(f"  Replaced: {result['replaced']} earlier observations")
        click.echo(f"  Stored: {db.count_transactions()} transactions in total")
        if result["errors"]:
            click.echo(f"  Dropped: {result['dropped']} rows")
            for error in result["errors"]:
                click.echo(f"    {error}", err=True)
    except (ValueError, FileNotFoundError) as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_feed)
