"""Chart of accounts commands."""

import click
from ledgerit.domain.accounts import AccountRegistry
from ledgerit.domain.entities import Account
from ledgerit.domain.feed_import import FeedImportService, read_csv_rows


def _echo_account(account: Account) -> None:
    click.echo(
        f"{account.code:<10} {account.name[:32]:<32} {account.category[:16]:<16} "
        f"{account.opening_balance:>18,.2f}"
    )


@click.group("coa")
def coa_group():
    """Manage the chart of accounts."""
    pass


@coa_group.command("import")
@click.argument("csv_file", type=click.Path(exists=True))
@click.pass_context
def import_chart(ctx, csv_file: str):
    """Load accounts from a CSV export of the chart of accounts.

    Expected columns: Account_Code, Account_Name, Category and optionally
    Opening_Balance. Existing accounts with the same code are replaced.
    """
    db = ctx.obj["db"]
    service = FeedImportService(db)

    try:
        count = service.import_chart(read_csv_rows(csv_file))
    except (ValueError, FileNotFoundError) as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
    click.echo(f"Loaded {count} accounts")


@coa_group.command("list")
@click.option("--by-category", is_flag=True, help="Group accounts under their category")
@click.pass_context
def list_chart(ctx, by_category: bool):
    """List the chart of accounts."""
    db = ctx.obj["db"]
    registry = AccountRegistry(db.list_accounts())

    if not len(registry):
        click.echo("No accounts found.")
        return

    click.echo("\nChart of Accounts:")
    click.echo("-" * 80)
    click.echo(f"{'Code':<10} {'Name':<32} {'Category':<16} {'Opening':>18}")
    click.echo("-" * 80)
    if not by_category:
        for account in registry:
            _echo_account(account)
        return

    for category, accounts in registry.by_category().items():
        click.echo(f"\n{category} ({len(accounts)})")
        for account in accounts:
            _echo_account(account)


def register_commands(cli):
    """Register chart of accounts commands with main CLI."""
    cli.add_command(coa_group)
