"""Account mapping override commands."""

import click
from ledgerit.cli.error_handling import handle_domain_error
from ledgerit.domain.entities import Position
from ledgerit.domain.errors import DomainError
from ledgerit.domain.overrides import OverrideService


@click.group("override")
def override_group():
    """Remap the accounts a transaction posts to."""
    pass


@override_group.command("set")
@click.argument("transaction_id", metavar="TXN_ID")
@click.option("--debit", help="Account code for the debit side")
@click.option("--credit", help="Account code for the credit side")
@click.pass_context
def set_override(ctx, transaction_id: str, debit: str | None, credit: str | None):
    """Set the accounts used for a transaction's posting.

    Examples:
        ledgerit override set INV-001 --credit 4-1002
        ledgerit override set EXP-7 --debit 6-2001 --credit 1-1001
    """
    db = ctx.obj["db"]
    service = OverrideService(db)

    try:
        override = service.set_override(transaction_id, debit_account=debit, credit_account=credit)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    parts = [f"{line.position.value} {line.account_code}" for line in override.lines]
    click.echo(f"Override for '{transaction_id}': {', '.join(parts)}")
    for line in override.lines:
        if db.get_account(line.account_code) is None:
            click.echo(f"Warning: account {line.account_code} is not in the chart of accounts", err=True)


@override_group.command("list")
@click.pass_context
def list_overrides(ctx):
    """List all overrides."""
    db = ctx.obj["db"]
    service = OverrideService(db)

    overrides = service.list_overrides()
    if not overrides:
        click.echo("No overrides found.")
        return

    click.echo(f"\n{'Transaction':<24} {'Debit':<12} {'Credit':<12}")
    click.echo("-" * 50)
    for override in overrides:
        debit = override.account_for(Position.DEBIT) or "-"
        credit = override.account_for(Position.CREDIT) or "-"
        click.echo(f"{override.transaction_id:<24} {debit:<12} {credit:<12}")


@override_group.command("clear")
@click.argument("transaction_id", metavar="TXN_ID")
@click.pass_context
def clear_override(ctx, transaction_id: str):
    """Remove a transaction's override so the default mapping applies."""
    db = ctx.obj["db"]
    service = OverrideService(db)

    try:
        service.clear_override(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Cleared override for '{transaction_id}'")


def register_commands(cli):
    """Register override commands with main CLI."""
    cli.add_command(override_group)
