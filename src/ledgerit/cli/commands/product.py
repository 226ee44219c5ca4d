"""Product master commands."""

import click
from ledgerit.domain.feed_import import FeedImportService, read_csv_rows


@click.group("product")
def product_group():
    """Manage product unit costs."""
    pass


@product_group.command("import")
@click.argument("csv_file", type=click.Path(exists=True))
@click.pass_context
def import_products(ctx, csv_file: str):
    """Load unit costs from a CSV export of the product master.

    Expected columns: SKU, Product_Name and Std_Cost_Budget. The costs are
    used for cost of goods sold lines of sales imported afterwards.
    """
    db = ctx.obj["db"]
    service = FeedImportService(db)

    try:
        count = service.import_products(read_csv_rows(csv_file))
    except (ValueError, FileNotFoundError) as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
    click.echo(f"Loaded {count} unit costs")


@product_group.command("list")
@click.pass_context
def list_products(ctx):
    """List known unit costs."""
    db = ctx.obj["db"]
    costs = db.list_unit_costs()

    if not costs:
        click.echo("No products found.")
        return

    click.echo(f"\n{'SKU':<20} {'Unit cost':>18}")
    click.echo("-" * 40)
    for sku in sorted(costs):
        click.echo(f"{sku:<20} {costs[sku]:>18,.2f}")


def register_commands(cli):
    """Register product commands with main CLI."""
    cli.add_command(product_group)
