"""Ledger report commands."""

from decimal import Decimal

import click
from ledgerit.cli.date_filters import period_options, resolve_cli_period
from ledgerit.domain.engine import LedgerEngine
from ledgerit.domain.entities import StatementSection
from ledgerit.domain.errors import account_not_found

WIDTH = 80


def _money(amount: Decimal) -> str:
    return f"{amount:,.2f}"


def _period_title(title: str, start, end) -> None:
    click.echo(f"\n{title} ({start.isoformat()} to {end.isoformat()})")
    click.echo("=" * WIDTH)


def _echo_section(section: StatementSection) -> None:
    click.echo(section.name)
    click.echo("*" * WIDTH)
    for line in section.lines:
        label = f"{line.code} {line.name}"
        click.echo(f"    {label[:52]:<52} {_money(line.amount):>23}")
    click.echo("-" * WIDTH)
    click.echo(f"{'Total ' + section.name:<56} {_money(section.total):>23}")
    click.echo()


@click.command("journal")
@period_options
@click.pass_context
def journal(ctx, start_date, end_date, month, year, period):
    """Show the generated journal for a period."""
    start, end = resolve_cli_period(
        ctx, start_date=start_date, end_date=end_date, month=month, year=year, period=period
    )
    engine = LedgerEngine(ctx.obj["db"])

    lines = engine.journal(start, end)
    if not lines:
        click.echo("No journal lines found.")
        return

    _period_title("Journal", start, end)
    click.echo(f"{'Date':<10} {'Ref':<14} {'Account':<10} {'Description':<20} {'Debit':>11} {'Credit':>11}")
    click.echo("-" * WIDTH)
    for line in lines:
        debit = _money(line.debit) if line.debit else ""
        credit = _money(line.credit) if line.credit else ""
        click.echo(
            f"{line.date.isoformat():<10} {line.ref[:14]:<14} {line.account_code:<10} "
            f"{line.description[:20]:<20} {debit:>11} {credit:>11}"
        )


@click.command("trial-balance")
@period_options
@click.pass_context
def trial_balance(ctx, start_date, end_date, month, year, period):
    """Show opening, period movement and ending balance per account."""
    start, end = resolve_cli_period(
        ctx, start_date=start_date, end_date=end_date, month=month, year=year, period=period
    )
    engine = LedgerEngine(ctx.obj["db"])
    report = engine.report(start, end)

    _period_title("Trial Balance", start, end)
    click.echo(f"{'Code':<10} {'Name':<18} {'Opening':>12} {'Debit':>12} {'Credit':>12} {'Ending':>12}")
    click.echo("-" * WIDTH)
    for row in report.trial_balance:
        click.echo(
            f"{row.code:<10} {row.name[:18]:<18} {_money(row.opening):>12} "
            f"{_money(row.period_debit):>12} {_money(row.period_credit):>12} {_money(row.ending):>12}"
        )
    click.echo("-" * WIDTH)
    click.echo(f"Debit-normal total:  {_money(report.integrity.debit_total)}")
    click.echo(f"Credit-normal total: {_money(report.integrity.credit_total)}")
    for warning in report.warnings:
        click.echo(f"Warning: {warning}", err=True)


@click.command("pl")
@period_options
@click.option("--ratios", is_flag=True, help="Also show margin and balance ratios")
@click.option("--compare", is_flag=True, help="Also compare with the previous period")
@click.pass_context
def profit_and_loss(ctx, start_date, end_date, month, year, period, ratios: bool, compare: bool):
    """Show the profit & loss statement for a period."""
    start, end = resolve_cli_period(
        ctx, start_date=start_date, end_date=end_date, month=month, year=year, period=period
    )
    engine = LedgerEngine(ctx.obj["db"])
    pl = engine.profit_and_loss(start, end)

    _period_title("Profit & Loss", start, end)
    _echo_section(pl.revenue)
    _echo_section(pl.cost_of_goods_sold)
    click.echo(f"{'Gross Profit':<56} {_money(pl.gross_profit):>23}")
    click.echo()
    _echo_section(pl.operating_expenses)
    if pl.other_expenses.total or pl.other_expenses.lines:
        _echo_section(pl.other_expenses)
    click.echo("=" * WIDTH)
    click.echo(f"{'Net Profit':<56} {_money(pl.net_profit):>23}")

    if ratios:
        r = engine.ratios(start, end)
        click.echo()
        click.echo(f"Gross margin:   {r.gross_margin}%")
        click.echo(f"Net margin:     {r.net_margin}%")
        click.echo(f"Expense ratio:  {r.expense_ratio}%")
        click.echo(f"Current ratio:  {r.current_ratio}")
        click.echo(f"Debt to equity: {r.debt_to_equity}")

    if compare:
        comparison = engine.profit_and_loss_comparison(start, end)
        previous = comparison.previous
        click.echo()
        click.echo(
            f"Compared with {comparison.previous_start.isoformat()} to {comparison.previous_end.isoformat()}"
        )
        click.echo(f"{'':<20} {'Current':>19} {'Previous':>19} {'Change':>19}")
        click.echo("-" * WIDTH)
        for label, current_amount, previous_amount in (
            ("Total Income", pl.revenue.total, previous.revenue.total),
            ("Total Expenses", pl.total_expenses, previous.total_expenses),
            ("Net Profit", pl.net_profit, previous.net_profit),
        ):
            click.echo(
                f"{label:<20} {_money(current_amount):>19} {_money(previous_amount):>19} "
                f"{_money(current_amount - previous_amount):>19}"
            )


@click.command("balance-sheet")
@period_options
@click.pass_context
def balance_sheet(ctx, start_date, end_date, month, year, period):
    """Show the balance sheet as of the end of a period."""
    start, end = resolve_cli_period(
        ctx, start_date=start_date, end_date=end_date, month=month, year=year, period=period
    )
    engine = LedgerEngine(ctx.obj["db"])
    report = engine.report(start, end)
    bs = report.balance_sheet

    _period_title("Balance Sheet", start, end)
    for section in (bs.current_assets, bs.fixed_assets, bs.other_assets):
        if section.lines or section.total:
            _echo_section(section)
    click.echo(f"{'Total Assets':<56} {_money(bs.total_assets):>23}")
    click.echo("=" * WIDTH)
    for section in (bs.current_liabilities, bs.long_term_liabilities, bs.other_liabilities):
        if section.lines or section.total:
            _echo_section(section)
    click.echo(f"{'Total Liabilities':<56} {_money(bs.total_liabilities):>23}")
    click.echo("=" * WIDTH)
    _echo_section(bs.equity)
    click.echo(f"{'Retained Earnings':<56} {_money(bs.retained_earnings):>23}")
    click.echo(f"{'Total Equity':<56} {_money(bs.total_equity):>23}")
    click.echo("=" * WIDTH)
    click.echo(f"{'Total Liabilities & Equity':<56} {_money(bs.total_liabilities + bs.total_equity):>23}")
    for warning in report.warnings:
        click.echo(f"Warning: {warning}", err=True)


@click.command("check")
@period_options
@click.pass_context
def check(ctx, start_date, end_date, month, year, period):
    """Check that the ledger balances; exits with 1 when it does not."""
    start, end = resolve_cli_period(
        ctx, start_date=start_date, end_date=end_date, month=month, year=year, period=period
    )
    engine = LedgerEngine(ctx.obj["db"])
    report = engine.report(start, end)
    integrity = report.integrity

    click.echo(f"Debit-normal total:  {_money(integrity.debit_total)}")
    click.echo(f"Credit-normal total: {_money(integrity.credit_total)}")
    for warning in report.warnings:
        click.echo(f"Warning: {warning}", err=True)

    if integrity.is_balanced:
        click.echo("Balanced")
    else:
        click.echo(f"Out of balance by {_money(integrity.discrepancy)}")
        ctx.exit(1)


@click.command("ledger")
@click.argument("account_code", metavar="CODE")
@period_options
@click.pass_context
def account_ledger(ctx, account_code: str, start_date, end_date, month, year, period):
    """Show the general ledger of one account with running balances."""
    start, end = resolve_cli_period(
        ctx, start_date=start_date, end_date=end_date, month=month, year=year, period=period
    )
    db = ctx.obj["db"]
    if db.get_account(account_code) is None:
        click.echo(f"Warning: {account_not_found(account_code)}", err=True)

    ledger = LedgerEngine(db).account_ledger(account_code, start, end)

    _period_title(f"Ledger {ledger.code} {ledger.name}", start, end)
    click.echo(f"{'Date':<10} {'Ref':<14} {'Description':<16} {'Debit':>12} {'Credit':>12} {'Balance':>12}")
    click.echo("-" * WIDTH)
    click.echo(f"{'':<10} {'':<14} {'Opening':<16} {'':>12} {'':>12} {_money(ledger.opening):>12}")
    for entry in ledger.entries:
        debit = _money(entry.debit) if entry.debit else ""
        credit = _money(entry.credit) if entry.credit else ""
        click.echo(
            f"{entry.date.isoformat():<10} {entry.ref[:14]:<14} {entry.description[:16]:<16} "
            f"{debit:>12} {credit:>12} {_money(entry.balance):>12}"
        )
    click.echo("-" * WIDTH)
    click.echo(
        f"{'':<10} {'':<14} {'Closing':<16} {_money(ledger.total_debit):>12} "
        f"{_money(ledger.total_credit):>12} {_money(ledger.closing):>12}"
    )


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(journal)
    cli.add_command(trial_balance)
    cli.add_command(profit_and_loss)
    cli.add_command(balance_sheet)
    cli.add_command(check)
    cli.add_command(account_ledger)
