"""Financial statement derivers.

Project a trial balance into a profit & loss statement (period movement by
account-code prefix) and a balance sheet (ending balances by prefix). Prefixes
are compared on the digits of the code, so ``1-1001`` and ``11001`` both fall
under current assets.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Callable, Iterable, Sequence

from ledgerit.domain.entities import (
    BalanceSheetReport,
    FinancialRatios,
    ProfitAndLossReport,
    StatementLine,
    StatementSection,
    TrialBalanceRow,
    ZERO,
)

HUNDRED = Decimal("100")
CENT = Decimal("0.01")


def _digits(code: str) -> str:
    return "".join(ch for ch in code if ch.isdigit())


def _section(
    name: str,
    rows: Iterable[TrialBalanceRow],
    value: Callable[[TrialBalanceRow], Decimal],
    sort_by_value: bool,
) -> StatementSection:
    """Sum rows into a section; zero rows count in the total but are not listed."""
    total = ZERO
    lines = []
    for row in rows:
        amount = value(row)
        total += amount
        if amount != ZERO:
            lines.append(StatementLine(code=row.code, name=row.name, amount=amount))
    if sort_by_value:
        lines.sort(key=lambda line: (-line.amount, line.code))
    else:
        lines.sort(key=lambda line: line.code)
    return StatementSection(name=name, lines=tuple(lines), total=total)


def _rows_with_prefix(
    trial_balance: Sequence[TrialBalanceRow], *prefixes: str
) -> list[TrialBalanceRow]:
    return [row for row in trial_balance if _digits(row.code).startswith(prefixes)]


def derive_profit_and_loss(trial_balance: Sequence[TrialBalanceRow]) -> ProfitAndLossReport:
    """Derive the profit & loss statement from period movements.

    ``4`` revenue, ``5`` cost of goods sold, ``6`` operating expenses and
    ``7``-``9`` other expenses. Movements are already polarity-adjusted, so
    every section total is positive in the normal case.
    """

    def movement(row: TrialBalanceRow) -> Decimal:
        return row.movement

    revenue = _section("Revenue", _rows_with_prefix(trial_balance, "4"), movement, True)
    cogs = _section("Cost of Goods Sold", _rows_with_prefix(trial_balance, "5"), movement, True)
    opex = _section("Operating Expenses", _rows_with_prefix(trial_balance, "6"), movement, True)
    other = _section("Other Expenses", _rows_with_prefix(trial_balance, "7", "8", "9"), movement, True)

    gross_profit = revenue.total - cogs.total
    net_profit = gross_profit - opex.total - other.total
    return ProfitAndLossReport(
        revenue=revenue,
        cost_of_goods_sold=cogs,
        operating_expenses=opex,
        other_expenses=other,
        gross_profit=gross_profit,
        net_profit=net_profit,
    )


def derive_balance_sheet(trial_balance: Sequence[TrialBalanceRow]) -> BalanceSheetReport:
    """Derive the balance sheet from ending balances.

    Retained earnings is not a ledger account; it is the plug
    ``total_assets - (total_liabilities + equity)``, so the statement
    balances by construction. ``plug_discrepancy`` compares the plug with
    the earnings actually accumulated on income statement accounts and is
    non-zero exactly when the underlying ledger is out of balance.
    """

    def ending(row: TrialBalanceRow) -> Decimal:
        return row.ending

    current_assets = _section("Current Assets", _rows_with_prefix(trial_balance, "11"), ending, False)
    fixed_assets = _section("Fixed Assets", _rows_with_prefix(trial_balance, "12"), ending, False)
    other_assets = _section(
        "Other Assets",
        [r for r in _rows_with_prefix(trial_balance, "1") if not _digits(r.code).startswith(("11", "12"))],
        ending,
        False,
    )
    current_liabilities = _section("Current Liabilities", _rows_with_prefix(trial_balance, "21"), ending, False)
    long_term_liabilities = _section("Long-term Liabilities", _rows_with_prefix(trial_balance, "22"), ending, False)
    other_liabilities = _section(
        "Other Liabilities",
        [r for r in _rows_with_prefix(trial_balance, "2") if not _digits(r.code).startswith(("21", "22"))],
        ending,
        False,
    )
    equity = _section("Equity", _rows_with_prefix(trial_balance, "3"), ending, False)

    total_assets = current_assets.total + fixed_assets.total + other_assets.total
    total_liabilities = current_liabilities.total + long_term_liabilities.total + other_liabilities.total
    retained_earnings = total_assets - (total_liabilities + equity.total)

    income = sum((r.ending for r in _rows_with_prefix(trial_balance, "4")), ZERO)
    expenses = sum((r.ending for r in _rows_with_prefix(trial_balance, "5", "6", "7", "8", "9")), ZERO)
    ledger_earnings = income - expenses

    return BalanceSheetReport(
        current_assets=current_assets,
        fixed_assets=fixed_assets,
        other_assets=other_assets,
        current_liabilities=current_liabilities,
        long_term_liabilities=long_term_liabilities,
        other_liabilities=other_liabilities,
        equity=equity,
        total_assets=total_assets,
        total_liabilities=total_liabilities,
        retained_earnings=retained_earnings,
        total_equity=equity.total + retained_earnings,
        ledger_earnings=ledger_earnings,
        plug_discrepancy=retained_earnings - ledger_earnings,
    )


def _ratio(numerator: Decimal, denominator: Decimal, scale: Decimal = Decimal("1")) -> Decimal:
    if denominator == ZERO:
        return ZERO
    return (numerator / denominator * scale).quantize(CENT, rounding=ROUND_HALF_UP)


def derive_ratios(pl: ProfitAndLossReport, bs: BalanceSheetReport) -> FinancialRatios:
    """Derive headline ratios; a zero denominator yields zero."""
    revenue = pl.revenue.total
    expenses = pl.cost_of_goods_sold.total + pl.operating_expenses.total
    return FinancialRatios(
        gross_margin=_ratio(pl.gross_profit, revenue, HUNDRED),
        net_margin=_ratio(pl.net_profit, revenue, HUNDRED),
        expense_ratio=_ratio(expenses, revenue, HUNDRED),
        current_ratio=_ratio(bs.current_assets.total, bs.current_liabilities.total),
        debt_to_equity=_ratio(bs.total_liabilities, bs.total_equity),
    )
