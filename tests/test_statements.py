"""Tests for financial statement derivation."""

from decimal import Decimal

from ledgerit.domain.entities import TrialBalanceRow
from ledgerit.domain.statements import (
    derive_balance_sheet,
    derive_profit_and_loss,
    derive_ratios,
)


def _row(code, ending, movement=None, name=None):
    ending = Decimal(ending)
    movement = ending if movement is None else Decimal(movement)
    return TrialBalanceRow(
        code=code,
        name=name or code,
        opening=ending - movement,
        period_debit=Decimal("0"),
        period_credit=Decimal("0"),
        movement=movement,
        ending=ending,
    )


def _trial_balance():
    return [
        _row("1-1001", "1450", name="Cash"),
        _row("1-2001", "300", name="Equipment"),
        _row("2-1001", "200", name="Accounts Payable"),
        _row("2-2001", "100", name="Bank Loan"),
        _row("3-1001", "1000", movement="0", name="Capital"),
        _row("4-1001", "1000", name="Sales Revenue"),
        _row("4-1002", "0", name="Service Revenue"),
        _row("5-1001", "400", name="Cost of Goods Sold"),
        _row("6-0000", "0"),
        _row("6-1001", "100", name="Rent"),
        _row("7-1001", "50", name="Interest Expense"),
    ]


class TestProfitAndLoss:
    """Tests for the profit & loss statement."""

    def test_totals(self):
        pl = derive_profit_and_loss(_trial_balance())

        assert pl.revenue.total == Decimal("1000")
        assert pl.cost_of_goods_sold.total == Decimal("400")
        assert pl.operating_expenses.total == Decimal("100")
        assert pl.other_expenses.total == Decimal("50")
        assert pl.gross_profit == Decimal("600")
        assert pl.net_profit == Decimal("450")

    def test_zero_accounts_are_not_listed(self):
        pl = derive_profit_and_loss(_trial_balance())
        assert [line.code for line in pl.revenue.lines] == ["4-1001"]
        assert [line.code for line in pl.operating_expenses.lines] == ["6-1001"]

    def test_lines_sorted_by_value(self):
        rows = [_row("6-1001", "100"), _row("6-2001", "300"), _row("6-3001", "200")]
        pl = derive_profit_and_loss(rows)
        assert [line.code for line in pl.operating_expenses.lines] == ["6-2001", "6-3001", "6-1001"]

    def test_uses_period_movement_not_ending(self):
        pl = derive_profit_and_loss([_row("4-1001", "5000", movement="1200")])
        assert pl.revenue.total == Decimal("1200")

    def test_codes_without_dash(self):
        pl = derive_profit_and_loss([_row("41001", "700"), _row("51001", "300")])
        assert pl.gross_profit == Decimal("400")


class TestBalanceSheet:
    """Tests for the balance sheet."""

    def test_sections(self):
        bs = derive_balance_sheet(_trial_balance())

        assert bs.current_assets.total == Decimal("1450")
        assert bs.fixed_assets.total == Decimal("300")
        assert bs.current_liabilities.total == Decimal("200")
        assert bs.long_term_liabilities.total == Decimal("100")
        assert bs.equity.total == Decimal("1000")
        assert bs.total_assets == Decimal("1750")
        assert bs.total_liabilities == Decimal("300")

    def test_retained_earnings_plug(self):
        bs = derive_balance_sheet(_trial_balance())

        assert bs.retained_earnings == Decimal("450")
        assert bs.total_equity == Decimal("1450")
        assert bs.total_assets == bs.total_liabilities + bs.total_equity

    def test_plug_matches_ledger_earnings_when_balanced(self):
        bs = derive_balance_sheet(_trial_balance())
        assert bs.ledger_earnings == Decimal("450")
        assert bs.plug_discrepancy == Decimal("0")

    def test_plug_hides_imbalance_but_discrepancy_shows_it(self):
        rows = _trial_balance()
        rows[0] = _row("1-1001", "1550", name="Cash")

        bs = derive_balance_sheet(rows)

        assert bs.total_assets == bs.total_liabilities + bs.total_equity
        assert bs.plug_discrepancy == Decimal("100")

    def test_other_asset_prefixes(self):
        bs = derive_balance_sheet([_row("1-3001", "80"), _row("2-3001", "80")])
        assert bs.other_assets.total == Decimal("80")
        assert bs.other_liabilities.total == Decimal("80")
        assert bs.current_assets.lines == ()


class TestRatios:
    """Tests for headline ratios."""

    def test_ratios(self):
        rows = _trial_balance()
        ratios = derive_ratios(derive_profit_and_loss(rows), derive_balance_sheet(rows))

        assert ratios.gross_margin == Decimal("60.00")
        assert ratios.net_margin == Decimal("45.00")
        assert ratios.expense_ratio == Decimal("50.00")
        assert ratios.current_ratio == Decimal("7.25")
        assert ratios.debt_to_equity == Decimal("0.21")

    def test_zero_denominators(self):
        ratios = derive_ratios(derive_profit_and_loss([]), derive_balance_sheet([]))
        assert ratios.gross_margin == Decimal("0")
        assert ratios.current_ratio == Decimal("0")
        assert ratios.debt_to_equity == Decimal("0")
